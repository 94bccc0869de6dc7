"""Normal-mode commands: motions, single-key edits, paste and mode entry."""

from __future__ import annotations

from vi_modal.engine.state import EditorMode, FindKind, Operator, SimpleChange
from vi_modal.host import ActionCall
from vi_modal.keymaps.resolver import ResolutionMatch
from vi_modal.modes.base_mode import ModeContext, ModeResult
from vi_modal.operators.composer import run_counted

REPLACE_NOT_IMPLEMENTED = "Replace is not implemented"


# -- motions ---------------------------------------------------------------
def line_start_or_digit(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    """``0`` extends a pending count, otherwise moves to the line start."""

    del match
    if context.counter.pending:
        context.counter.accumulate(0)
        return ModeResult(consumed=True, status="count", preserves_count=True)
    context.host.execute_action("move_line_start")
    return ModeResult(consumed=True)


def word_end(context: ModeContext, match: ResolutionMatch) -> None:
    del match
    for _ in range(context.counter.consume()):
        context.host.execute_action("move_word_right")
        context.host.execute_action("move_left")


async def first_non_blank(context: ModeContext, match: ResolutionMatch) -> None:
    del match
    context.counter.reset()
    host = context.host
    start = host.line_start_position(host.cursor_line())
    if start is None:
        return
    end = min(host.buffer_length(), start + context.settings.find_char_window)
    text = await host.get_text(start, end)
    offset = 0
    while offset < len(text) and text[offset] in " \t":
        offset += 1
    host.set_cursor(start + offset)


def half_page(context: ModeContext, match: ResolutionMatch, *, down: bool) -> None:
    del match
    lines = context.settings.half_page_lines * context.counter.consume()
    action = "move_down" if down else "move_up"
    context.host.execute_actions([ActionCall(action, lines)])


# -- insert entry ----------------------------------------------------------
def insert_before(context: ModeContext, match: ResolutionMatch) -> EditorMode:
    del context, match
    return EditorMode.INSERT


def insert_with(context: ModeContext, match: ResolutionMatch, *, actions: tuple[str, ...]) -> EditorMode:
    """Run ``actions`` (``a``, ``I``, ``A``, ``o``, ``O``) then enter insert mode."""

    del match
    for action in actions:
        context.host.execute_action(action)
    return EditorMode.INSERT


# -- single-key edits ------------------------------------------------------
def delete_char(context: ModeContext, match: ResolutionMatch, *, action: str) -> None:
    """``x``/``X``: a counted primitive delete, recorded for ``.``."""

    del match
    count = context.counter.consume()
    context.state.record_change(SimpleChange(action=action, count=count))
    run_counted(context.host, action, count)


def substitute(context: ModeContext, match: ResolutionMatch) -> EditorMode:
    del match
    count = context.counter.consume()
    context.state.record_change(
        SimpleChange(action="substitute", count=count), enters_insert=True
    )
    run_counted(context.host, "delete_forward", count)
    return EditorMode.INSERT


def to_line_end(context: ModeContext, match: ResolutionMatch, *, operator: Operator) -> EditorMode:
    """``D``/``C``."""

    del match
    context.counter.reset()
    context.components.composer.apply_to_line_end(operator)
    if operator is Operator.CHANGE:
        return EditorMode.INSERT
    return EditorMode.NORMAL


def replace_char(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del context, match
    return ModeResult(consumed=True, status="info", message=REPLACE_NOT_IMPLEMENTED)


def join_lines(context: ModeContext, match: ResolutionMatch) -> None:
    del match
    host = context.host
    host.execute_action("move_line_end")
    host.execute_action("delete_forward")
    host.insert_text(" ")


# -- clipboard -------------------------------------------------------------
def paste(context: ModeContext, match: ResolutionMatch, *, after: bool) -> None:
    """``p``/``P``; line-wise yanks land on their own line."""

    del match
    host = context.host
    if context.state.last_yank_was_linewise:
        if after:
            host.execute_action("move_down")
        host.execute_action("move_line_start")
        host.execute_action("paste")
        host.execute_action("move_up")
        host.execute_action("move_line_start")
        return
    if after:
        host.execute_action("move_right")
    host.execute_action("paste")


async def repeat_last_change(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    message = await context.components.repeat.replay()
    if message:
        return ModeResult(consumed=True, status="info", message=message)
    return ModeResult(consumed=True)


# -- composed-command entry ------------------------------------------------
def begin_operator(context: ModeContext, match: ResolutionMatch, *, operator: Operator) -> EditorMode:
    del match
    context.state.pending_operator = operator
    return EditorMode.OPERATOR_PENDING


def begin_find_char(context: ModeContext, match: ResolutionMatch, *, kind: FindKind) -> EditorMode:
    del match
    context.counter.reset()
    return context.components.find_char.begin(kind)


async def repeat_find_char(context: ModeContext, match: ResolutionMatch, *, reverse: bool) -> None:
    del match
    context.counter.reset()
    await context.components.find_char.repeat(reverse=reverse)


def open_command_line(context: ModeContext, match: ResolutionMatch) -> None:
    del match
    settings = context.settings
    context.host.start_prompt(settings.command_prompt, settings.command_prompt_type)


__all__ = [
    "REPLACE_NOT_IMPLEMENTED",
    "begin_find_char",
    "begin_operator",
    "delete_char",
    "first_non_blank",
    "half_page",
    "insert_before",
    "insert_with",
    "join_lines",
    "line_start_or_digit",
    "open_command_line",
    "paste",
    "repeat_find_char",
    "repeat_last_change",
    "replace_char",
    "substitute",
    "to_line_end",
    "word_end",
]
