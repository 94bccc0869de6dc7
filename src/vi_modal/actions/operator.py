"""Operator-pending, text-object and find-character handlers."""

from __future__ import annotations

from vi_modal.engine.state import (
    EditorMode,
    LineOpChange,
    Operator,
    TextObjectModifier,
)
from vi_modal.keymaps.resolver import ResolutionMatch
from vi_modal.modes.base_mode import ModeContext, ModeResult
from vi_modal.operators.composer import run_counted, target_mode
from vi_modal.operators.repeat import clear_line


def _yanked_message(count: int) -> str:
    return f"{count} line{'s' if count != 1 else ''} yanked"


def apply_motion(context: ModeContext, match: ResolutionMatch, *, motion: str) -> EditorMode:
    del match
    operator = context.state.pending_operator
    if operator is None:
        return EditorMode.NORMAL
    count = context.counter.consume()
    applied = context.components.composer.apply(operator, motion, count)
    return target_mode(operator, applied)


def line_start_or_digit(context: ModeContext, match: ResolutionMatch) -> object:
    """``0`` after an operator: count digit if one is pending, else ``d0``."""

    if context.counter.pending:
        context.counter.accumulate(0)
        return ModeResult(consumed=True, status="count", preserves_count=True)
    return apply_motion(context, match, motion="move_line_start")


# -- whole lines -----------------------------------------------------------
def delete_lines(context: ModeContext, match: ResolutionMatch) -> EditorMode:
    del match
    count = context.counter.consume()
    context.state.record_change(LineOpChange(action="delete_line", count=count))
    run_counted(context.host, "delete_line", count)
    return EditorMode.NORMAL


def change_lines(context: ModeContext, match: ResolutionMatch) -> EditorMode:
    """``cc``/``S``: empty the line and start inserting on it."""

    del match
    count = context.counter.consume()
    context.state.record_change(
        LineOpChange(action="change_line", count=count), enters_insert=True
    )
    clear_line(context.host)
    return EditorMode.INSERT


def yank_lines(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    host = context.host
    count = context.counter.consume()
    origin = host.line_start_position(host.cursor_line())
    run_counted(host, "select_line", count)
    host.execute_action("copy")
    if origin is not None:
        host.set_cursor(origin)
    context.state.last_yank_was_linewise = True
    return ModeResult(
        consumed=True,
        switch_to=EditorMode.NORMAL,
        status="info",
        message=_yanked_message(count),
    )


_LINE_OPS = {
    Operator.DELETE: delete_lines,
    Operator.CHANGE: change_lines,
    Operator.YANK: yank_lines,
}


def repeat_operator(context: ModeContext, match: ResolutionMatch, *, operator: Operator) -> object:
    """``dd``/``cc``/``yy``; a different operator key cancels instead."""

    if context.state.pending_operator is not operator:
        return EditorMode.NORMAL
    return _LINE_OPS[operator](context, match)


# -- text objects ----------------------------------------------------------
def begin_text_object(
    context: ModeContext, match: ResolutionMatch, *, modifier: TextObjectModifier
) -> EditorMode:
    del match
    if context.state.pending_operator is None:
        return EditorMode.NORMAL
    context.state.pending_text_object = modifier
    return EditorMode.TEXT_OBJECT


async def apply_text_object(context: ModeContext, match: ResolutionMatch) -> EditorMode:
    state = context.state
    operator = state.pending_operator
    modifier = state.pending_text_object
    context.counter.reset()
    if operator is None or modifier is None:
        return EditorMode.NORMAL
    object_key = match.binding.last_stroke.key
    applied = await context.components.text_objects.apply(operator, modifier, object_key)
    return target_mode(operator, applied)


# -- find character --------------------------------------------------------
async def complete_find_char(context: ModeContext, match: ResolutionMatch) -> EditorMode:
    character = match.binding.last_stroke.text
    if character is None:
        return context.components.find_char.cancel()
    return await context.components.find_char.complete(character)


def cancel_find_char(context: ModeContext, match: ResolutionMatch) -> EditorMode:
    del match
    return context.components.find_char.cancel()


__all__ = [
    "apply_motion",
    "apply_text_object",
    "begin_text_object",
    "cancel_find_char",
    "change_lines",
    "complete_find_char",
    "delete_lines",
    "line_start_or_digit",
    "repeat_operator",
    "yank_lines",
]
