"""Actions dedicated to visual mode selection management."""

from __future__ import annotations

from vi_modal.engine.state import EditorMode, Operator
from vi_modal.keymaps.resolver import ResolutionMatch
from vi_modal.modes.base_mode import ModeContext


def enter_visual(context: ModeContext, match: ResolutionMatch, *, mode: EditorMode) -> EditorMode:
    del match
    return context.components.visual.enter(mode)


def switch_visual(context: ModeContext, match: ResolutionMatch, *, mode: EditorMode) -> EditorMode:
    """Toggle to another visual shape, or leave when already in it."""

    del match
    if context.state.mode is mode:
        return EditorMode.NORMAL
    return context.components.visual.switch_to(mode)


def extend_selection(context: ModeContext, match: ResolutionMatch, *, action: str) -> None:
    del match
    context.components.visual.extend(action, context.counter.consume())


def extend_once(context: ModeContext, match: ResolutionMatch, *, action: str) -> None:
    """Line/document boundaries ignore the count."""

    del match
    context.counter.reset()
    context.components.visual.extend(action)


def extend_word_end(context: ModeContext, match: ResolutionMatch) -> None:
    del match
    context.components.visual.extend_word_end(context.counter.consume())


def extend_lines(context: ModeContext, match: ResolutionMatch, *, down: bool) -> None:
    del match
    count = context.counter.consume()
    context.components.visual.move_lines(count if down else -count)


def extend_to_boundary(context: ModeContext, match: ResolutionMatch, *, end: bool) -> None:
    """``gg``/``G`` in visual-line mode snap to the first/last line."""

    del match
    context.counter.reset()
    line = context.host.line_count() if end else 1
    context.components.visual.to_line(line)


def apply_operator(context: ModeContext, match: ResolutionMatch, *, operator: Operator) -> EditorMode:
    del match
    context.counter.reset()
    return context.components.visual.apply_operator(operator)


__all__ = [
    "apply_operator",
    "enter_visual",
    "extend_lines",
    "extend_once",
    "extend_selection",
    "extend_to_boundary",
    "extend_word_end",
    "switch_visual",
]
