"""Anchor-based character, line and block selections."""

from __future__ import annotations

from typing import Optional

from vi_modal.engine.state import BlockAnchor, EditorMode, EngineState, Operator
from vi_modal.host import ActionCall, HostEditor
from vi_modal.operators.composer import run_counted


class VisualController:
    """Keeps the host selection in step with the engine's visual anchors.

    Every motion goes through a ``select_*`` primitive so the host selection
    always spans anchor to cursor. Line mode rebuilds the selection from
    whole lines (``select_line``) after each vertical move.
    """

    def __init__(self, host: HostEditor, state: EngineState) -> None:
        self.host = host
        self.state = state

    # -- entry / toggles ---------------------------------------------------
    def enter(self, mode: EditorMode) -> EditorMode:
        cursor = self.host.cursor_position() or 0
        line = self.host.cursor_line()
        self.state.visual_anchor = cursor
        self.state.visual_anchor_line = line
        self.state.visual_head_line = line
        if mode is EditorMode.VISUAL_LINE:
            self._snap_lines()
            return mode
        if mode is EditorMode.VISUAL_BLOCK:
            line_start = self.host.line_start_position(line)
            column = cursor - line_start if line_start is not None else 0
            self.state.visual_block_anchor = BlockAnchor(line=line, column=column)
        self.host.execute_action("select_right")
        return mode

    def switch_to(self, target: EditorMode) -> EditorMode:
        """Re-shape the live selection for ``target`` without restarting it."""

        current = self.state.mode
        if target is EditorMode.VISUAL_LINE:
            self.state.visual_head_line = self.host.cursor_line()
            self._snap_lines()
        elif current is EditorMode.VISUAL_LINE:
            self._lines_to_chars()
        if target is EditorMode.VISUAL_BLOCK and self.state.visual_block_anchor is None:
            self.state.visual_block_anchor = self._anchor_as_block()
        return target

    # -- motions -----------------------------------------------------------
    def extend(self, action: str, count: int = 1) -> None:
        run_counted(self.host, action, count)
        self.state.visual_head_line = self.host.cursor_line()

    def extend_word_end(self, count: int = 1) -> None:
        for _ in range(count):
            self.host.execute_action("select_word_right")
            self.host.execute_action("select_left")
        self.state.visual_head_line = self.host.cursor_line()

    def move_lines(self, delta: int) -> None:
        head = self.state.visual_head_line or self.host.cursor_line()
        self.state.visual_head_line = max(1, min(head + delta, self.host.line_count()))
        self._snap_lines()

    def to_line(self, line: int) -> None:
        self.state.visual_head_line = max(1, min(line, self.host.line_count()))
        self._snap_lines()

    # -- operators ---------------------------------------------------------
    def selection_start(self) -> Optional[int]:
        if self.state.mode is EditorMode.VISUAL_LINE:
            return self.host.line_start_position(self._line_span()[0])
        cursor = self.host.cursor_position()
        anchor = self.state.visual_anchor
        if cursor is None or anchor is None:
            return cursor if anchor is None else anchor
        return min(cursor, anchor)

    def apply_operator(self, operator: Operator) -> EditorMode:
        linewise = self.state.mode is EditorMode.VISUAL_LINE
        if operator is Operator.YANK:
            start = self.selection_start()
            self.host.execute_action("copy")
            self.state.last_yank_was_linewise = linewise
            if start is not None:
                self.host.set_cursor(start)
            return EditorMode.NORMAL
        self.host.execute_action("cut")
        self.state.last_yank_was_linewise = linewise
        if operator is Operator.CHANGE:
            return EditorMode.INSERT
        return EditorMode.NORMAL

    # -- helpers -----------------------------------------------------------
    def _line_span(self) -> tuple[int, int]:
        anchor_line = self.state.visual_anchor_line or self.host.cursor_line()
        head_line = self.state.visual_head_line or anchor_line
        return min(anchor_line, head_line), max(anchor_line, head_line)

    def _snap_lines(self) -> None:
        top, bottom = self._line_span()
        start = self.host.line_start_position(top)
        if start is None:
            return
        self.host.set_cursor(start)
        run_counted(self.host, "select_line", bottom - top + 1)

    def _lines_to_chars(self) -> None:
        anchor = self.state.visual_anchor
        anchor_line = self.state.visual_anchor_line
        head_line = self.state.visual_head_line
        if anchor is None or anchor_line is None or head_line is None:
            return
        if head_line < anchor_line:
            head = self.host.line_start_position(head_line) or 0
        else:
            following = self.host.line_start_position(head_line + 1)
            head = following - 1 if following is not None else self.host.buffer_length()
        self.host.set_cursor(anchor)
        delta = head - anchor
        if delta > 0:
            self.host.execute_actions([ActionCall("select_right", delta)])
        elif delta < 0:
            self.host.execute_actions([ActionCall("select_left", -delta)])

    def _anchor_as_block(self) -> BlockAnchor:
        line = self.state.visual_anchor_line or self.host.cursor_line()
        line_start = self.host.line_start_position(line) or 0
        anchor = self.state.visual_anchor if self.state.visual_anchor is not None else line_start
        return BlockAnchor(line=line, column=anchor - line_start)


__all__ = ["VisualController"]
