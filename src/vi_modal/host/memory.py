"""Headless in-memory implementation of the host editor contract."""

from __future__ import annotations

import asyncio
import os
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from vi_modal.buffer import Buffer
from vi_modal.buffer import navigation as nav
from vi_modal.buffer.registers import UNNAMED, RegisterBank
from vi_modal.runtime import telemetry

from .protocol import ActionCall, BufferInfo, ModeDefinition

# Actions that only affect presentation; recorded but otherwise ignored.
UI_ACTIONS = frozenset(
    {
        "center_cursor",
        "clear_search",
        "close_other_splits",
        "find_next",
        "find_previous",
        "goto_first_diagnostic",
        "goto_last_diagnostic",
        "goto_next_diagnostic",
        "goto_prev_diagnostic",
        "search",
        "show_diagnostics",
        "split_horizontal",
        "split_vertical",
        "substitute",
    }
)


class MemoryHost:
    """Reference host backed by :class:`~vi_modal.buffer.Buffer` objects.

    Every executed action name is appended to ``calls`` so tests can assert on
    the primitive sequence the engine produced. ``files`` acts as a virtual
    file system for ``open_file``; nothing touches the disk.
    """

    def __init__(
        self,
        text: str = "",
        *,
        path: Optional[str] = None,
        files: Optional[Mapping[str, str]] = None,
        page_lines: int = 20,
        cwd: Optional[str] = None,
    ) -> None:
        self.files: Dict[str, str] = dict(files or {})
        self.page_lines = page_lines
        self.clipboard = RegisterBank()
        self.calls: List[str] = []
        self.modes: Dict[str, ModeDefinition] = {}
        self.editor_mode: Optional[str] = None
        self.status: Optional[str] = None
        self.prompt: Optional[tuple[str, str]] = None
        self.line_numbers = True
        self.wrap = True
        self.quit_requested = False
        self.text_reads = 0
        self._cwd = cwd or os.getcwd()
        self._buffers: Dict[int, Buffer] = {}
        self._next_id = 1
        self._active = self._add_buffer(Buffer.from_text(text, path=path, name=path or "scratch"))
        self._actions: Dict[str, Callable[[], bool]] = self._build_action_table()

    # ------------------------------------------------------------------
    # Convenience accessors
    # ------------------------------------------------------------------
    @property
    def buffer(self) -> Buffer:
        return self._buffers[self._active]

    @property
    def text(self) -> str:
        return self.buffer.text

    @property
    def cursor(self) -> int:
        return self.buffer.state.cursor

    @property
    def selection(self) -> Optional[tuple[int, int]]:
        return self.buffer.state.selection

    @property
    def clipboard_text(self) -> str:
        return self.clipboard.get().text

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------
    def execute_action(self, action: str) -> bool:
        self.calls.append(action)
        if action in UI_ACTIONS:
            return True
        handler = self._actions.get(action)
        if handler is None:
            telemetry.record_event(
                "host.unknown_action", level="debug", data={"action": action}
            )
            return False
        return handler()

    def execute_actions(self, calls: Sequence[ActionCall]) -> bool:
        ok = True
        for call in calls:
            for _ in range(call.count):
                ok = self.execute_action(call.action) and ok
        return ok

    # ------------------------------------------------------------------
    # Cursor and text
    # ------------------------------------------------------------------
    def cursor_position(self) -> Optional[int]:
        return self.buffer.state.cursor

    def cursor_line(self) -> int:
        return self.buffer.document.line_of(self.buffer.state.cursor)

    def line_start_position(self, line: int) -> Optional[int]:
        document = self.buffer.document
        if line < 1 or line > document.line_count:
            return None
        return document.line_start(line)

    def line_count(self) -> int:
        return self.buffer.document.line_count

    def buffer_length(self) -> int:
        return len(self.buffer.document)

    async def get_text(self, start: int, end: int) -> str:
        self.text_reads += 1
        await asyncio.sleep(0)
        return self.buffer.get_text_range(start, end)

    def delete_range(self, start: int, end: int) -> None:
        self.buffer.delete_range(start, end)

    def insert_text(self, text: str) -> None:
        self.buffer.insert_text(text)

    def set_cursor(self, offset: int) -> None:
        self.buffer.state.clear_selection()
        self.buffer.move_cursor(offset)

    # ------------------------------------------------------------------
    # Modes and UI
    # ------------------------------------------------------------------
    def define_mode(self, definition: ModeDefinition) -> None:
        self.modes[definition.name] = definition

    def set_editor_mode(self, name: Optional[str]) -> None:
        self.editor_mode = name

    def set_status(self, text: str) -> None:
        self.status = text

    def start_prompt(self, label: str, prompt_type: str) -> None:
        self.prompt = (label, prompt_type)

    def set_line_numbers(self, enabled: bool) -> None:
        self.line_numbers = enabled

    def cwd(self) -> str:
        return self._cwd

    # ------------------------------------------------------------------
    # Buffers
    # ------------------------------------------------------------------
    def active_buffer_id(self) -> int:
        return self._active

    def is_buffer_modified(self, buffer_id: int) -> bool:
        buffer = self._buffers.get(buffer_id)
        return buffer.modified if buffer is not None else False

    def list_buffers(self) -> Sequence[BufferInfo]:
        return [self._info(buffer_id) for buffer_id in sorted(self._buffers)]

    def buffer_info(self, buffer_id: int) -> Optional[BufferInfo]:
        if buffer_id not in self._buffers:
            return None
        return self._info(buffer_id)

    def show_buffer(self, buffer_id: int) -> None:
        if buffer_id in self._buffers:
            self._active = buffer_id

    def open_file(self, path: str, line: int = 0, column: int = 0) -> None:
        existing = next(
            (bid for bid, buf in self._buffers.items() if buf.path == path), None
        )
        if existing is None:
            buffer = Buffer.from_text(self.files.get(path, ""), path=path, name=path)
            existing = self._add_buffer(buffer)
        self._active = existing
        if line > 0:
            start = self.line_start_position(line)
            if start is None:
                start = self.buffer_length()
            self.buffer.move_cursor(start + max(column - 1, 0))

    def _info(self, buffer_id: int) -> BufferInfo:
        buffer = self._buffers[buffer_id]
        return BufferInfo(
            id=buffer_id,
            path=buffer.path,
            modified=buffer.modified,
            length=len(buffer.document),
        )

    def _add_buffer(self, buffer: Buffer) -> int:
        buffer_id = self._next_id
        self._next_id += 1
        self._buffers[buffer_id] = buffer
        return buffer_id

    # ------------------------------------------------------------------
    # Primitive catalogue
    # ------------------------------------------------------------------
    def _build_action_table(self) -> Dict[str, Callable[[], bool]]:
        motions: Dict[str, Callable[[str, int], int]] = {
            "left": lambda text, at: max(at - 1, 0),
            "right": lambda text, at: min(at + 1, len(text)),
            "word_left": nav.word_left,
            "word_right": nav.word_right,
            "line_start": nav.line_start,
            "line_end": nav.line_end,
            "document_start": lambda text, at: 0,
            "document_end": lambda text, at: len(text),
        }
        table: Dict[str, Callable[[], bool]] = {}
        for name, motion in motions.items():
            table[f"move_{name}"] = self._motion(motion, select=False)
            table[f"select_{name}"] = self._motion(motion, select=True)
        table.update(
            {
                "move_up": lambda: self._vertical(-1, select=False),
                "move_down": lambda: self._vertical(1, select=False),
                "select_up": lambda: self._vertical(-1, select=True),
                "select_down": lambda: self._vertical(1, select=True),
                "page_up": lambda: self._vertical(-self.page_lines, select=False),
                "page_down": lambda: self._vertical(self.page_lines, select=False),
                "select_line": self._select_line,
                "select_all": self._select_all,
                "go_to_matching_bracket": self._matching_bracket,
                "delete_forward": lambda: self._delete_char(forward=True),
                "delete_backward": lambda: self._delete_char(forward=False),
                "delete_word_forward": lambda: self._delete_to(nav.word_right),
                "delete_word_backward": lambda: self._delete_to(nav.word_left),
                "delete_to_line_end": lambda: self._delete_to(nav.line_end),
                "delete_to_line_start": lambda: self._delete_to(nav.line_start),
                "yank_word_forward": lambda: self._yank_to(nav.word_right),
                "yank_word_backward": lambda: self._yank_to(nav.word_left),
                "yank_to_line_end": lambda: self._yank_to(nav.line_end),
                "yank_to_line_start": lambda: self._yank_to(nav.line_start),
                "delete_line": self._delete_line,
                "insert_newline": lambda: self._insert("\n"),
                "cut": lambda: self._clip(remove=True),
                "copy": lambda: self._clip(remove=False),
                "paste": self._paste,
                "undo": lambda: self.buffer.undo_step(),
                "redo": lambda: self.buffer.redo_step(),
                "save": self._save,
                "save_all": self._save_all,
                "revert": self._revert,
                "close_buffer": self._close_buffer,
                "new_buffer": self._new_buffer,
                "next_buffer": lambda: self._cycle_buffer(1),
                "prev_buffer": lambda: self._cycle_buffer(-1),
                "quit_all": self._quit_all,
                "toggle_wrap": self._toggle_wrap,
            }
        )
        return table

    def _motion(self, motion: Callable[[str, int], int], *, select: bool) -> Callable[[], bool]:
        def run() -> bool:
            state = self.buffer.state
            if select:
                state.start_selection()
            else:
                state.clear_selection()
            before = state.cursor
            return self.buffer.move_cursor(motion(self.buffer.text, before)) != before

        return run

    def _vertical(self, lines: int, *, select: bool) -> bool:
        state = self.buffer.state
        text = self.buffer.text
        if select:
            state.start_selection()
        else:
            state.clear_selection()
        if state.goal_column is None:
            state.goal_column = state.cursor - nav.line_start(text, state.cursor)
        target = nav.vertical(text, state.cursor, lines, state.goal_column)
        moved = target != state.cursor
        self.buffer.move_cursor(target, keep_goal=True)
        return moved

    def _select_line(self) -> bool:
        state = self.buffer.state
        text = self.buffer.text
        if state.anchor is None:
            state.anchor = nav.line_start(text, state.cursor)
        end = nav.line_end(text, state.cursor)
        self.buffer.move_cursor(min(end + 1, len(text)))
        return True

    def _select_all(self) -> bool:
        self.buffer.state.anchor = 0
        self.buffer.move_cursor(len(self.buffer.text))
        return True

    def _matching_bracket(self) -> bool:
        target = nav.matching_bracket(self.buffer.text, self.buffer.state.cursor)
        if target is None:
            return False
        self.set_cursor(target)
        return True

    def _delete_char(self, *, forward: bool) -> bool:
        selection = self.buffer.state.selection
        if selection is not None:
            self.buffer.delete_range(*selection)
            return True
        cursor = self.buffer.state.cursor
        if forward:
            if cursor >= len(self.buffer.text):
                return False
            self.buffer.delete_range(cursor, cursor + 1)
        else:
            if cursor == 0:
                return False
            self.buffer.delete_range(cursor - 1, cursor)
        return True

    def _delete_to(self, motion: Callable[[str, int], int]) -> bool:
        cursor = self.buffer.state.cursor
        target = motion(self.buffer.text, cursor)
        if target == cursor:
            return False
        start, end = min(cursor, target), max(cursor, target)
        self.clipboard.yank_to(UNNAMED, self.buffer.text[start:end])
        self.buffer.delete_range(start, end)
        return True

    def _yank_to(self, motion: Callable[[str, int], int]) -> bool:
        cursor = self.buffer.state.cursor
        target = motion(self.buffer.text, cursor)
        start, end = min(cursor, target), max(cursor, target)
        self.clipboard.yank_to(UNNAMED, self.buffer.text[start:end])
        return start != end

    def _delete_line(self) -> bool:
        text = self.buffer.text
        cursor = self.buffer.state.cursor
        start = nav.line_start(text, cursor)
        end = nav.line_end(text, cursor)
        if end < len(text):
            end += 1
        elif start > 0:
            start -= 1
        if start == end:
            return False
        self.clipboard.yank_to(UNNAMED, text[start:end], linewise=True)
        self.buffer.delete_range(start, end)
        self.buffer.move_cursor(nav.line_start(self.buffer.text, min(start, len(self.buffer.text))))
        return True

    def _insert(self, text: str) -> bool:
        self.buffer.insert_text(text)
        return True

    def _clip(self, *, remove: bool) -> bool:
        selection = self.buffer.state.selection
        if selection is None:
            return False
        start, end = selection
        self.clipboard.yank_to(UNNAMED, self.buffer.text[start:end])
        if remove:
            self.buffer.delete_range(start, end)
        return True

    def _paste(self) -> bool:
        value = self.clipboard.get()
        if not value.text:
            return False
        selection = self.buffer.state.selection
        if selection is not None:
            self.buffer.replace_range(*selection, value.text, label="paste")
        else:
            self.buffer.insert_text(value.text)
        return True

    def _save(self) -> bool:
        buffer = self.buffer
        buffer.mark_saved()
        if buffer.path is not None:
            self.files[buffer.path] = buffer.text
        return True

    def _save_all(self) -> bool:
        active = self._active
        for buffer_id in list(self._buffers):
            self._active = buffer_id
            self._save()
        self._active = active
        return True

    def _revert(self) -> bool:
        buffer = self.buffer
        buffer.replace_all(buffer.saved_text)
        return True

    def _close_buffer(self) -> bool:
        ids = sorted(self._buffers)
        index = ids.index(self._active)
        del self._buffers[self._active]
        if not self._buffers:
            self._active = self._add_buffer(Buffer.from_text("", name="scratch"))
        else:
            remaining = sorted(self._buffers)
            self._active = remaining[min(index, len(remaining) - 1)]
        return True

    def _new_buffer(self) -> bool:
        self._active = self._add_buffer(Buffer.from_text("", name="scratch"))
        return True

    def _cycle_buffer(self, step: int) -> bool:
        ids = sorted(self._buffers)
        if len(ids) < 2:
            return False
        self._active = ids[(ids.index(self._active) + step) % len(ids)]
        return True

    def _quit_all(self) -> bool:
        self.quit_requested = True
        return True

    def _toggle_wrap(self) -> bool:
        self.wrap = not self.wrap
        return True


__all__ = ["MemoryHost", "UI_ACTIONS"]
