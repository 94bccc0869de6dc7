"""High-level buffer façade combining document, cursor state and undo."""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import ContextManager, Optional

from vi_modal.runtime import telemetry

from .document import BufferDocument
from .state import BufferState, Selection
from .sync import BufferMirror
from .undo import UndoEntry, UndoTimeline
from .validation import ensure_offset, ensure_range


@dataclass(slots=True)
class BufferDelta:
    version: int
    text: str
    cursor: int
    selection: Optional[Selection]
    label: str


class Buffer:
    def __init__(
        self,
        *,
        name: str = "default",
        path: Optional[str] = None,
        document: Optional[BufferDocument] = None,
        state: Optional[BufferState] = None,
        undo: Optional[UndoTimeline] = None,
    ) -> None:
        self.name = name
        self.path = path
        self.document = document or BufferDocument()
        self.state = state or BufferState()
        self.undo = undo or UndoTimeline()
        self.saved_text = self.document.text

    @classmethod
    def from_text(
        cls, text: str, *, name: str = "default", path: Optional[str] = None
    ) -> "Buffer":
        return cls(name=name, path=path, document=BufferDocument.from_text(text))

    @property
    def text(self) -> str:
        return self.document.text

    @property
    def modified(self) -> bool:
        return self.document.text != self.saved_text

    def mark_saved(self) -> None:
        self.saved_text = self.document.text

    def mirror(self, *, attributes: Optional[dict[str, str]] = None) -> BufferMirror:
        return BufferMirror(
            text=self.document.text,
            cursor=self.state.cursor,
            selection=self.state.selection,
            attributes=dict(attributes or {}),
        )

    def move_cursor(self, offset: int, *, keep_goal: bool = False) -> int:
        """Clamp ``offset`` into the buffer and move the cursor there."""

        clamped = max(0, min(offset, len(self.document)))
        self.state.set_cursor(clamped, keep_goal=keep_goal)
        return clamped

    def replace_range(self, start: int, end: int, text: str, *, label: str) -> BufferDelta:
        start, end = ensure_range(self.document, start, end)
        with Transaction(self, label) as tx:
            before_text = self.document.text
            cursor_before = self.state.cursor
            new_text = before_text[:start] + text + before_text[end:]
            self.document = self.document.replace_text(new_text)
            self.state.clear_selection()
            self.state.set_cursor(start + len(text))
            tx.commit(before_text, new_text, cursor_before, self.state.cursor)

        return BufferDelta(
            version=self.document.version,
            text=self.document.text,
            cursor=self.state.cursor,
            selection=self.state.selection,
            label=label,
        )

    def insert_text(self, text: str, *, offset: Optional[int] = None) -> BufferDelta:
        position = self.state.cursor if offset is None else offset
        return self.replace_range(position, position, text, label="insert_text")

    def delete_range(self, start: int, end: int) -> BufferDelta:
        return self.replace_range(start, end, "", label="delete_range")

    def get_text_range(self, start: int, end: int) -> str:
        start = max(0, min(start, len(self.document)))
        end = max(0, min(end, len(self.document)))
        start, end = ensure_range(self.document, start, end)
        return self.document.text[start:end]

    def undo_step(self) -> bool:
        entry = self.undo.undo()
        if entry is None:
            return False
        self._restore(entry.before_text, entry.cursor_before)
        return True

    def redo_step(self) -> bool:
        entry = self.undo.redo()
        if entry is None:
            return False
        self._restore(entry.after_text, entry.cursor_after)
        return True

    def replace_all(self, text: str) -> None:
        """Swap in new contents without an undo entry (reload from disk)."""

        self.document = self.document.replace_text(text)
        self.undo.clear()
        self.state.clear_selection()
        self.move_cursor(min(self.state.cursor, len(text)))

    def _restore(self, text: str, cursor: int) -> None:
        self.document = self.document.replace_text(text)
        self.state.clear_selection()
        self.state.set_cursor(ensure_offset(self.document, min(cursor, len(text))))


class Transaction(AbstractContextManager["Transaction"]):
    def __init__(self, buffer: Buffer, label: str) -> None:
        self.buffer = buffer
        self.label = label
        self._span_cm: Optional[ContextManager[object]] = None

    def __enter__(self) -> "Transaction":
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            component=True,
            metadata={"buffer": self.buffer.name},
        )
        self._span_cm.__enter__()
        return self

    def commit(
        self,
        before_text: str,
        after_text: str,
        cursor_before: int,
        cursor_after: int,
    ) -> None:
        if before_text == after_text:
            return
        self.buffer.undo.push(
            UndoEntry(
                label=self.label,
                before_text=before_text,
                after_text=after_text,
                cursor_before=cursor_before,
                cursor_after=cursor_after,
            )
        )

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False
