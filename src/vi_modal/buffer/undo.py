"""Linear undo/redo history for in-memory buffers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True, slots=True)
class UndoEntry:
    label: str
    before_text: str
    after_text: str
    cursor_before: int
    cursor_after: int


class UndoTimeline:
    """Entries up to ``_index`` are undoable; the rest are redoable."""

    def __init__(self, *, limit: int = 1000) -> None:
        self._entries: List[UndoEntry] = []
        self._index: int = -1
        self._limit = limit

    def push(self, entry: UndoEntry) -> None:
        del self._entries[self._index + 1 :]
        self._entries.append(entry)
        if len(self._entries) > self._limit:
            del self._entries[0]
        self._index = len(self._entries) - 1

    @property
    def depth(self) -> int:
        return self._index + 1

    def can_undo(self) -> bool:
        return self._index >= 0

    def can_redo(self) -> bool:
        return self._index < len(self._entries) - 1

    def undo(self) -> Optional[UndoEntry]:
        if not self.can_undo():
            return None
        entry = self._entries[self._index]
        self._index -= 1
        return entry

    def redo(self) -> Optional[UndoEntry]:
        if not self.can_redo():
            return None
        self._index += 1
        return self._entries[self._index]

    def clear(self) -> None:
        self._entries.clear()
        self._index = -1
