"""Cursor and selection state for in-memory buffers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

Selection = Tuple[int, int]  # (start, end) offsets, start <= end


@dataclass(slots=True)
class BufferState:
    """Cursor offset plus an optional selection anchor.

    A selection exists while ``anchor`` is set; it spans from the anchor to
    the cursor in whichever order they fall.
    """

    cursor: int = 0
    anchor: Optional[int] = None
    goal_column: Optional[int] = None

    @property
    def selection(self) -> Optional[Selection]:
        if self.anchor is None or self.anchor == self.cursor:
            return None
        return (min(self.anchor, self.cursor), max(self.anchor, self.cursor))

    def set_cursor(self, offset: int, *, keep_goal: bool = False) -> None:
        self.cursor = offset
        if not keep_goal:
            self.goal_column = None

    def clear_selection(self) -> None:
        self.anchor = None

    def start_selection(self) -> None:
        if self.anchor is None:
            self.anchor = self.cursor
