"""Text storage for the in-memory host."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
from typing import List


@dataclass(slots=True)
class BufferDocument:
    """Flat text plus a cached table of line start offsets.

    Lines are 1-based at this API (matching host ``cursor_line``); offsets
    are 0-based indexes into ``text``.
    """

    text: str = ""
    version: int = 0
    _line_starts: List[int] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        self._line_starts = _scan_line_starts(self.text)

    @classmethod
    def from_text(cls, text: str) -> "BufferDocument":
        return cls(text=text)

    def replace_text(self, text: str) -> "BufferDocument":
        """Return a new document holding ``text`` with a bumped version."""

        return BufferDocument(text=text, version=self.version + 1)

    def __len__(self) -> int:
        return len(self.text)

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def line_of(self, offset: int) -> int:
        return bisect_right(self._line_starts, offset)

    def line_start(self, line: int) -> int:
        return self._line_starts[line - 1]

    def line_end(self, line: int) -> int:
        """Offset of the line's newline, or the end of the text."""

        if line < self.line_count:
            return self._line_starts[line] - 1
        return len(self.text)


def _scan_line_starts(text: str) -> List[int]:
    starts = [0]
    index = text.find("\n")
    while index != -1:
        starts.append(index + 1)
        index = text.find("\n", index + 1)
    return starts
