"""Snapshot and error types shared with host adapters."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .state import Selection


@dataclass(slots=True)
class BufferMirror:
    """Host-friendly snapshot describing the current buffer state."""

    text: str
    cursor: int
    selection: Optional[Selection]
    attributes: dict[str, str] = field(default_factory=dict)


class BufferValidationError(RuntimeError):
    """Raised when an offset or range falls outside the buffer."""

    def __init__(self, message: str, *, offset: int | None = None) -> None:
        super().__init__(message)
        self.offset = offset
