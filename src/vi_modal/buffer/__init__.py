"""Buffer abstractions and undo/redo data structures."""

from .buffer import Buffer, BufferDelta, Transaction
from .document import BufferDocument
from .registers import RegisterBank, RegisterValue
from .state import BufferState
from .sync import BufferMirror, BufferValidationError
from .undo import UndoEntry, UndoTimeline
from .validation import ensure_offset, ensure_range

__all__ = [
    "BufferDocument",
    "BufferState",
    "RegisterBank",
    "RegisterValue",
    "UndoTimeline",
    "UndoEntry",
    "Buffer",
    "BufferDelta",
    "Transaction",
    "BufferMirror",
    "BufferValidationError",
    "ensure_offset",
    "ensure_range",
]
