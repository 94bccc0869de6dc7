"""Exceptions raised by the engine façade."""

from __future__ import annotations


class EngineBusyError(RuntimeError):
    """A synchronous call arrived while a keystroke was still in flight."""

    def __init__(self, operation: str) -> None:
        super().__init__(f"Cannot {operation} while a keystroke is being processed")
        self.operation = operation


__all__ = ["EngineBusyError"]
