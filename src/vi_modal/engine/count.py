"""Pending repeat-count bookkeeping."""

from __future__ import annotations

from typing import Optional

from .state import EngineState


class CountAccumulator:
    """Reads and writes ``EngineState.count``.

    Digits typed after an operator are appended to whatever count was typed
    before it, so ``2d3w`` consumes 23 rather than 6.
    """

    def __init__(self, state: EngineState) -> None:
        self._state = state

    @property
    def pending(self) -> bool:
        return self._state.count is not None

    def accumulate(self, digit: int) -> int:
        if not 0 <= digit <= 9:
            raise ValueError(f"count digit out of range: {digit}")
        current = self._state.count
        self._state.count = digit if current is None else current * 10 + digit
        return self._state.count

    def starts_count(self, digit: int) -> bool:
        """``0`` with nothing pending is a motion, not a count digit."""

        return digit != 0 or self.pending

    def peek(self) -> Optional[int]:
        return self._state.count

    def consume(self) -> int:
        count = self._state.count if self._state.count is not None else 1
        self._state.count = None
        return count

    def reset(self) -> None:
        self._state.count = None


__all__ = ["CountAccumulator"]
