"""Core action implementations shared across modes."""

from __future__ import annotations

from vi_modal.engine.state import EditorMode
from vi_modal.keymaps.resolver import ResolutionMatch
from vi_modal.modes.base_mode import ModeContext, ModeResult
from vi_modal.operators.composer import run_counted


def accumulate_digit(context: ModeContext, match: ResolutionMatch, *, digit: int) -> ModeResult:
    del match
    context.counter.accumulate(digit)
    return ModeResult(consumed=True, status="count", preserves_count=True)


def return_to_normal(context: ModeContext, match: ResolutionMatch) -> EditorMode:
    del context, match
    return EditorMode.NORMAL


def run_action(context: ModeContext, match: ResolutionMatch, *, action: str) -> None:
    """Forward to one host action; any pending count is dropped."""

    del match
    context.host.execute_action(action)


def run_counted_action(context: ModeContext, match: ResolutionMatch, *, action: str) -> None:
    del match
    run_counted(context.host, action, context.counter.consume())


__all__ = [
    "accumulate_digit",
    "return_to_normal",
    "run_action",
    "run_counted_action",
]
