"""Base classes and shared utilities for editor modes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple

from vi_modal.engine.components import EngineComponents
from vi_modal.engine.count import CountAccumulator
from vi_modal.engine.state import EditorMode, EngineState
from vi_modal.host import HostEditor
from vi_modal.keymaps.models import KeyStroke
from vi_modal.runtime.settings import EngineSettings


@dataclass(slots=True)
class KeyInput:
    """Normalized key event passed to modes.

    ``text`` is the character the key types, if any; insert mode hands it
    back to the host untouched.
    """

    key: str
    modifiers: Tuple[str, ...] = ()
    text: Optional[str] = None

    @property
    def token(self) -> str:
        return KeyStroke(self.key, self.modifiers).token


@dataclass(slots=True)
class ModeResult:
    """Result returned from ``Mode.handle_key``.

    ``preserves_count`` keeps the pending count alive past this keystroke.
    """

    consumed: bool
    switch_to: Optional[EditorMode] = None
    status: str = "ok"
    message: Optional[str] = None
    preserves_count: bool = False


@dataclass(slots=True)
class ModeContext:
    """Shared services every mode can access."""

    host: HostEditor
    state: EngineState
    counter: CountAccumulator
    settings: EngineSettings
    components: EngineComponents
    bus: "ModeBus"
    extras: Dict[str, object] = field(default_factory=dict)


class ModeBus:
    """Minimal event bus letting modes exchange structured signals."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Callable[[object], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in self._subscribers.get(event, []):
            callback(payload)


def as_mode_result(outcome: object, *, preserves_count: bool = False) -> ModeResult:
    """Normalize what a handler returned into a :class:`ModeResult`."""

    if isinstance(outcome, ModeResult):
        if preserves_count:
            outcome.preserves_count = True
        return outcome
    if isinstance(outcome, EditorMode):
        return ModeResult(consumed=True, switch_to=outcome, preserves_count=preserves_count)
    return ModeResult(consumed=True, preserves_count=preserves_count)


class Mode:
    """Base class all concrete editor modes inherit from."""

    name: EditorMode = EditorMode.NORMAL

    def __init__(self, context: ModeContext) -> None:
        self.context = context

    def on_enter(
        self, previous: Optional[EditorMode]
    ) -> None:  # pragma: no cover - default no-op
        del previous

    def on_exit(
        self, next_mode: Optional[EditorMode]
    ) -> None:  # pragma: no cover - default no-op
        del next_mode

    async def handle_key(
        self, key: KeyInput
    ) -> ModeResult:  # pragma: no cover - abstract override
        raise NotImplementedError


__all__ = [
    "KeyInput",
    "Mode",
    "ModeBus",
    "ModeContext",
    "ModeResult",
    "as_mode_result",
]
