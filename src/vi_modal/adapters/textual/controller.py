"""Minimal Textual adapter that wires the vi engine into UI callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional

from vi_modal.buffer import BufferMirror
from vi_modal.engine.vi_engine import ViEngine
from vi_modal.modes import KeyInput, ModeResult
from vi_modal.runtime import telemetry

from .host import TextAreaHost

# Textual key names -> engine key notation.
_NAMED_KEYS = {
    "escape": "Escape",
    "enter": "Enter",
    "return": "Enter",
    "tab": "Tab",
    "space": "Space",
    "backspace": "Backspace",
}

_MODIFIERS = ("ctrl", "alt", "shift")


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


def normalize_textual_key(key: str, character: Optional[str] = None) -> KeyInput:
    """Translate a Textual key name (``"ctrl+v"``, ``"escape"``, ``"G"``)."""

    parts = key.split("+")
    modifiers = tuple(part for part in parts[:-1] if part in _MODIFIERS)
    base = parts[-1]
    if base in _NAMED_KEYS:
        name = _NAMED_KEYS[base]
        text = None if modifiers else {"Enter": "\n", "Tab": "\t", "Space": " "}.get(name)
        return KeyInput(key=name, modifiers=modifiers, text=text)
    if character and len(character) == 1 and not modifiers:
        return KeyInput(key=character, text=character)
    # Shift is already folded into the character for printable keys.
    modifiers = tuple(mod for mod in modifiers if mod != "shift" or len(base) > 1)
    return KeyInput(key=base, modifiers=modifiers)


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_buffer: Callable[[BufferMirror], None]
    update_status: Callable[[str], None] = _noop
    show_command: Callable[[str], None] = _noop
    handle_event: Callable[[str, object | None], None] = _noop
    # Optional realtime log callback a host may use to surface debug lines
    log: Callable[[str], None] = _noop


class TextualViAdapter:
    """Bridges a :class:`ViEngine` and its bus events to Textual widgets."""

    def __init__(self, engine: ViEngine, host: TextAreaHost, hooks: TextualUIHooks) -> None:
        self.engine = engine
        self.host = host
        self.hooks = hooks
        self.logger = telemetry.get_logger("vi_modal.adapters.textual")
        self._subscribe_events()
        self._refresh_buffer()

    async def handle_textual_key(
        self,
        key: str,
        *,
        character: Optional[str] = None,
    ) -> ModeResult:
        """Translate a Textual key event into a KeyInput and dispatch it."""

        key_input = normalize_textual_key(key, character)
        self._log_state("key ->", key=key_input.token)
        result = await self.engine.handle_key(key_input)
        if not result.consumed:
            self.engine.pass_through(key_input)
        self._refresh_buffer()
        self._log_state(
            "result <-",
            consumed=result.consumed,
            status=result.status,
            message=result.message,
            switch_to=result.switch_to.value if result.switch_to else None,
        )
        return result

    async def submit_command(self, text: str) -> None:
        await self.engine.on_prompt_confirmed(self.engine.settings.command_prompt_type, text)
        self.hooks.show_command("")
        self._refresh_buffer()

    def cancel_command(self) -> None:
        self.engine.on_prompt_cancelled(self.engine.settings.command_prompt_type)
        self.hooks.show_command("")

    def _subscribe_events(self) -> None:
        bus = self.engine.context.bus
        for event in ("command.submit", "command.error", "command.cancel"):
            bus.subscribe(
                event, lambda payload, name=event: self._handle_event(name, payload)
            )

    def _handle_event(self, name: str, payload: object | None) -> None:
        self._log_state("event ->", event=name, payload=payload)
        self.hooks.handle_event(name, payload)

    def _refresh_buffer(self) -> None:
        self.hooks.update_buffer(self.host.mirror())

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = self._state_metadata()
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            parts.append(f"{key}={value!r}")
        line = " ".join(parts)
        self.logger.debug(line)
        self.hooks.log(line)

    def _state_metadata(self) -> Dict[str, object]:
        state = self.engine.state
        return {
            "mode": state.mode.value,
            "count": state.count,
            "cursor": self.host.cursor,
            "selection": self.host.selection,
            "buffer": self.host.buffer.name,
        }


__all__ = ["TextualUIHooks", "TextualViAdapter", "normalize_textual_key"]
