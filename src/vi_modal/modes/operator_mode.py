"""Modes that wait for the rest of a composed command."""

from __future__ import annotations

from vi_modal.engine.state import EditorMode
from vi_modal.runtime import telemetry

from .base_mode import KeyInput, ModeResult
from .keymap_mode import KeymapMode


class OperatorPendingMode(KeymapMode):
    """After ``d``/``c``/``y``: waits for a count, motion or text object."""

    name = EditorMode.OPERATOR_PENDING


class TextObjectMode(KeymapMode):
    """After ``di``/``ca``...: waits for the object key."""

    name = EditorMode.TEXT_OBJECT


class FindCharMode(KeymapMode):
    """After ``f``/``t``/``F``/``T``: the next typed character is the target.

    Letters, digits and space are bound explicitly; any other printable key
    completes the find as well.
    """

    name = EditorMode.FIND_CHAR

    async def handle_unbound(self, key: KeyInput) -> ModeResult:
        character = key.text
        if not character or len(character) != 1 or not character.isprintable():
            return ModeResult(consumed=True, status="unbound")
        telemetry.record_event(
            "find_char.unbound_key", level="debug", data={"character": character}
        )
        target = await self.context.components.find_char.complete(character)
        return ModeResult(consumed=True, switch_to=target)


__all__ = ["FindCharMode", "OperatorPendingMode", "TextObjectMode"]
