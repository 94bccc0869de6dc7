"""Helper utilities for keymap-driven modes."""

from __future__ import annotations

from vi_modal.keymaps.models import KeyStroke
from vi_modal.keymaps.resolver import KeymapResolver

from .base_mode import KeyInput, ModeContext


def key_to_token(key: KeyInput) -> str:
    return key.token


def parse_key(notation: str) -> KeyInput:
    """Build a :class:`KeyInput` from binding notation (``x``, ``C-v``, ``Space``)."""

    stroke = KeyStroke.parse(notation)
    return KeyInput(key=stroke.key, modifiers=stroke.modifiers, text=stroke.text)


def require_keymap_resolver(context: ModeContext) -> KeymapResolver:
    resolver = context.extras.get("keymap_resolver")
    if not isinstance(resolver, KeymapResolver):
        raise RuntimeError("ModeContext.extras missing 'keymap_resolver'")
    return resolver


__all__ = ["key_to_token", "parse_key", "require_keymap_resolver"]
