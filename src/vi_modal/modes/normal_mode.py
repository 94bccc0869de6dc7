"""Normal mode: navigation, operators and mode entry."""

from __future__ import annotations

from vi_modal.engine.state import EditorMode

from .keymap_mode import KeymapMode


class NormalMode(KeymapMode):
    name = EditorMode.NORMAL


__all__ = ["NormalMode"]
