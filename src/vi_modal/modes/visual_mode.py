"""Visual modes: character, line and block selections."""

from __future__ import annotations

from vi_modal.engine.state import EditorMode

from .keymap_mode import KeymapMode


class VisualMode(KeymapMode):
    name = EditorMode.VISUAL


class VisualLineMode(KeymapMode):
    name = EditorMode.VISUAL_LINE


class VisualBlockMode(KeymapMode):
    name = EditorMode.VISUAL_BLOCK


__all__ = ["VisualBlockMode", "VisualLineMode", "VisualMode"]
