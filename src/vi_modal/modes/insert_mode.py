"""Insert mode: everything but Escape reaches the host as text."""

from __future__ import annotations

from vi_modal.engine.state import EditorMode

from .base_mode import KeyInput, ModeResult
from .keymap_mode import KeymapMode


class InsertMode(KeymapMode):
    name = EditorMode.INSERT

    async def handle_unbound(self, key: KeyInput) -> ModeResult:
        del key
        return ModeResult(consumed=False, status="passthrough")


__all__ = ["InsertMode"]
