"""Single-character find motions ``f``, ``t``, ``F``, ``T`` and their repeats."""

from __future__ import annotations

from typing import Optional

from vi_modal.engine.state import EditorMode, EngineState, FindCharMemory, FindKind
from vi_modal.host import ActionCall, HostEditor
from vi_modal.runtime import telemetry
from vi_modal.runtime.settings import EngineSettings


def target_column(line: str, column: int, kind: FindKind, character: str) -> Optional[int]:
    """Column the cursor lands on, or ``None`` when ``character`` is absent."""

    if kind.forward:
        index = line.find(character, column + 1)
        if index == -1:
            return None
        return index - 1 if kind.till else index
    index = line.rfind(character, 0, max(column, 0))
    if index == -1:
        return None
    return index + 1 if kind.till else index


class FindCharTracker:
    """Resolves find motions on the cursor's line and remembers the last one."""

    def __init__(self, host: HostEditor, state: EngineState, settings: EngineSettings) -> None:
        self.host = host
        self.state = state
        self.settings = settings

    def begin(self, kind: FindKind) -> EditorMode:
        self.state.pending_find_char = kind
        return EditorMode.FIND_CHAR

    def cancel(self) -> EditorMode:
        self.state.pending_find_char = None
        return EditorMode.NORMAL

    async def complete(self, character: str) -> EditorMode:
        kind = self.state.pending_find_char
        if kind is not None:
            await self.execute(kind, character)
        self.state.pending_find_char = None
        return EditorMode.NORMAL

    async def repeat(self, *, reverse: bool = False) -> bool:
        memory = self.state.last_find_char
        if memory is None:
            return False
        kind = memory.kind.reversed() if reverse else memory.kind
        return await self.execute(kind, memory.character, remember=False)

    async def execute(self, kind: FindKind, character: str, *, remember: bool = True) -> bool:
        cursor = self.host.cursor_position()
        if cursor is None or (cursor == 0 and not kind.forward):
            return False

        window = self.settings.find_char_window
        window_start = max(0, cursor - window)
        window_end = min(self.host.buffer_length(), cursor + window)
        text = await self.host.get_text(window_start, window_end)
        if not text:
            return False

        position = cursor - window_start
        line_start = text.rfind("\n", 0, position) + 1
        line_end = text.find("\n", position)
        if line_end == -1:
            line_end = len(text)
        column = position - line_start

        target = target_column(text[line_start:line_end], column, kind, character)
        if target is None:
            telemetry.record_event(
                "find_char.miss",
                level="debug",
                data={"kind": kind.value, "character": character},
            )
            return False

        delta = target - column
        if delta:
            action = "move_right" if delta > 0 else "move_left"
            self.host.execute_actions([ActionCall(action, abs(delta))])
        if remember and delta:
            self.state.last_find_char = FindCharMemory(kind=kind, character=character)
        return True


__all__ = ["FindCharTracker", "target_column"]
