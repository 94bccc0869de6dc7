"""Mode base that resolves keys through the keymap trie."""

from __future__ import annotations

import inspect
from typing import List, Optional

from vi_modal.engine.state import EditorMode
from vi_modal.keymaps.resolver import ResolutionMatch
from vi_modal.runtime import telemetry

from .base_mode import KeyInput, Mode, ModeContext, ModeResult, as_mode_result
from .keymap_helpers import key_to_token, require_keymap_resolver


class KeymapMode(Mode):
    """Accumulates keys until the resolver reports a match or a miss.

    A multi-key prefix (``g`` of ``g g``) stays pending until the next key
    decides it; there is no timeout. On a miss after a prefix, the new key
    is retried on its own so ``g`` then ``Escape`` still cancels.
    """

    def __init__(self, context: ModeContext) -> None:
        super().__init__(context)
        self.logger = telemetry.get_logger(f"vi_modal.modes.{self.name.value}")
        self._resolver = require_keymap_resolver(context)
        self._pending: List[str] = []

    @property
    def pending_tokens(self) -> tuple[str, ...]:
        return tuple(self._pending)

    def on_enter(self, previous: Optional[EditorMode]) -> None:
        del previous
        self._pending.clear()

    def on_exit(self, next_mode: Optional[EditorMode]) -> None:
        del next_mode
        self._pending.clear()

    async def handle_key(self, key: KeyInput) -> ModeResult:
        token = key_to_token(key)
        self._pending.append(token)
        result = self._resolver.resolve(self.name.value, tuple(self._pending))

        if result.status == "miss" and len(self._pending) > 1:
            self._pending = [token]
            result = self._resolver.resolve(self.name.value, (token,))

        if result.status == "match" and result.match:
            self._pending.clear()
            return await self.execute(result.match)

        if result.status == "pending":
            return ModeResult(
                consumed=True,
                status="pending",
                message="awaiting_sequence",
                preserves_count=True,
            )

        self._pending.clear()
        return await self.handle_unbound(key)

    async def handle_unbound(self, key: KeyInput) -> ModeResult:
        """Read-only modes swallow keys they have no binding for."""

        del key
        return ModeResult(consumed=True, status="unbound")

    async def execute(self, match: ResolutionMatch) -> ModeResult:
        self._pending.clear()
        with telemetry.span(
            "keymaps::execute",
            component="keymaps",
            metadata={"binding_id": match.binding.id, "action": match.action.id},
        ):
            outcome = match.action(self.context, match)
            if inspect.isawaitable(outcome):
                outcome = await outcome

        return as_mode_result(outcome, preserves_count=match.action.preserves_count)


__all__ = ["KeymapMode"]
