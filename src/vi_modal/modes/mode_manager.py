"""Mode manager: the state machine that owns the active mode."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Dict, Optional, Type, TypeVar

from vi_modal.engine.state import (
    OPERATOR_MODES,
    EditorMode,
    InsertChange,
)
from vi_modal.keymaps import KeymapRegistry, KeymapResolver
from vi_modal.keymaps.defaults import load_default_keymaps
from vi_modal.runtime import telemetry

from .base_mode import KeyInput, Mode, ModeContext, ModeResult
from .keymap_mode import KeymapMode

T = TypeVar("T")

_LABELS = {
    EditorMode.NORMAL: "NORMAL",
    EditorMode.INSERT: "INSERT",
    EditorMode.VISUAL: "VISUAL",
    EditorMode.VISUAL_LINE: "VISUAL LINE",
    EditorMode.VISUAL_BLOCK: "VISUAL BLOCK",
}


def mode_indicator(context: ModeContext) -> str:
    """Status-line text for the current mode, including any pending count."""

    state = context.state
    mode = state.mode
    count = f" ({state.count})" if state.count is not None else ""
    if mode is EditorMode.INSERT:
        return "-- INSERT --"
    if mode is EditorMode.OPERATOR_PENDING:
        operator = state.pending_operator.value if state.pending_operator else "?"
        return f"-- OPERATOR ({operator}) --{count}"
    if mode is EditorMode.FIND_CHAR:
        kind = state.pending_find_char.value if state.pending_find_char else "?"
        return f"-- FIND ({kind}) --"
    if mode is EditorMode.TEXT_OBJECT:
        operator = state.pending_operator.value if state.pending_operator else "?"
        modifier = state.pending_text_object.key if state.pending_text_object else "?"
        return f"-- {operator}{modifier}? --"
    return f"-- {_LABELS[mode]} --{count}"


class ModeManager:
    """Owns the active mode, performs transitions and dispatches keys.

    ``handle_key`` and ``invoke`` are serialised by one lock: a keystroke
    that arrives while another is awaiting buffer text waits its turn.
    """

    def __init__(
        self,
        context: ModeContext,
        *,
        keymap_registry: KeymapRegistry | None = None,
        keymap_resolver: KeymapResolver | None = None,
        load_defaults: bool = True,
    ) -> None:
        self.context = context
        self._modes: Dict[EditorMode, Mode] = {}
        self._lock = asyncio.Lock()
        self.logger = telemetry.get_logger("vi_modal.modes")
        self.keymap_registry = keymap_registry or KeymapRegistry()
        if load_defaults and keymap_registry is None:
            load_default_keymaps(self.keymap_registry)
        self.keymap_resolver = keymap_resolver or KeymapResolver(self.keymap_registry)
        self.context.extras.setdefault("keymap_registry", self.keymap_registry)
        self.context.extras.setdefault("keymap_resolver", self.keymap_resolver)
        self.context.extras.setdefault("mode_manager", self)

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    @property
    def mode(self) -> EditorMode:
        return self.context.state.mode

    @property
    def active_mode(self) -> Optional[Mode]:
        return self._modes.get(self.context.state.mode)

    def register_mode(
        self,
        mode_cls: Type[Mode],
        /,
        *mode_args: object,
        **mode_kwargs: object,
    ) -> Mode:
        mode = mode_cls(self.context, *mode_args, **mode_kwargs)
        if mode.name in self._modes:
            raise ValueError(f"Mode '{mode.name.value}' already registered")
        self._modes[mode.name] = mode
        return mode

    def get_mode(self, name: EditorMode) -> Mode:
        try:
            return self._modes[name]
        except KeyError as exc:
            raise KeyError(f"Unknown mode '{name.value}'") from exc

    # -- dispatch ----------------------------------------------------------
    async def handle_key(self, key: KeyInput) -> ModeResult:
        async with self._lock:
            mode = self.active_mode
            if mode is None:
                raise RuntimeError("No active mode registered")
            count_before = self.context.state.count
            with telemetry.span(
                name=f"mode::{mode.name.value}",
                component=True,
                metadata={"key": key.token, "mode": mode.name.value},
            ):
                result = await mode.handle_key(key)
            return await self._after_mode_result(result, count_before)

    async def invoke(self, binding_id: str) -> ModeResult:
        """Run the binding a host callback names, as if its keys were typed."""

        async with self._lock:
            match = self.keymap_resolver.match_binding(binding_id)
            mode = self.active_mode
            if not isinstance(mode, KeymapMode) or match.binding.mode != mode.name.value:
                telemetry.record_event(
                    "mode.stale_binding",
                    level="debug",
                    data={"binding_id": binding_id, "mode": self.mode.value},
                )
                return ModeResult(consumed=False, status="stale")
            count_before = self.context.state.count
            with telemetry.span(
                name=f"mode::{mode.name.value}",
                component=True,
                metadata={"binding_id": binding_id, "mode": mode.name.value},
            ):
                result = await mode.execute(match)
            return await self._after_mode_result(result, count_before)

    async def run_exclusive(self, work: Callable[[], Awaitable[T]]) -> T:
        """Run ``work`` under the keystroke lock."""

        async with self._lock:
            return await work()

    async def _after_mode_result(
        self, result: ModeResult, count_before: Optional[int]
    ) -> ModeResult:
        if not result.preserves_count:
            self.context.counter.reset()
        if result.switch_to is not None:
            await self.transition_to(result.switch_to)
        elif self.context.state.count != count_before:
            self.publish_indicator()
        if result.message and result.status == "info":
            self.context.host.set_status(result.message)
        elif result.message and result.status == "error":
            self.context.host.set_status(f"E: {result.message}")
        return result

    # -- transitions -------------------------------------------------------
    async def transition_to(self, target: EditorMode) -> None:
        state = self.context.state
        if state.mode is EditorMode.INSERT and target is not EditorMode.INSERT:
            await self._capture_inserted_text()
        self.enter(target)

    def enter(self, target: EditorMode) -> None:
        """Apply a transition that needs no buffer read."""

        state = self.context.state
        host = self.context.host
        previous = state.mode

        if target not in OPERATOR_MODES:
            state.pending_operator = None
        if target is not EditorMode.TEXT_OBJECT:
            state.pending_text_object = None
        if target is not EditorMode.FIND_CHAR:
            state.pending_find_char = None
        if target not in OPERATOR_MODES and not target.is_visual:
            state.count = None
        if not target.is_visual:
            state.clear_visual()
            if previous.is_visual:
                self._drop_selection()
        if target is EditorMode.INSERT and previous is not EditorMode.INSERT:
            state.insert_start_pos = host.cursor_position()

        old_mode = self._modes.get(previous)
        if old_mode is not None and previous is not target:
            old_mode.on_exit(target)
        state.mode = target
        new_mode = self._modes.get(target)
        if new_mode is not None and previous is not target:
            new_mode.on_enter(previous)

        host.set_editor_mode(self.context.settings.host_mode_name(target.value))
        self.publish_indicator()
        telemetry.record_event(
            "mode.switch", data={"from": previous.value, "mode": target.value}
        )

    def publish_indicator(self) -> None:
        self.context.host.set_status(mode_indicator(self.context))

    def _drop_selection(self) -> None:
        host = self.context.host
        if host.cursor_position() == 0:
            host.execute_action("move_right")
            host.execute_action("move_left")
        else:
            host.execute_action("move_left")
            host.execute_action("move_right")

    async def _capture_inserted_text(self) -> None:
        state = self.context.state
        start = state.insert_start_pos
        state.insert_start_pos = None
        awaiting = state.awaiting_insert_text
        state.awaiting_insert_text = False
        if start is None:
            return
        end = self.context.host.cursor_position()
        if end is None or end <= start:
            return
        text = await self.context.host.get_text(start, end)
        if not text:
            return
        change = state.last_change
        if awaiting and change is not None and not isinstance(change, InsertChange):
            change.inserted_text = text
        else:
            state.record_change(InsertChange(inserted_text=text))
        telemetry.record_event(
            "mode.insert_captured", level="debug", data={"length": len(text)}
        )


__all__ = ["ModeManager", "mode_indicator"]
