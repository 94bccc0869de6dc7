"""Engine façade owned by the host's plugin lifecycle."""

from __future__ import annotations

from typing import Optional, Sequence, Union

from vi_modal.actions import cancel_command_line, submit_command_line
from vi_modal.ex import ExResult
from vi_modal.host import HostEditor, ModeDefinition
from vi_modal.keymaps.defaults import DEFAULT_KEYMAPS
from vi_modal.modes import DEFAULT_MODES, KeyInput, ModeBus, ModeContext, ModeResult
from vi_modal.modes.keymap_helpers import parse_key
from vi_modal.modes.mode_manager import ModeManager
from vi_modal.runtime import telemetry
from vi_modal.runtime.settings import EngineSettings

from .components import EngineComponents
from .count import CountAccumulator
from .errors import EngineBusyError
from .state import EditorMode, EngineState

_CHAR_KEYS = {" ": "Space", "\n": "Enter", "\t": "Tab", "\x1b": "Escape"}


class ViEngine:
    """One modal editing engine bound to one host editor.

    Instances share nothing, so a host may run one engine per window.
    """

    def __init__(
        self,
        host: HostEditor,
        settings: Optional[EngineSettings] = None,
        *,
        bus: Optional[ModeBus] = None,
    ) -> None:
        self.host = host
        self.settings = settings or EngineSettings.from_env()
        self.state = EngineState()
        self.counter = CountAccumulator(self.state)
        self.components = EngineComponents.build(
            host, self.state, self.counter, self.settings
        )
        self.context = ModeContext(
            host=host,
            state=self.state,
            counter=self.counter,
            settings=self.settings,
            components=self.components,
            bus=bus or ModeBus(),
        )
        self.manager = ModeManager(self.context)
        for mode_cls in DEFAULT_MODES:
            self.manager.register_mode(mode_cls)
        self.logger = telemetry.get_logger("vi_modal.engine")

    @property
    def mode(self) -> EditorMode:
        return self.state.mode

    @property
    def enabled(self) -> bool:
        return self.state.enabled

    @property
    def busy(self) -> bool:
        return self.manager.busy

    # -- lifecycle ---------------------------------------------------------
    def toggle(self) -> bool:
        """Enable or disable vi mode; returns the new enabled flag."""

        if self.manager.busy:
            raise EngineBusyError("toggle vi mode")
        if self.state.enabled:
            self.host.set_editor_mode(None)
            self.state.reset()
            self.state.enabled = False
            self.host.set_status("Vi mode disabled")
        else:
            self.define_modes()
            self.state.enabled = True
            self.manager.enter(EditorMode.NORMAL)
            self.host.set_status("Vi mode enabled")
        telemetry.record_event("engine.toggle", data={"enabled": self.state.enabled})
        return self.state.enabled

    def define_modes(self) -> None:
        """Install one host keymap per engine mode."""

        registry = self.manager.keymap_registry
        for keymap in DEFAULT_KEYMAPS:
            bindings = tuple(
                (binding.key_signature, binding.id)
                for binding in registry.iter_bindings(keymap.mode)
            )
            parent = (
                self.settings.host_mode_name(keymap.parent) if keymap.parent else None
            )
            self.host.define_mode(
                ModeDefinition(
                    name=self.settings.host_mode_name(keymap.mode),
                    bindings=bindings,
                    read_only=keymap.read_only,
                    parent=parent,
                )
            )

    # -- keystrokes --------------------------------------------------------
    async def handle_key(self, key: KeyInput) -> ModeResult:
        return await self.manager.handle_key(key)

    async def invoke(self, binding_id: str) -> ModeResult:
        """Host callback path: run the binding named ``binding_id``."""

        return await self.manager.invoke(binding_id)

    async def feed(self, keys: Union[str, Sequence[str]]) -> list[ModeResult]:
        """Type ``keys`` as a user would.

        A string is split into characters; a sequence holds key notation
        (``"Escape"``, ``"C-v"``). Keys insert mode passes through are
        inserted into the host, which is what a real editor does with them.
        """

        if isinstance(keys, str):
            inputs = [parse_key(_CHAR_KEYS.get(char, char)) for char in keys]
        else:
            inputs = [parse_key(notation) for notation in keys]
        results: list[ModeResult] = []
        for key in inputs:
            result = await self.handle_key(key)
            if not result.consumed:
                self.pass_through(key)
            results.append(result)
        return results

    def pass_through(self, key: KeyInput) -> None:
        """Apply a key insert mode handed back to the host."""

        if key.key == "Backspace":
            self.host.execute_action("delete_backward")
        elif key.text:
            self.host.insert_text(key.text)

    # -- command line ------------------------------------------------------
    async def on_prompt_confirmed(self, prompt_type: str, text: str) -> bool:
        """Handle a confirmed host prompt; ``False`` if it is not ours."""

        if prompt_type != self.settings.command_prompt_type:
            return False

        async def work() -> ExResult:
            return await submit_command_line(self.context, text)

        await self.manager.run_exclusive(work)
        return True

    def on_prompt_cancelled(self, prompt_type: str) -> bool:
        if prompt_type != self.settings.command_prompt_type:
            return False
        if self.manager.busy:
            raise EngineBusyError("cancel the command line")
        cancel_command_line(self.context)
        return True

    async def execute_command(self, line: str) -> ExResult:
        """Run an ex command line directly, bypassing the prompt."""

        async def work() -> ExResult:
            return await submit_command_line(self.context, line)

        return await self.manager.run_exclusive(work)


__all__ = ["ViEngine"]
