"""Executable Textual app that hosts the vi engine."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from typing import Any, Optional, Sequence

try:  # pragma: no cover - imported only when demo is run
    from textual import events
    from textual.app import App, ComposeResult
    from textual.containers import Vertical
    from textual.widgets import Footer, Header, Input, Static, TextArea
    from textual.widgets.text_area import Selection
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use vi_modal.adapters.textual.app"
    ) from exc

from vi_modal.buffer import BufferMirror
from vi_modal.engine.vi_engine import ViEngine
from vi_modal.runtime import telemetry
from vi_modal.runtime.settings import EngineSettings

from .controller import TextualUIHooks, TextualViAdapter
from .host import TextAreaHost


def create_engine(
    path: Optional[str] = None, settings: Optional[EngineSettings] = None
) -> tuple[ViEngine, TextAreaHost]:
    """Build a host for ``path`` and an enabled engine bound to it."""

    host = TextAreaHost(path=path)
    engine = ViEngine(host, settings)
    engine.toggle()
    return engine, host


@dataclass
class UIState:
    status_text: str = ""
    mode_name: str = ""
    prompt_type: Optional[str] = None


class ViModalApp(App[None]):
    """Minimal Textual UI embedding the vi engine."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#buffer-view {
		height: 1fr;
		border: round $accent;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}

	#command-line {
		height: 3;
		display: none;
	}

	#command-line.-active {
		display: block;
	}
	"""

    BINDINGS = [
        ("ctrl+c", "quit", "Quit"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        path: Optional[str] = None,
        *,
        settings: Optional[EngineSettings] = None,
    ) -> None:
        super().__init__()
        self._path = path
        self._settings = settings
        self._state = UIState()
        self.engine: ViEngine | None = None
        self.host: TextAreaHost | None = None
        self.adapter: TextualViAdapter | None = None
        self._buffer_widget: TextArea | None = None
        self._status_widget: Static | None = None
        self._command_widget: Input | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="buffer-area"):
            self._buffer_widget = TextArea("", id="buffer-view", read_only=True)
            self._buffer_widget.can_focus = False
            yield self._buffer_widget
        self._status_widget = Static("", id="status-line")
        self._command_widget = Input(id="command-line")
        yield self._status_widget
        yield self._command_widget
        yield Footer()

    async def on_mount(self) -> None:
        self.engine, self.host = create_engine(self._path, self._settings)
        self.host.on_status = self._update_status
        self.host.on_prompt = self._start_prompt
        self.host.on_mode = self._update_mode
        hooks = TextualUIHooks(
            update_buffer=self._update_buffer,
            update_status=self._update_status,
            show_command=self._show_command,
            handle_event=self._handle_event,
        )
        self.adapter = TextualViAdapter(self.engine, self.host, hooks)
        self._state.mode_name = self.host.editor_mode or ""
        self._update_status(self.host.status or "")

    async def on_key(self, event: events.Key) -> None:
        if not self.adapter:
            return
        if self._state.prompt_type is not None:
            if event.key == "escape":
                self._state.prompt_type = None
                self.adapter.cancel_command()
                event.stop()
            return
        if event.key in {"ctrl+c", "ctrl+q"}:
            return
        await self.adapter.handle_textual_key(event.key, character=event.character)
        if self.host is not None and self.host.quit_requested:
            self.exit()
        event.stop()

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        if not self.adapter or self._state.prompt_type is None:
            return
        self._state.prompt_type = None
        await self.adapter.submit_command(event.value)
        if self.host is not None and self.host.quit_requested:
            self.exit()

    def _update_buffer(self, mirror: BufferMirror) -> None:
        widget = self._buffer_widget
        if widget is None:
            return
        if widget.text != mirror.text:
            widget.load_text(mirror.text)
        document = widget.document
        cursor = document.get_location_from_index(mirror.cursor)
        if mirror.selection is None:
            widget.selection = Selection.cursor(cursor)
        else:
            start, end = mirror.selection
            anchor = start if mirror.cursor == end else end
            widget.selection = Selection(document.get_location_from_index(anchor), cursor)
        widget.scroll_cursor_visible()

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        if self._status_widget:
            self._status_widget.update(f"{self._state.mode_name}  {status}".strip())

    def _update_mode(self, name: Optional[str]) -> None:
        self._state.mode_name = name or ""
        self._update_status(self._state.status_text)

    def _start_prompt(self, label: str, prompt_type: str) -> None:
        self._state.prompt_type = prompt_type
        if self._command_widget:
            self._command_widget.placeholder = label
            self._command_widget.value = ""
            self._command_widget.add_class("-active")
            self._command_widget.focus()

    def _show_command(self, command: str) -> None:
        if self._command_widget and not command:
            self._command_widget.remove_class("-active")
            self._command_widget.value = ""
            self.set_focus(None)

    def _handle_event(self, name: str, payload: Any | None) -> None:
        if name == "command.error" and isinstance(payload, str):
            self.bell()


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Edit a file with the vi-modal engine.")
    parser.add_argument("file", nargs="?", help="File to open")
    parser.add_argument(
        "--log-preset",
        choices=("development", "production", "performance", "quiet"),
        default=None,
        help="telelog preset for engine diagnostics (default: from environment)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    if args.log_preset:
        telemetry.configure(preset=args.log_preset)
    app = ViModalApp(args.file, settings=EngineSettings.from_env())
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
