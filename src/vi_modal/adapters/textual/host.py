"""Host editor backed by files on disk and rendered into a Textual ``TextArea``."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

from vi_modal.buffer import BufferMirror
from vi_modal.host import MemoryHost
from vi_modal.runtime import telemetry


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


class TextAreaHost(MemoryHost):
    """:class:`MemoryHost` whose buffers load from and save to real files.

    The in-memory buffer stays the source of truth; the adapter pushes a
    :class:`BufferMirror` into the widget after every keystroke. Status,
    prompt and mode changes are forwarded through the ``on_*`` callbacks.
    """

    def __init__(
        self,
        text: str = "",
        *,
        path: Optional[str] = None,
        page_lines: int = 20,
        on_status: Callable[[str], None] = _noop,
        on_prompt: Callable[[str, str], None] = _noop,
        on_mode: Callable[[Optional[str]], None] = _noop,
    ) -> None:
        if path is not None and not text:
            text = _read(path)
        super().__init__(text, path=path, page_lines=page_lines)
        self.on_status = on_status
        self.on_prompt = on_prompt
        self.on_mode = on_mode

    def mirror(self) -> BufferMirror:
        return self.buffer.mirror(attributes={"name": self.buffer.name})

    def set_status(self, text: str) -> None:
        super().set_status(text)
        self.on_status(text)

    def start_prompt(self, label: str, prompt_type: str) -> None:
        super().start_prompt(label, prompt_type)
        self.on_prompt(label, prompt_type)

    def set_editor_mode(self, name: Optional[str]) -> None:
        super().set_editor_mode(name)
        self.on_mode(name)

    def open_file(self, path: str, line: int = 0, column: int = 0) -> None:
        if path not in self.files:
            self.files[path] = _read(path)
        super().open_file(path, line, column)

    def _save(self) -> bool:
        saved = super()._save()
        path = self.buffer.path
        if path is not None:
            Path(path).write_text(self.buffer.text, encoding="utf-8")
            telemetry.record_event("host.saved", data={"path": path})
        return saved


def _read(path: str) -> str:
    file = Path(path)
    if not file.exists():
        return ""
    return file.read_text(encoding="utf-8")


__all__ = ["TextAreaHost"]
