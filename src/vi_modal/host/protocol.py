"""Contract the engine consumes from its host editor."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Sequence, runtime_checkable


@dataclass(frozen=True, slots=True)
class ActionCall:
    """One primitive host action, repeated ``count`` times."""

    action: str
    count: int = 1

    def __post_init__(self) -> None:
        if not self.action:
            raise ValueError("action cannot be empty")
        if self.count < 1:
            raise ValueError("count must be positive")


@dataclass(frozen=True, slots=True)
class ModeDefinition:
    """Keymap a host installs for one engine mode.

    ``bindings`` pairs key notation (``"g g"``, ``"C-v"``) with the binding id
    the host must call back with. Typed characters only insert text when
    ``read_only`` is false; unbound keys fall back to ``parent``.
    """

    name: str
    bindings: tuple[tuple[str, str], ...]
    read_only: bool = True
    parent: Optional[str] = None


@dataclass(frozen=True, slots=True)
class BufferInfo:
    id: int
    path: Optional[str]
    modified: bool
    length: int


@runtime_checkable
class HostEditor(Protocol):
    """Primitive surface of the host text editor."""

    def execute_action(self, action: str) -> bool:
        ...

    def execute_actions(self, calls: Sequence[ActionCall]) -> bool:
        ...

    def cursor_position(self) -> Optional[int]:
        ...

    def cursor_line(self) -> int:
        """1-based line of the cursor."""
        ...

    def line_start_position(self, line: int) -> Optional[int]:
        ...

    def line_count(self) -> int:
        ...

    def buffer_length(self) -> int:
        ...

    async def get_text(self, start: int, end: int) -> str:
        ...

    def delete_range(self, start: int, end: int) -> None:
        ...

    def insert_text(self, text: str) -> None:
        ...

    def set_cursor(self, offset: int) -> None:
        ...

    def define_mode(self, definition: ModeDefinition) -> None:
        ...

    def set_editor_mode(self, name: Optional[str]) -> None:
        ...

    def set_status(self, text: str) -> None:
        ...

    def start_prompt(self, label: str, prompt_type: str) -> None:
        ...

    def active_buffer_id(self) -> int:
        ...

    def is_buffer_modified(self, buffer_id: int) -> bool:
        ...

    def list_buffers(self) -> Sequence[BufferInfo]:
        ...

    def buffer_info(self, buffer_id: int) -> Optional[BufferInfo]:
        ...

    def show_buffer(self, buffer_id: int) -> None:
        ...

    def open_file(self, path: str, line: int = 0, column: int = 0) -> None:
        ...

    def cwd(self) -> str:
        ...

    def set_line_numbers(self, enabled: bool) -> None:
        ...


__all__ = ["ActionCall", "BufferInfo", "HostEditor", "ModeDefinition"]
