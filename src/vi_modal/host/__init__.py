"""Host editor contract and the in-memory reference host."""

from .memory import MemoryHost, UI_ACTIONS
from .protocol import ActionCall, BufferInfo, HostEditor, ModeDefinition

__all__ = [
    "ActionCall",
    "BufferInfo",
    "HostEditor",
    "MemoryHost",
    "ModeDefinition",
    "UI_ACTIONS",
]
