"""Declarative keymap registry and resolver.

The built-in bindings live in :mod:`vi_modal.keymaps.defaults`, which pulls in
the action handlers and is therefore imported on demand.
"""

from .models import ActionRef, Binding, KeySequence, KeyStroke, ModeKeymap
from .registry import KeymapConflictError, KeymapRegistry
from .resolver import KeymapResolver, ResolutionMatch, ResolutionResult

__all__ = [
    "ActionRef",
    "Binding",
    "KeySequence",
    "KeyStroke",
    "ModeKeymap",
    "KeymapRegistry",
    "KeymapConflictError",
    "KeymapResolver",
    "ResolutionResult",
    "ResolutionMatch",
]
