"""Host-agnostic vi-style modal editing engine."""

__all__ = [
    "actions",
    "adapters",
    "buffer",
    "engine",
    "ex",
    "host",
    "keymaps",
    "modes",
    "motions",
    "operators",
    "runtime",
    "visual",
]

__version__ = "0.1.0"
