"""Key handlers bound by the default keymaps."""

from . import command, core, normal, operator, visual
from .command import cancel_command_line, submit_command_line

__all__ = [
    "cancel_command_line",
    "command",
    "core",
    "normal",
    "operator",
    "submit_command_line",
    "visual",
]
