"""Ex command line: table, parser and interpreter."""

from .commands import COMMANDS, ExCommandDef, ExCommandError, find_command
from .interpreter import ExInterpreter, ExResult
from .parser import GotoLine, ParsedCommand, parse_command_line

__all__ = [
    "COMMANDS",
    "ExCommandDef",
    "ExCommandError",
    "ExInterpreter",
    "ExResult",
    "GotoLine",
    "ParsedCommand",
    "find_command",
    "parse_command_line",
]
