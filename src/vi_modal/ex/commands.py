"""Static ex-command table and abbreviation lookup."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping


class ExCommandError(Exception):
    """Resolution or execution failure reported as ``E: <message>``."""


@dataclass(frozen=True, slots=True)
class ExCommandDef:
    name: str
    min_abbreviation: int
    allows_bang: bool = False
    takes_arguments: bool = False

    def matches_prefix(self, text: str) -> bool:
        return len(text) >= self.min_abbreviation and self.name.startswith(text)


def _cmd(name: str, min_abbreviation: int, bang: bool = False, args: bool = False) -> ExCommandDef:
    return ExCommandDef(name, min_abbreviation, allows_bang=bang, takes_arguments=args)


COMMANDS: tuple[ExCommandDef, ...] = (
    # files
    _cmd("write", 1, bang=True, args=True),
    _cmd("quit", 1, bang=True),
    _cmd("wq", 2, bang=True),
    _cmd("wall", 2),
    _cmd("qall", 2, bang=True),
    _cmd("wqall", 3),
    _cmd("xit", 1),
    _cmd("exit", 3),
    _cmd("edit", 1, bang=True, args=True),
    _cmd("enew", 3, bang=True),
    _cmd("saveas", 3, args=True),
    # buffers
    _cmd("next", 1, bang=True),
    _cmd("previous", 4, bang=True),
    _cmd("bnext", 2),
    _cmd("bprevious", 2),
    _cmd("bdelete", 2, bang=True),
    _cmd("buffer", 1, args=True),
    _cmd("buffers", 2),
    _cmd("ls", 2),
    _cmd("files", 3),
    # windows
    _cmd("split", 2, args=True),
    _cmd("vsplit", 2, args=True),
    _cmd("new", 3, args=True),
    _cmd("vnew", 3, args=True),
    _cmd("only", 2, bang=True),
    _cmd("close", 3, bang=True),
    # tabs
    _cmd("tabnew", 4, args=True),
    _cmd("tabedit", 4, args=True),
    _cmd("tabclose", 4, bang=True),
    _cmd("tabnext", 5),
    _cmd("tabprevious", 4),
    # quickfix
    _cmd("copen", 3),
    _cmd("cclose", 3),
    _cmd("cnext", 2, bang=True),
    _cmd("cprevious", 2, bang=True),
    _cmd("cfirst", 3, bang=True),
    _cmd("clast", 3, bang=True),
    # search and replace
    _cmd("nohlsearch", 3),
    _cmd("substitute", 1, args=True),
    _cmd("global", 1, args=True),
    _cmd("vglobal", 2, args=True),
    # history
    _cmd("undo", 1, bang=True),
    _cmd("redo", 3),
    # settings and info
    _cmd("set", 2, args=True),
    _cmd("pwd", 2),
    _cmd("cd", 2, args=True),
    _cmd("file", 1, args=True),
    _cmd("help", 1, args=True),
    _cmd("version", 3),
    # misc
    _cmd("marks", 4),
    _cmd("registers", 3),
    _cmd("jumps", 2),
    _cmd("syntax", 2, args=True),
    _cmd("read", 1, args=True),
    _cmd("grep", 2, args=True),
    _cmd("vimgrep", 3, args=True),
    _cmd("make", 3, bang=True, args=True),
    _cmd("ascii", 2),
    _cmd("revert", 3),
)

COMMANDS_BY_NAME: Mapping[str, ExCommandDef] = {cmd.name: cmd for cmd in COMMANDS}

# Classic one-letter forms that win when the prefix alone is ambiguous.
SHORT_ALIASES: Mapping[str, str] = {
    "w": "write",
    "q": "quit",
    "e": "edit",
    "n": "next",
    "N": "previous",
    "b": "buffer",
    "f": "file",
    "h": "help",
    "u": "undo",
    "r": "read",
    "s": "substitute",
    "g": "global",
    "x": "xit",
}


def find_command(text: str) -> ExCommandDef:
    """Resolve ``text`` by exact name, unique prefix, then short alias.

    Raises :class:`ExCommandError` for unknown or ambiguous input.
    """

    exact = COMMANDS_BY_NAME.get(text)
    if exact is not None:
        return exact
    matches = [cmd for cmd in COMMANDS if cmd.matches_prefix(text)]
    if len(matches) == 1:
        return matches[0]
    alias = SHORT_ALIASES.get(text)
    if alias is not None:
        return COMMANDS_BY_NAME[alias]
    if matches:
        names = ", ".join(cmd.name for cmd in matches)
        raise ExCommandError(f"Ambiguous command: {text} ({names})")
    raise ExCommandError(f"Not an editor command: {text}")


__all__ = [
    "COMMANDS",
    "COMMANDS_BY_NAME",
    "ExCommandDef",
    "ExCommandError",
    "SHORT_ALIASES",
    "find_command",
]
