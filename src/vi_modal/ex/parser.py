"""Parsing of a confirmed ``:`` command line."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Union

from .commands import ExCommandDef, ExCommandError, find_command

_LINE_NUMBER = re.compile(r"^(\d+)$")
_RANGE = re.compile(r"^([%.$]|\d+|'[a-z])?(?:,([%.$]|\d+|'[a-z]))?\s*(.*)$")
_PLUS = re.compile(r"^\+(\S*)\s*(.*)$")
_COMMAND = re.compile(r"^([a-zA-Z]\w*)(!)?\s*(.*)$")


@dataclass(frozen=True, slots=True)
class GotoLine:
    line: int


@dataclass(frozen=True, slots=True)
class ParsedCommand:
    """A resolved command. ``range`` is recognised syntax only."""

    command: ExCommandDef
    force: bool = False
    args: Optional[str] = None
    range: Optional[str] = None
    plus: Optional[str] = None

    @property
    def name(self) -> str:
        return self.command.name


ParseResult = Union[GotoLine, ParsedCommand]


def parse_command_line(line: str) -> ParseResult:
    """Parse ``line`` (without the leading ``:``).

    Raises :class:`ExCommandError` for anything that cannot be resolved.
    """

    text = line.strip()
    if text.startswith(":"):
        text = text[1:].lstrip()
    if not text:
        raise ExCommandError("Empty command")

    number = _LINE_NUMBER.match(text)
    if number:
        return GotoLine(int(number.group(1)))

    command_range: Optional[str] = None
    ranged = _RANGE.match(text)
    if ranged and ranged.group(3):
        first, second, rest = ranged.groups()
        if first or second:
            command_range = (first or "") + ("," + second if second else "")
        text = rest

    if text.startswith("!"):
        raise ExCommandError("Shell commands are not supported")

    match = _COMMAND.match(text)
    if not match:
        raise ExCommandError(f"Not a valid command: {text}")

    name, bang, args = match.groups()
    command = find_command(name)
    force = bang == "!"
    if force and not command.allows_bang:
        raise ExCommandError(f"No ! allowed: {command.name}")

    plus: Optional[str] = None
    args = args.strip() if command.takes_arguments and args else None
    if args and args.startswith("+"):
        plus_match = _PLUS.match(args)
        if plus_match:
            plus = plus_match.group(1) or "$"
            args = plus_match.group(2) or None

    return ParsedCommand(
        command=command,
        force=force,
        args=args,
        range=command_range,
        plus=plus,
    )


__all__ = ["GotoLine", "ParseResult", "ParsedCommand", "parse_command_line"]
