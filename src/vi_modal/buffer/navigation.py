"""Pure offset arithmetic for cursor motions over plain text."""

from __future__ import annotations

from typing import Optional

WORD_CHARS = frozenset(
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_"
)

_OPENERS = {"(": ")", "[": "]", "{": "}", "<": ">"}
_CLOSERS = {close: open_ for open_, close in _OPENERS.items()}


def _char_class(ch: str) -> int:
    if ch.isspace():
        return 0
    if ch in WORD_CHARS:
        return 1
    return 2


def word_right(text: str, offset: int) -> int:
    """Start of the next word, stopping at the end of the text."""

    length = len(text)
    if offset >= length:
        return length
    klass = _char_class(text[offset])
    index = offset
    if klass:
        while index < length and _char_class(text[index]) == klass:
            index += 1
    while index < length and text[index].isspace():
        index += 1
    return index


def word_left(text: str, offset: int) -> int:
    """Start of the word at or before ``offset - 1``."""

    index = min(offset, len(text))
    while index > 0 and text[index - 1].isspace():
        index -= 1
    if index == 0:
        return 0
    klass = _char_class(text[index - 1])
    while index > 0 and _char_class(text[index - 1]) == klass:
        index -= 1
    return index


def line_start(text: str, offset: int) -> int:
    return text.rfind("\n", 0, offset) + 1


def line_end(text: str, offset: int) -> int:
    index = text.find("\n", offset)
    return len(text) if index == -1 else index


def first_non_blank(text: str, offset: int) -> int:
    index = line_start(text, offset)
    end = line_end(text, offset)
    while index < end and text[index] in " \t":
        index += 1
    return index


def vertical(text: str, offset: int, lines: int, goal_column: Optional[int] = None) -> int:
    """Move ``lines`` down (negative for up), keeping the goal column."""

    start = line_start(text, offset)
    column = offset - start if goal_column is None else goal_column
    target = start
    if lines > 0:
        for _ in range(lines):
            end = line_end(text, target)
            if end >= len(text):
                break
            target = end + 1
    else:
        for _ in range(-lines):
            if target == 0:
                break
            target = line_start(text, target - 1)
    return min(target + column, line_end(text, target))


def matching_bracket(text: str, offset: int) -> Optional[int]:
    if offset >= len(text):
        return None
    ch = text[offset]
    if ch in _OPENERS:
        close, step = _OPENERS[ch], 1
    elif ch in _CLOSERS:
        close, step = _CLOSERS[ch], -1
    else:
        return None
    depth = 0
    index = offset
    while 0 <= index < len(text):
        current = text[index]
        if current == ch:
            depth += 1
        elif current == close:
            depth -= 1
            if depth == 0:
                return index
        index += step
    return None


__all__ = [
    "WORD_CHARS",
    "first_non_blank",
    "line_end",
    "line_start",
    "matching_bracket",
    "vertical",
    "word_left",
    "word_right",
]
