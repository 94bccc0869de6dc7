"""Text objects: word, WORD, quoted strings and bracket pairs."""

from __future__ import annotations

from typing import Mapping, Optional, Tuple

from vi_modal.buffer.navigation import WORD_CHARS
from vi_modal.engine.state import (
    EngineState,
    Operator,
    OperatorTextObjectChange,
    TextObjectModifier,
)
from vi_modal.host import ActionCall, HostEditor
from vi_modal.runtime import telemetry
from vi_modal.runtime.settings import EngineSettings

Span = Tuple[int, int]

QUOTES = frozenset({'"', "'", "`"})

# Object key -> (opener, closer); several keys name the same pair.
BRACKETS: Mapping[str, Tuple[str, str]] = {
    "(": ("(", ")"),
    ")": ("(", ")"),
    "b": ("(", ")"),
    "{": ("{", "}"),
    "}": ("{", "}"),
    "B": ("{", "}"),
    "[": ("[", "]"),
    "]": ("[", "]"),
    "<": ("<", ">"),
    ">": ("<", ">"),
}

OBJECT_KEYS = frozenset({"w", "W"} | QUOTES | set(BRACKETS))


def _is_blank(ch: str) -> bool:
    return ch.isspace()


def find_word(text: str, pos: int, *, inner: bool, big: bool = False) -> Span:
    """Expand around ``pos`` over word (or, for ``big``, non-blank) characters."""

    def member(ch: str) -> bool:
        return not _is_blank(ch) if big else ch in WORD_CHARS

    start = pos
    end = pos
    while start > 0 and member(text[start - 1]):
        start -= 1
    while end < len(text) and member(text[end]):
        end += 1
    if not inner:
        while end < len(text) and _is_blank(text[end]) and text[end] != "\n":
            end += 1
    return start, end


def find_quoted(text: str, pos: int, quote: str, *, inner: bool) -> Optional[Span]:
    """Quote pair on the cursor's line whose span contains the cursor column."""

    line_start = text.rfind("\n", 0, pos) + 1
    line_end = text.find("\n", pos)
    if line_end == -1:
        line_end = len(text)
    line = text[line_start:line_end]
    column = pos - line_start

    open_at = close_at = -1
    inside = False
    for index, ch in enumerate(line):
        if ch != quote:
            continue
        if not inside:
            open_at = index
            inside = True
            continue
        close_at = index
        if open_at <= column <= close_at:
            break
        inside = False

    if open_at == -1 or close_at == -1 or not open_at <= column <= close_at:
        return None
    if inner:
        return line_start + open_at + 1, line_start + close_at
    return line_start + open_at, line_start + close_at + 1


def find_matching_pair(text: str, pos: int, opener: str, closer: str) -> Optional[Span]:
    """Innermost ``opener``/``closer`` pair enclosing ``pos`` (closer inclusive)."""

    depth = 0
    start = -1
    for index in range(min(pos, len(text) - 1), -1, -1):
        ch = text[index]
        if ch == closer:
            depth += 1
        elif ch == opener:
            if depth == 0:
                start = index
                break
            depth -= 1
    if start == -1:
        return None

    depth = 0
    for index in range(start, len(text)):
        ch = text[index]
        if ch == opener:
            depth += 1
        elif ch == closer:
            depth -= 1
            if depth == 0:
                return start, index
    return None


def locate(text: str, pos: int, object_key: str, modifier: TextObjectModifier) -> Optional[Span]:
    """Resolve ``object_key`` around ``pos`` in ``text``; ``None`` when absent."""

    inner = modifier is TextObjectModifier.INNER
    if object_key in ("w", "W"):
        found: Optional[Span] = find_word(text, pos, inner=inner, big=object_key == "W")
    elif object_key in QUOTES:
        found = find_quoted(text, pos, object_key, inner=inner)
    elif object_key in BRACKETS:
        opener, closer = BRACKETS[object_key]
        pair = find_matching_pair(text, pos, opener, closer)
        if pair is None:
            found = None
        elif inner:
            found = (pair[0] + 1, pair[1])
        else:
            found = (pair[0], pair[1] + 1)
    else:
        return None
    if found is None or found[0] >= found[1]:
        return None
    return found


class TextObjectResolver:
    """Applies the pending operator to a text object around the cursor.

    Only a window of ``settings.text_object_window`` characters on each side
    of the cursor is read from the host.
    """

    def __init__(self, host: HostEditor, state: EngineState, settings: EngineSettings) -> None:
        self.host = host
        self.state = state
        self.settings = settings

    async def span_at_cursor(
        self, object_key: str, modifier: TextObjectModifier
    ) -> Optional[Span]:
        cursor = self.host.cursor_position()
        if cursor is None:
            return None
        window = self.settings.text_object_window
        window_start = max(0, cursor - window)
        window_end = min(self.host.buffer_length(), cursor + window)
        text = await self.host.get_text(window_start, window_end)
        if not text:
            return None
        found = locate(text, cursor - window_start, object_key, modifier)
        if found is None:
            return None
        return window_start + found[0], window_start + found[1]

    async def apply(
        self,
        operator: Operator,
        modifier: TextObjectModifier,
        object_key: str,
        *,
        record: bool = True,
    ) -> bool:
        found = await self.span_at_cursor(object_key, modifier)
        if found is None:
            telemetry.record_event(
                "text_object.miss",
                level="debug",
                data={"object": f"{modifier.key}{object_key}", "operator": operator.value},
            )
            return False

        if record and operator.records_change:
            self.state.record_change(
                OperatorTextObjectChange(
                    operator=operator, modifier=modifier, object_key=object_key
                ),
                enters_insert=operator is Operator.CHANGE,
            )

        start, end = found
        if operator is Operator.YANK:
            self.host.set_cursor(start)
            self.host.execute_actions([ActionCall("select_right", end - start)])
            self.host.execute_action("copy")
            self.host.set_cursor(start)
        else:
            self.host.delete_range(start, end)
        self.state.last_yank_was_linewise = False
        return True


__all__ = [
    "BRACKETS",
    "OBJECT_KEYS",
    "QUOTES",
    "TextObjectResolver",
    "find_matching_pair",
    "find_quoted",
    "find_word",
    "locate",
]
