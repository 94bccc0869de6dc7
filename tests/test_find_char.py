from __future__ import annotations

import asyncio

from vi_modal.engine.state import EditorMode, FindCharMemory, FindKind
from vi_modal.engine.vi_engine import ViEngine
from vi_modal.host import MemoryHost
from vi_modal.motions import target_column
from vi_modal.runtime.settings import EngineSettings


def make_engine(text: str, cursor: int = 0) -> tuple[ViEngine, MemoryHost]:
    host = MemoryHost(text)
    engine = ViEngine(host, EngineSettings())
    engine.toggle()
    host.set_cursor(cursor)
    return engine, host


def feed(engine: ViEngine, keys) -> None:
    asyncio.run(engine.feed(keys))


def test_target_column_forward_and_till() -> None:
    line = "abc,def,ghi"

    assert target_column(line, 0, FindKind.FORWARD, ",") == 3
    assert target_column(line, 0, FindKind.FORWARD_TILL, ",") == 2
    assert target_column(line, 3, FindKind.FORWARD, ",") == 7
    assert target_column(line, 0, FindKind.FORWARD, "z") is None


def test_target_column_backward_and_till() -> None:
    line = "abc,def,ghi"

    assert target_column(line, 10, FindKind.BACKWARD, ",") == 7
    assert target_column(line, 10, FindKind.BACKWARD_TILL, ",") == 8
    assert target_column(line, 7, FindKind.BACKWARD, ",") == 3
    assert target_column(line, 0, FindKind.BACKWARD, "a") is None


def test_find_then_repeat_both_directions() -> None:
    engine, host = make_engine("abc,def,ghi")

    feed(engine, "f,")
    assert host.cursor == 3
    assert engine.mode is EditorMode.NORMAL
    assert engine.state.last_find_char == FindCharMemory(FindKind.FORWARD, ",")

    feed(engine, ";")
    assert host.cursor == 7

    feed(engine, ",")
    assert host.cursor == 3
    assert engine.state.last_find_char == FindCharMemory(FindKind.FORWARD, ",")


def test_find_till_stops_short() -> None:
    engine, host = make_engine("abc,def,ghi")

    feed(engine, "t,")

    assert host.cursor == 2


def test_find_backward_with_bound_letter() -> None:
    engine, host = make_engine("abc,def,ghi", cursor=9)

    feed(engine, "Fd")
    assert host.cursor == 4

    feed(engine, "Ta")
    assert host.cursor == 1


def test_find_space_target() -> None:
    engine, host = make_engine("one two")

    feed(engine, "f ")

    assert host.cursor == 3


def test_find_miss_keeps_cursor_and_memory() -> None:
    engine, host = make_engine("abc,def", cursor=1)

    feed(engine, "fz")

    assert host.cursor == 1
    assert engine.mode is EditorMode.NORMAL
    assert engine.state.last_find_char is None


def test_find_stays_on_current_line() -> None:
    engine, host = make_engine("ab\ncd\nab", cursor=3)

    feed(engine, "fa")

    assert host.cursor == 3


def test_escape_cancels_pending_find() -> None:
    engine, host = make_engine("abc")

    feed(engine, "f")
    assert engine.mode is EditorMode.FIND_CHAR
    assert host.status == "-- FIND (f) --"

    feed(engine, ["Escape"])
    assert engine.mode is EditorMode.NORMAL
    assert engine.state.pending_find_char is None
    assert host.cursor == 0


def test_repeat_without_memory_does_nothing() -> None:
    engine, host = make_engine("abc")

    feed(engine, ";")

    assert host.cursor == 0


def test_till_that_does_not_move_keeps_previous_memory() -> None:
    engine, host = make_engine("abc,de")

    feed(engine, "fc")
    assert host.cursor == 2

    feed(engine, "t,")

    assert host.cursor == 2
    assert engine.state.last_find_char == FindCharMemory(
        kind=FindKind.FORWARD, character="c"
    )
