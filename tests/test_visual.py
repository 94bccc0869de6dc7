from __future__ import annotations

import asyncio

from vi_modal.engine.state import BlockAnchor, EditorMode
from vi_modal.engine.vi_engine import ViEngine
from vi_modal.host import MemoryHost
from vi_modal.runtime.settings import EngineSettings


def make_engine(text: str, cursor: int = 0) -> tuple[ViEngine, MemoryHost]:
    host = MemoryHost(text)
    engine = ViEngine(host, EngineSettings())
    engine.toggle()
    host.set_cursor(cursor)
    return engine, host


def feed(engine: ViEngine, keys) -> None:
    asyncio.run(engine.feed(keys))


def test_visual_line_delete_removes_whole_lines() -> None:
    engine, host = make_engine("l1\nl2\nl3\nl4\nl5", cursor=3)

    feed(engine, "Vjj")
    assert engine.mode is EditorMode.VISUAL_LINE
    assert host.selection == (3, 12)
    assert host.status == "-- VISUAL LINE --"

    feed(engine, "d")
    assert host.text == "l1\nl5"
    assert host.line_count() == 2
    assert engine.mode is EditorMode.NORMAL
    assert engine.state.visual_anchor is None


def test_visual_char_delete() -> None:
    engine, host = make_engine("alpha")

    feed(engine, "vld")

    assert host.text == "pha"
    assert engine.mode is EditorMode.NORMAL


def test_visual_yank_restores_cursor_to_start() -> None:
    engine, host = make_engine("alpha")

    feed(engine, "vly")

    assert host.text == "alpha"
    assert host.clipboard_text == "al"
    assert host.cursor == 0
    assert host.selection is None
    assert engine.state.last_yank_was_linewise is False


def test_visual_line_yank_is_linewise() -> None:
    engine, host = make_engine("one\ntwo")

    feed(engine, "Vy")

    assert host.clipboard_text == "one\n"
    assert engine.state.last_yank_was_linewise is True


def test_visual_change_enters_insert() -> None:
    engine, host = make_engine("alpha")

    feed(engine, "vlcZ")

    assert host.text == "Zpha"
    assert engine.mode is EditorMode.INSERT


def test_count_extends_selection() -> None:
    engine, host = make_engine("alphabet")

    feed(engine, "v2ly")

    assert host.clipboard_text == "alp"


def test_toggle_char_to_line_keeps_selection() -> None:
    engine, host = make_engine("one\ntwo\nthree")

    feed(engine, "vj")
    assert engine.state.visual_head_line == 2

    feed(engine, "V")
    assert engine.mode is EditorMode.VISUAL_LINE
    assert host.selection == (0, 8)

    feed(engine, "d")
    assert host.text == "three"


def test_toggle_line_back_to_char() -> None:
    engine, host = make_engine("one\ntwo\nthree", cursor=1)

    feed(engine, "Vjv")

    assert engine.mode is EditorMode.VISUAL
    assert host.selection == (1, 7)


def test_escape_clears_selection() -> None:
    engine, host = make_engine("alpha")

    feed(engine, "vl")
    assert host.selection == (0, 2)

    feed(engine, ["Escape"])
    assert engine.mode is EditorMode.NORMAL
    assert host.selection is None
    assert engine.state.visual_anchor is None


def test_reentry_key_exits_visual() -> None:
    engine, host = make_engine("alpha")

    feed(engine, "vlv")

    assert engine.mode is EditorMode.NORMAL
    assert host.selection is None


def test_visual_block_records_anchor() -> None:
    engine, host = make_engine("abc\ndef", cursor=5)

    feed(engine, ["C-v"])
    assert engine.mode is EditorMode.VISUAL_BLOCK
    assert engine.state.visual_block_anchor == BlockAnchor(line=2, column=1)

    feed(engine, ["C-v"])
    assert engine.mode is EditorMode.NORMAL
    assert engine.state.visual_block_anchor is None
