from __future__ import annotations

import asyncio

import pytest

from vi_modal.engine import EngineBusyError
from vi_modal.engine.state import EditorMode, InsertChange
from vi_modal.engine.vi_engine import ViEngine
from vi_modal.host import MemoryHost
from vi_modal.modes.keymap_helpers import parse_key
from vi_modal.runtime.settings import EngineSettings


def make_engine(text: str = "", cursor: int = 0, **settings) -> tuple[ViEngine, MemoryHost]:
    host = MemoryHost(text)
    engine = ViEngine(host, EngineSettings(**settings))
    engine.toggle()
    host.set_cursor(cursor)
    return engine, host


def feed(engine: ViEngine, keys) -> None:
    asyncio.run(engine.feed(keys))


# -- lifecycle -------------------------------------------------------------
def test_toggle_defines_host_modes() -> None:
    engine, host = make_engine("text")

    assert engine.enabled
    assert set(host.modes) == {
        "vi-normal",
        "vi-insert",
        "vi-operator-pending",
        "vi-find-char",
        "vi-text-object",
        "vi-visual",
        "vi-visual-line",
        "vi-visual-block",
    }
    assert host.editor_mode == "vi-normal"
    assert host.status == "Vi mode enabled"

    insert = host.modes["vi-insert"]
    assert insert.read_only is False
    assert insert.bindings == (("Escape", "insert.escape"),)
    normal = host.modes["vi-normal"]
    assert normal.read_only is True
    assert ("g g", "normal.doc_start") in normal.bindings


def test_toggle_off_resets_state() -> None:
    engine, host = make_engine("text")
    feed(engine, "3d")

    assert engine.toggle() is False

    assert host.editor_mode is None
    assert host.status == "Vi mode disabled"
    assert engine.mode is EditorMode.NORMAL
    assert engine.state.pending_operator is None
    assert engine.state.count is None


def test_mode_prefix_setting() -> None:
    engine, host = make_engine("text", mode_prefix="modal-")

    assert host.editor_mode == "modal-normal"
    assert "modal-visual-line" in host.modes


def test_busy_engine_rejects_synchronous_calls() -> None:
    engine, host = make_engine("text")
    seen: list[bool] = []

    async def work() -> None:
        seen.append(engine.busy)
        with pytest.raises(EngineBusyError):
            engine.toggle()
        with pytest.raises(EngineBusyError) as excinfo:
            engine.on_prompt_cancelled("vi-command")
        assert excinfo.value.operation == "cancel the command line"

    asyncio.run(engine.manager.run_exclusive(work))

    assert seen == [True]
    assert not engine.busy
    assert engine.enabled


def test_concurrent_keys_are_processed_in_order() -> None:
    engine, host = make_engine("alpha beta")

    async def type_concurrently() -> None:
        await asyncio.gather(
            engine.handle_key(parse_key("d")),
            engine.handle_key(parse_key("i")),
            engine.handle_key(parse_key("w")),
        )

    asyncio.run(type_concurrently())

    assert host.text == " beta"
    assert engine.mode is EditorMode.NORMAL


# -- insert and repeat -----------------------------------------------------
def test_insert_session_is_recorded_and_repeated() -> None:
    engine, host = make_engine("world")

    feed(engine, "ihello ")
    feed(engine, ["Escape"])
    assert host.text == "hello world"
    assert engine.state.last_change == InsertChange(inserted_text="hello ")

    host.set_cursor(0)
    feed(engine, ".")
    assert host.text == "hello hello world"


def test_backspace_in_insert_mode() -> None:
    engine, host = make_engine("")

    feed(engine, "iab")
    feed(engine, ["Backspace", "Escape"])

    assert host.text == "a"
    assert engine.state.last_change == InsertChange(inserted_text="a")


def test_empty_insert_session_records_nothing() -> None:
    engine, host = make_engine("abc")

    feed(engine, "i")
    feed(engine, ["Escape"])

    assert engine.state.last_change is None


def test_append_and_open_line() -> None:
    engine, host = make_engine("one\ntwo")

    feed(engine, "A!")
    feed(engine, ["Escape"])
    assert host.text == "one!\ntwo"

    feed(engine, "onew")
    feed(engine, ["Escape"])
    assert host.text == "one!\nnew\ntwo"

    feed(engine, "Otop")
    feed(engine, ["Escape"])
    assert host.text == "one!\ntop\nnew\ntwo"


def test_delete_char_repeat() -> None:
    engine, host = make_engine("abcdef")

    feed(engine, "x.")
    assert host.text == "cdef"

    feed(engine, "2.")
    assert host.text == "ef"


# -- single-key commands ---------------------------------------------------
def test_replace_reports_not_implemented() -> None:
    engine, host = make_engine("abc")

    feed(engine, "r")

    assert host.status == "Replace is not implemented"
    assert host.text == "abc"


def test_join_lines() -> None:
    engine, host = make_engine("one\ntwo")

    feed(engine, "J")

    assert host.text == "one two"


def test_first_non_blank() -> None:
    engine, host = make_engine("x\n    indented", cursor=12)

    feed(engine, "^")

    assert host.cursor == 6


def test_word_end_motion() -> None:
    engine, host = make_engine("alpha beta")

    feed(engine, "e")

    assert host.cursor == 5


def test_half_page_uses_setting() -> None:
    engine, host = make_engine("\n".join("x" * 3 for _ in range(30)), half_page_lines=4)

    feed(engine, ["C-d"])
    assert host.cursor_line() == 5

    feed(engine, ["2", "C-u"])
    assert host.cursor_line() == 1


def test_doc_motions_and_matching_bracket() -> None:
    engine, host = make_engine("(a)\nb\nc")

    feed(engine, "G")
    assert host.cursor == len(host.text)

    feed(engine, "gg%")
    assert host.cursor == 2


def test_paste_before_characterwise() -> None:
    engine, host = make_engine("abc", cursor=2)

    feed(engine, "ylP")

    assert host.text == "abcc"


def test_undo_and_redo() -> None:
    engine, host = make_engine("abc")

    feed(engine, "x")
    feed(engine, "u")
    assert host.text == "abc"

    feed(engine, ["C-r"])
    assert host.text == "bc"


def test_search_keys_delegate_to_host() -> None:
    engine, host = make_engine("abc")
    host.calls.clear()

    feed(engine, "/nNzz")

    assert host.calls == ["search", "find_next", "find_previous", "center_cursor"]
