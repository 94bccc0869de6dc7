from __future__ import annotations

import asyncio

from vi_modal.engine.state import EditorMode
from vi_modal.engine.vi_engine import ViEngine
from vi_modal.host import MemoryHost
from vi_modal.keymaps import Binding, KeySequence
from vi_modal.modes import KeyInput, NormalMode
from vi_modal.modes.keymap_helpers import parse_key
from vi_modal.runtime.settings import EngineSettings


def make_engine(text: str = "") -> tuple[ViEngine, MemoryHost]:
    host = MemoryHost(text)
    engine = ViEngine(host, EngineSettings())
    engine.toggle()
    return engine, host


def press(engine: ViEngine, *notation: str):
    return asyncio.run(engine.feed(list(notation)))[-1]


def test_normal_mode_uses_keymap_binding() -> None:
    engine, host = make_engine("alpha")

    result = press(engine, "i")

    assert result.switch_to is EditorMode.INSERT
    assert result.consumed is True
    assert engine.mode is EditorMode.INSERT
    assert host.editor_mode == "vi-insert"
    assert host.status == "-- INSERT --"


def test_insert_mode_escape_binding() -> None:
    engine, host = make_engine()
    press(engine, "i")

    result = press(engine, "Escape")

    assert result.switch_to is EditorMode.NORMAL
    assert engine.mode is EditorMode.NORMAL
    assert host.editor_mode == "vi-normal"


def test_insert_mode_passes_text_through() -> None:
    engine, host = make_engine()
    press(engine, "i")

    result = asyncio.run(engine.handle_key(KeyInput(key="x", text="x")))

    assert result.consumed is False
    assert result.status == "passthrough"
    assert host.text == ""


def test_normal_mode_pending_sequence() -> None:
    engine, host = make_engine("one\ntwo\nthree")
    host.set_cursor(len(host.text))

    pending = press(engine, "g")
    assert pending.status == "pending"
    assert pending.consumed is True

    press(engine, "g")
    assert host.cursor == 0


def test_pending_prefix_falls_back_to_single_key() -> None:
    engine, host = make_engine("one\ntwo")

    press(engine, "g")
    press(engine, "j")

    assert host.cursor_line() == 2
    mode = engine.manager.get_mode(EditorMode.NORMAL)
    assert isinstance(mode, NormalMode)
    assert mode.pending_tokens == ()


def test_unbound_key_is_swallowed_in_normal_mode() -> None:
    engine, host = make_engine("abc")

    result = press(engine, "Q")

    assert result.consumed is True
    assert result.status == "unbound"
    assert host.text == "abc"


def test_custom_binding_resolves_through_manager() -> None:
    engine, host = make_engine("abc")
    registry = engine.manager.keymap_registry
    registry.register_binding(
        Binding(
            id="normal.quick_insert",
            mode="normal",
            sequence=KeySequence.from_strings("Q", "i"),
            action_id="insert.before",
        )
    )

    press(engine, "Q")
    press(engine, "i")

    assert engine.mode is EditorMode.INSERT


def test_count_prefix_is_shown_and_consumed() -> None:
    engine, host = make_engine("a\nb\nc\nd\ne")

    press(engine, "3")
    assert host.status == "-- NORMAL -- (3)"
    assert engine.state.count == 3

    press(engine, "j")
    assert host.cursor_line() == 4
    assert engine.state.count is None


def test_zero_extends_count_or_moves_to_line_start() -> None:
    engine, host = make_engine("abcdef\n" * 12)
    host.set_cursor(3)

    press(engine, "0")
    assert host.cursor == 0

    press(engine, "1", "0", "j")
    assert host.cursor_line() == 11


def test_operator_pending_indicator_keeps_count() -> None:
    engine, host = make_engine("alpha beta")

    press(engine, "2", "d")

    assert engine.mode is EditorMode.OPERATOR_PENDING
    assert engine.state.pending_operator is not None
    assert host.status == "-- OPERATOR (d) -- (2)"


def test_escape_from_operator_pending_discards_state() -> None:
    engine, host = make_engine("alpha beta")

    press(engine, "3", "d", "Escape")

    assert engine.mode is EditorMode.NORMAL
    assert engine.state.pending_operator is None
    assert engine.state.count is None
    assert host.text == "alpha beta"


def test_different_operator_key_cancels() -> None:
    engine, host = make_engine("alpha beta")

    press(engine, "d", "y")

    assert engine.mode is EditorMode.NORMAL
    assert host.text == "alpha beta"


def test_invoke_runs_binding_by_id() -> None:
    engine, host = make_engine("alpha")

    result = asyncio.run(engine.invoke("normal.insert_line_end"))

    assert result.switch_to is EditorMode.INSERT
    assert host.cursor == 5


def test_invoke_ignores_binding_of_inactive_mode() -> None:
    engine, host = make_engine("alpha")

    result = asyncio.run(engine.invoke("visual.delete"))

    assert result.status == "stale"
    assert result.consumed is False
    assert host.text == "alpha"


def test_parse_key_handles_named_and_modified_keys() -> None:
    assert parse_key("Escape").token == "Escape"
    assert parse_key("C-r").token == "C-r"
    assert parse_key("Space").text == " "
    assert parse_key("$").text == "$"
