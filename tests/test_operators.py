from __future__ import annotations

import asyncio

from vi_modal.engine.state import (
    EditorMode,
    LineOpChange,
    Operator,
    OperatorMotionChange,
    OperatorTextObjectChange,
    SimpleChange,
    TextObjectModifier,
)
from vi_modal.engine.vi_engine import ViEngine
from vi_modal.host import MemoryHost
from vi_modal.operators import NO_CHANGE_MESSAGE, locate
from vi_modal.runtime.settings import EngineSettings


def make_engine(text: str = "", cursor: int = 0) -> tuple[ViEngine, MemoryHost]:
    host = MemoryHost(text)
    engine = ViEngine(host, EngineSettings())
    engine.toggle()
    host.set_cursor(cursor)
    host.calls.clear()
    return engine, host


def feed(engine: ViEngine, keys) -> None:
    asyncio.run(engine.feed(keys))


def test_delete_word_then_repeat() -> None:
    engine, host = make_engine("alpha beta gamma")

    feed(engine, "dw")
    assert host.text == "beta gamma"
    assert engine.state.last_change == OperatorMotionChange(
        operator=Operator.DELETE, motion="move_word_right"
    )

    feed(engine, ".")
    assert host.text == "gamma"
    assert engine.mode is EditorMode.NORMAL


def test_change_word_repeat_carries_inserted_text() -> None:
    engine, host = make_engine("one two three")

    feed(engine, "cwX")
    assert engine.mode is EditorMode.INSERT
    feed(engine, ["Escape"])
    assert host.text == "Xtwo three"
    assert engine.state.last_change.inserted_text == "X"

    feed(engine, "w.")
    assert host.text == "Xtwo X"


def test_yank_motion_leaves_buffer_and_cursor() -> None:
    engine, host = make_engine("alpha beta", cursor=2)

    feed(engine, "yl")

    assert host.text == "alpha beta"
    assert host.cursor == 2
    assert host.clipboard_text == "p"
    assert engine.state.last_change is None
    assert engine.state.last_yank_was_linewise is False


def test_yank_backward_motion_lands_on_selection_start() -> None:
    engine, host = make_engine("abcd", cursor=3)

    feed(engine, "yh")

    assert host.text == "abcd"
    assert host.clipboard_text == "c"
    assert host.cursor == 2
    assert host.selection is None


def test_yank_word_uses_compound_action() -> None:
    engine, host = make_engine("alpha beta")

    feed(engine, "yw")

    assert host.calls == ["yank_word_forward"]
    assert host.clipboard_text == "alpha "
    assert host.cursor == 0


def test_counted_delete_char_batches_primitive() -> None:
    engine, host = make_engine("abcdef")

    feed(engine, "3x")

    assert host.text == "def"
    assert host.calls == ["delete_forward", "delete_forward", "delete_forward"]
    assert engine.state.last_change == SimpleChange(action="delete_forward", count=3)


def test_count_split_across_operator_concatenates() -> None:
    engine, host = make_engine(" ".join(f"w{i}" for i in range(40)))

    feed(engine, "2d3w")

    assert host.calls == ["delete_word_forward"] * 23
    assert host.text.startswith("w23 ")


def test_motion_without_selection_aborts() -> None:
    engine, host = make_engine("a(b)c", cursor=1)

    feed(engine, "d%")

    assert host.text == "a(b)c"
    assert engine.mode is EditorMode.NORMAL
    assert engine.state.last_change is None


def test_delete_lines_and_repeat() -> None:
    engine, host = make_engine("one\ntwo\nthree\nfour")

    feed(engine, "dd")
    assert host.text == "two\nthree\nfour"
    assert engine.state.last_change == LineOpChange(action="delete_line")

    feed(engine, "2.")
    assert host.text == "four"


def test_yank_line_then_paste_below() -> None:
    engine, host = make_engine("one\ntwo\nthree")

    feed(engine, "yy")
    assert host.status == "1 line yanked"
    assert host.cursor == 0
    assert engine.state.last_yank_was_linewise is True

    feed(engine, "p")
    assert host.text == "one\none\ntwo\nthree"


def test_change_line_clears_content_and_repeats() -> None:
    engine, host = make_engine("first\nsecond")

    feed(engine, "ccnew")
    feed(engine, ["Escape"])
    assert host.text == "new\nsecond"

    feed(engine, "j.")
    assert host.text == "new\nnew"


def test_delete_to_line_end() -> None:
    engine, host = make_engine("keep this\nnext", cursor=4)

    feed(engine, "D")

    assert host.text == "keep\nnext"
    assert engine.mode is EditorMode.NORMAL


def test_repeat_without_change_reports_status() -> None:
    engine, host = make_engine("abc")

    feed(engine, ".")

    assert host.status == NO_CHANGE_MESSAGE
    assert host.text == "abc"


def test_substitute_repeat_reinserts_text() -> None:
    engine, host = make_engine("abc abc")

    feed(engine, "sX")
    feed(engine, ["Escape"])
    assert host.text == "Xbc abc"

    host.set_cursor(4)
    feed(engine, ".")
    assert host.text == "Xbc Xbc"


def test_delete_inner_quotes() -> None:
    engine, host = make_engine('say "hello world" now', cursor=7)

    feed(engine, 'di"')

    assert host.text == 'say "" now'
    assert engine.state.last_change == OperatorTextObjectChange(
        operator=Operator.DELETE,
        modifier=TextObjectModifier.INNER,
        object_key='"',
    )


def test_delete_around_quotes() -> None:
    engine, host = make_engine('say "hello world" now', cursor=7)

    feed(engine, 'da"')

    assert host.text == "say  now"


def test_change_inner_brackets_enters_insert() -> None:
    engine, host = make_engine("f(x, (y), z)", cursor=6)

    feed(engine, "cibz")

    assert host.text == "f(x, (z), z)"
    assert engine.mode is EditorMode.INSERT


def test_yank_text_object_restores_cursor_to_start() -> None:
    engine, host = make_engine("call(arg)", cursor=6)

    feed(engine, "yi(")

    assert host.clipboard_text == "arg"
    assert host.cursor == 5
    assert host.text == "call(arg)"


def test_missing_text_object_leaves_buffer() -> None:
    engine, host = make_engine("no quotes here", cursor=3)

    feed(engine, 'di"')

    assert host.text == "no quotes here"
    assert engine.mode is EditorMode.NORMAL
    assert engine.state.last_change is None


def test_locate_word_objects() -> None:
    text = "foo bar.baz qux"

    assert locate(text, 5, "w", TextObjectModifier.INNER) == (4, 7)
    assert locate(text, 5, "w", TextObjectModifier.AROUND) == (4, 7)
    assert locate(text, 1, "w", TextObjectModifier.AROUND) == (0, 4)
    assert locate(text, 5, "W", TextObjectModifier.INNER) == (4, 11)


def test_locate_quotes_and_brackets() -> None:
    text = 'say "hello world" now'

    start, end = locate(text, 7, '"', TextObjectModifier.INNER)
    assert text[start:end] == "hello world"
    start, end = locate(text, 7, '"', TextObjectModifier.AROUND)
    assert text[start:end] == '"hello world"'

    nested = "f(x, (y), z)"
    start, end = locate(nested, 6, "b", TextObjectModifier.INNER)
    assert nested[start:end] == "y"
    start, end = locate(nested, 3, ")", TextObjectModifier.AROUND)
    assert nested[start:end] == "(x, (y), z)"
    assert locate(nested, 0, "{", TextObjectModifier.INNER) is None
