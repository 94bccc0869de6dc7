from __future__ import annotations

import asyncio

import pytest

from vi_modal.engine.state import EditorMode
from vi_modal.engine.vi_engine import ViEngine
from vi_modal.ex import (
    ExCommandError,
    ExInterpreter,
    ExResult,
    GotoLine,
    find_command,
    parse_command_line,
)
from vi_modal.host import MemoryHost
from vi_modal.runtime.settings import EngineSettings


def make_interpreter(text: str = "", **host_kwargs) -> tuple[ExInterpreter, MemoryHost]:
    host = MemoryHost(text, **host_kwargs)
    return ExInterpreter(host), host


def run(interpreter: ExInterpreter, line: str) -> ExResult:
    return asyncio.run(interpreter.execute(line))


# -- resolution ------------------------------------------------------------
def test_find_command_prefers_short_aliases() -> None:
    assert find_command("w").name == "write"
    assert find_command("q").name == "quit"
    assert find_command("e").name == "edit"
    assert find_command("s").name == "substitute"


def test_find_command_unique_prefix() -> None:
    assert find_command("vs").name == "vsplit"
    assert find_command("noh").name == "nohlsearch"
    assert find_command("tabn").name == "tabnew"


def test_find_command_unknown() -> None:
    with pytest.raises(ExCommandError, match="Not an editor command: xy"):
        find_command("xy")


def test_find_command_ambiguous() -> None:
    with pytest.raises(ExCommandError, match="Ambiguous command: fil"):
        find_command("fil")


# -- parsing ---------------------------------------------------------------
def test_parse_line_number() -> None:
    assert parse_command_line("42") == GotoLine(42)


def test_parse_bang_and_arguments() -> None:
    parsed = parse_command_line("q!")
    assert parsed.name == "quit"
    assert parsed.force is True

    edit = parse_command_line(":e +3 notes.txt")
    assert edit.name == "edit"
    assert edit.plus == "3"
    assert edit.args == "notes.txt"


def test_parse_keeps_range_unapplied() -> None:
    parsed = parse_command_line("%s/a/b/")

    assert parsed.name == "substitute"
    assert parsed.range == "%"
    assert parsed.args == "/a/b/"


def test_command_name_runs_to_word_boundary() -> None:
    with pytest.raises(ExCommandError, match="Not an editor command: q1"):
        parse_command_line("q1")
    assert parse_command_line("wq").name == "wq"


def test_parse_errors() -> None:
    with pytest.raises(ExCommandError, match="No ! allowed"):
        parse_command_line("pwd!")
    with pytest.raises(ExCommandError, match="Shell commands"):
        parse_command_line("!ls")
    with pytest.raises(ExCommandError, match="Not a valid command"):
        parse_command_line("$")


def test_arguments_dropped_for_commands_without_them() -> None:
    assert parse_command_line("pwd extra").args is None


# -- execution -------------------------------------------------------------
def test_write_saves_buffer() -> None:
    interpreter, host = make_interpreter("text", path="a.txt")
    host.insert_text("more ")

    result = run(interpreter, "w")

    assert result == ExResult(message="File saved")
    assert host.files["a.txt"] == "more text"
    assert not host.is_buffer_modified(host.active_buffer_id())


def test_quit_refuses_modified_buffer() -> None:
    interpreter, host = make_interpreter("text")
    host.insert_text("x")

    result = run(interpreter, "q")

    assert result.error == "No write since last change (add ! to override: :q!)"
    assert result.status_text.startswith("E: ")
    assert "close_buffer" not in host.calls

    forced = run(interpreter, "q!")
    assert forced.ok
    assert host.calls[-1] == "close_buffer"


def test_write_quit_runs_both_actions() -> None:
    interpreter, host = make_interpreter("text")

    run(interpreter, "wq")

    assert host.calls == ["save", "close_buffer"]


def test_qall_checks_every_buffer() -> None:
    interpreter, host = make_interpreter("", files={"b.txt": "b"})
    host.open_file("b.txt")
    host.insert_text("changed")
    host.show_buffer(1)

    assert run(interpreter, "qa").error.startswith("No write since last change")
    run(interpreter, "qa!")
    assert host.quit_requested


def test_goto_line() -> None:
    interpreter, host = make_interpreter("\n".join(f"line {n}" for n in range(1, 51)))

    result = run(interpreter, "42")

    assert result.ok and result.message is None
    assert host.cursor_line() == 42
    assert host.cursor == host.line_start_position(42)


def test_goto_line_past_end() -> None:
    interpreter, host = make_interpreter("a\nb\nc")

    result = run(interpreter, "9")

    assert result.message == "Line 9 is beyond the end of the file"
    assert host.cursor == len(host.text)


def test_unknown_and_unimplemented_commands() -> None:
    interpreter, _ = make_interpreter()

    assert run(interpreter, "xy").error == "Not an editor command: xy"
    assert run(interpreter, "q1").error == "Not an editor command: q1"
    assert run(interpreter, "%s/a/b/").error == "Substitute is not implemented"
    assert run(interpreter, "g/x/d").error == "Global is not implemented"
    assert run(interpreter, "!make").error == "Shell commands are not supported"


def test_edit_opens_file_at_line() -> None:
    interpreter, host = make_interpreter(files={"other.txt": "one\ntwo\nthree\nfour"})

    run(interpreter, "e +3 other.txt")

    assert host.buffer.path == "other.txt"
    assert host.cursor_line() == 3


def test_edit_without_args_reverts() -> None:
    interpreter, host = make_interpreter("saved")
    host.insert_text("x")

    assert run(interpreter, "e").error == "No write since last change (add ! to override: :e!)"
    result = run(interpreter, "e!")

    assert result.message == "File reverted, changes discarded"
    assert host.text == "saved"


def test_buffer_listing_and_switching() -> None:
    interpreter, host = make_interpreter(files={"other.txt": "x"})
    host.open_file("other.txt")

    listing = run(interpreter, "ls")
    assert listing.message == " 1: [No Name] | %2: other.txt"

    run(interpreter, "b 1")
    assert host.active_buffer_id() == 1
    run(interpreter, "b oth")
    assert host.active_buffer_id() == 2
    assert run(interpreter, "b 9").error == "Buffer 9 does not exist"


def test_set_options() -> None:
    interpreter, host = make_interpreter()

    assert run(interpreter, "set nonu").message == "Line numbers off"
    assert host.line_numbers is False
    assert run(interpreter, "se number").message == "Line numbers on"
    assert run(interpreter, "set nowrap").message == "Line wrap toggled"
    assert host.wrap is False
    assert run(interpreter, "set spell").error == "Unknown option: spell"


def test_ui_only_commands_call_host_actions() -> None:
    interpreter, host = make_interpreter()

    run(interpreter, "vs")
    run(interpreter, "noh")
    run(interpreter, "cn")

    assert host.calls == ["split_vertical", "clear_search", "goto_next_diagnostic"]


def test_ex_result_is_message_or_error() -> None:
    with pytest.raises(ValueError):
        ExResult(message="ok", error="bad")


def test_command_line_goto_keeps_mode() -> None:
    host = MemoryHost("\n".join(str(n) for n in range(1, 51)))
    engine = ViEngine(host, EngineSettings())
    engine.toggle()

    asyncio.run(engine.feed(":"))
    assert host.prompt == (":", "vi-command")
    handled = asyncio.run(engine.on_prompt_confirmed("vi-command", "42"))

    assert handled is True
    assert host.cursor_line() == 42
    assert engine.mode is EditorMode.NORMAL


def test_command_line_surfaces_errors_on_status() -> None:
    host = MemoryHost("text")
    engine = ViEngine(host, EngineSettings())
    engine.toggle()

    asyncio.run(engine.on_prompt_confirmed("vi-command", "frobnicate"))

    assert host.status == "E: Not an editor command: frobnicate"


def test_foreign_prompt_is_ignored() -> None:
    host = MemoryHost("text")
    engine = ViEngine(host, EngineSettings())
    engine.toggle()

    assert asyncio.run(engine.on_prompt_confirmed("search", "w")) is False
    assert engine.on_prompt_cancelled("search") is False
    assert "save" not in host.calls
