from __future__ import annotations

import asyncio
from typing import List

from vi_modal.adapters.textual import (
    TextAreaHost,
    TextualUIHooks,
    TextualViAdapter,
    normalize_textual_key,
)
from vi_modal.engine.state import EditorMode, InsertChange
from vi_modal.engine.vi_engine import ViEngine
from vi_modal.runtime.settings import EngineSettings


def make_adapter(
    text: str = "", **hook_kwargs: object
) -> tuple[TextualViAdapter, ViEngine, TextAreaHost, List[str]]:
    host = TextAreaHost(text)
    engine = ViEngine(host, EngineSettings())
    engine.toggle()
    updates: List[str] = []
    hooks = TextualUIHooks(
        update_buffer=lambda mirror: updates.append(mirror.text), **hook_kwargs
    )
    return TextualViAdapter(engine, host, hooks), engine, host, updates


def test_normalize_named_and_printable_keys() -> None:
    assert normalize_textual_key("escape").token == "Escape"
    assert normalize_textual_key("enter").text == "\n"
    assert normalize_textual_key("space").text == " "
    assert normalize_textual_key("G", "G").token == "G"
    assert normalize_textual_key("dollar_sign", "$").text == "$"


def test_normalize_modified_keys() -> None:
    ctrl_v = normalize_textual_key("ctrl+v")
    assert ctrl_v.token == "C-v"
    assert ctrl_v.text is None
    assert normalize_textual_key("ctrl+r").token == "C-r"
    assert normalize_textual_key("shift+tab").token == "S-Tab"


def test_adapter_inserts_passthrough_text() -> None:
    adapter, engine, host, updates = make_adapter("alpha")

    asyncio.run(adapter.handle_textual_key("i", character="i"))
    asyncio.run(adapter.handle_textual_key("x", character="x"))
    asyncio.run(adapter.handle_textual_key("escape"))

    assert host.text == "xalpha"
    assert updates[-1] == "xalpha"
    assert engine.mode is EditorMode.NORMAL
    assert engine.state.last_change == InsertChange(inserted_text="x")


def test_adapter_emits_log_lines() -> None:
    logs: List[str] = []
    adapter, engine, host, _ = make_adapter("alpha", log=logs.append)

    asyncio.run(adapter.handle_textual_key("l", character="l"))

    assert any(line.startswith("key ->") for line in logs)
    assert any(line.startswith("result <-") and "cursor=1" in line for line in logs)


def test_adapter_relays_command_events() -> None:
    command_lines: List[str] = []
    events: List[tuple[str, object | None]] = []
    adapter, engine, host, _ = make_adapter(
        "alpha",
        show_command=command_lines.append,
        handle_event=lambda name, payload: events.append((name, payload)),
    )

    asyncio.run(adapter.handle_textual_key("colon", character=":"))
    assert host.prompt == (":", "vi-command")

    asyncio.run(adapter.submit_command("set nonu"))

    assert command_lines[-1] == ""
    assert ("command.submit", "set nonu") in events
    assert host.line_numbers is False
    assert host.status == "Line numbers off"


def test_adapter_reports_command_errors() -> None:
    events: List[tuple[str, object | None]] = []
    adapter, engine, host, _ = make_adapter(
        handle_event=lambda name, payload: events.append((name, payload)),
    )

    asyncio.run(adapter.submit_command("xy"))

    assert host.status == "E: Not an editor command: xy"
    assert ("command.error", "Not an editor command: xy") in events


def test_adapter_cancel_command() -> None:
    events: List[tuple[str, object | None]] = []
    adapter, engine, host, _ = make_adapter(
        handle_event=lambda name, payload: events.append((name, payload)),
    )

    adapter.cancel_command()

    assert ("command.cancel", None) in events


def test_text_area_host_reads_and_writes_files(tmp_path) -> None:
    target = tmp_path / "notes.txt"
    target.write_text("hello\n", encoding="utf-8")
    statuses: List[str] = []
    host = TextAreaHost(path=str(target), on_status=statuses.append)
    engine = ViEngine(host, EngineSettings())
    engine.toggle()

    asyncio.run(engine.feed("x"))
    result = asyncio.run(engine.execute_command("w"))

    assert result.message == "File saved"
    assert target.read_text(encoding="utf-8") == "ello\n"
    assert statuses[0] == "-- NORMAL --"
    assert host.mirror().attributes["name"] == str(target)


def test_text_area_host_opens_files_from_disk(tmp_path) -> None:
    other = tmp_path / "other.txt"
    other.write_text("one\ntwo\nthree\n", encoding="utf-8")
    host = TextAreaHost("scratch")
    engine = ViEngine(host, EngineSettings())
    engine.toggle()

    asyncio.run(engine.execute_command(f"e +2 {other}"))

    assert host.text == "one\ntwo\nthree\n"
    assert host.cursor_line() == 2
