"""Executes parsed ex commands against the host."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Optional, Union

from vi_modal.host import HostEditor
from vi_modal.runtime import telemetry

from .commands import ExCommandError
from .parser import GotoLine, ParsedCommand, parse_command_line

VERSION_MESSAGE = "vi-modal: modal editing engine"
HELP_MESSAGE = (
    "Commands: :w :q :wq :x :e :enew :n :prev :b :ls :sp :vs :only :close "
    ":u :red :set :pwd :noh :N (go to line)"
)


@dataclass(frozen=True, slots=True)
class ExResult:
    """Outcome of one command line: a status message or an error, never both."""

    message: Optional[str] = None
    error: Optional[str] = None

    def __post_init__(self) -> None:
        if self.message is not None and self.error is not None:
            raise ValueError("ExResult carries either a message or an error")

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def status_text(self) -> Optional[str]:
        if self.error is not None:
            return f"E: {self.error}"
        return self.message


Handler = Callable[[ParsedCommand], Union[ExResult, Awaitable[ExResult]]]


def _basename(path: Optional[str]) -> str:
    return os.path.basename(path) if path else "[No Name]"


class ExInterpreter:
    """Parses a confirmed ``:`` line and dispatches it to host actions."""

    def __init__(self, host: HostEditor) -> None:
        self.host = host
        self._handlers: Dict[str, Handler] = {
            "write": self._write,
            "quit": self._quit,
            "wq": self._write_quit,
            "xit": self._write_quit,
            "exit": self._write_quit,
            "wall": self._write_all,
            "qall": self._quit_all,
            "wqall": self._write_quit_all,
            "edit": self._edit,
            "enew": self._enew,
            "revert": self._revert,
            "next": self._action("next_buffer"),
            "previous": self._action("prev_buffer"),
            "bnext": self._action("next_buffer"),
            "bprevious": self._action("prev_buffer"),
            "bdelete": self._guarded_close(":bd!"),
            "close": self._guarded_close(":close!"),
            "tabclose": self._guarded_close(":tabclose!"),
            "buffer": self._buffer,
            "buffers": self._list_buffers,
            "ls": self._list_buffers,
            "files": self._list_buffers,
            "split": self._split("split_horizontal"),
            "vsplit": self._split("split_vertical"),
            "new": self._split("split_horizontal", new_buffer=True),
            "vnew": self._split("split_vertical", new_buffer=True),
            "only": self._action("close_other_splits"),
            "tabnew": self._tab_new,
            "tabedit": self._tab_new,
            "tabnext": self._action("next_buffer"),
            "tabprevious": self._action("prev_buffer"),
            "copen": self._action("show_diagnostics"),
            "cclose": lambda cmd: ExResult(message="Diagnostics panel closed"),
            "cnext": self._action("goto_next_diagnostic"),
            "cprevious": self._action("goto_prev_diagnostic"),
            "cfirst": self._action("goto_first_diagnostic"),
            "clast": self._action("goto_last_diagnostic"),
            "nohlsearch": self._action("clear_search"),
            "substitute": self._not_implemented("Substitute"),
            "global": self._not_implemented("Global"),
            "vglobal": self._not_implemented("Global"),
            "undo": self._action("undo"),
            "redo": self._action("redo"),
            "set": self._set,
            "pwd": lambda cmd: ExResult(message=self.host.cwd()),
            "cd": self._cd,
            "file": self._file,
            "help": self._help,
            "version": lambda cmd: ExResult(message=VERSION_MESSAGE),
            "marks": self._not_implemented("Marks"),
            "registers": self._not_implemented("Registers"),
            "jumps": self._not_implemented("Jump list"),
            "syntax": self._syntax,
            "read": self._not_implemented("Read"),
            "saveas": self._not_implemented("Save as"),
            "grep": self._grep,
            "vimgrep": self._grep,
            "make": lambda cmd: ExResult(error="Use a terminal to run make"),
            "ascii": lambda cmd: ExResult(
                message="Character info is shown in the status bar"
            ),
        }

    async def execute(self, line: str) -> ExResult:
        with telemetry.span(
            "ex::execute", component="ex", metadata={"input": line}
        ) as handle:
            try:
                parsed = parse_command_line(line)
                if isinstance(parsed, GotoLine):
                    result = await self.goto_line(parsed.line)
                else:
                    if parsed.range is not None:
                        telemetry.record_event(
                            "ex.range_ignored",
                            level="debug",
                            data={"command": parsed.name, "range": parsed.range},
                        )
                    result = await self._dispatch(parsed)
            except ExCommandError as exc:
                result = ExResult(error=str(exc))
            if result.error is not None:
                handle.add_metadata("error", result.error)
                telemetry.record_event(
                    "ex.error", level="warning", data={"input": line, "error": result.error}
                )
            return result

    async def _dispatch(self, parsed: ParsedCommand) -> ExResult:
        handler = self._handlers.get(parsed.name)
        if handler is None:
            raise ExCommandError(f"Not an editor command: {parsed.name}")
        outcome = handler(parsed)
        if isinstance(outcome, ExResult):
            return outcome
        return await outcome

    async def goto_line(self, line: int) -> ExResult:
        if line < 1:
            raise ExCommandError("Line number must be positive")
        length = self.host.buffer_length()
        text = await self.host.get_text(0, length)
        line_start = 0
        current = 1
        while current < line:
            newline = text.find("\n", line_start)
            if newline == -1:
                break
            line_start = newline + 1
            current += 1
        if current == line:
            self.host.set_cursor(line_start)
            return ExResult()
        self.host.execute_action("move_document_end")
        return ExResult(message=f"Line {line} is beyond the end of the file")

    # -- helpers -----------------------------------------------------------
    def _ensure_saved(self, retry: str) -> None:
        if self.host.is_buffer_modified(self.host.active_buffer_id()):
            raise ExCommandError(f"No write since last change (add ! to override: {retry})")

    def _action(self, action: str) -> Handler:
        def run(cmd: ParsedCommand) -> ExResult:
            self.host.execute_action(action)
            return ExResult()

        return run

    def _not_implemented(self, label: str) -> Handler:
        return lambda cmd: ExResult(error=f"{label} is not implemented")

    def _guarded_close(self, retry: str) -> Handler:
        def run(cmd: ParsedCommand) -> ExResult:
            if not cmd.force:
                self._ensure_saved(retry)
            self.host.execute_action("close_buffer")
            return ExResult()

        return run

    def _split(self, action: str, *, new_buffer: bool = False) -> Handler:
        def run(cmd: ParsedCommand) -> ExResult:
            self.host.execute_action(action)
            if new_buffer:
                self.host.execute_action("new_buffer")
            if cmd.args:
                self.host.open_file(cmd.args)
            return ExResult()

        return run

    # -- files -------------------------------------------------------------
    def _write(self, cmd: ParsedCommand) -> ExResult:
        if cmd.args:
            return ExResult(error="Writing to another file is not implemented")
        self.host.execute_action("save")
        return ExResult(message="File saved")

    def _quit(self, cmd: ParsedCommand) -> ExResult:
        if not cmd.force:
            self._ensure_saved(":q!")
        self.host.execute_action("close_buffer")
        return ExResult()

    def _write_quit(self, cmd: ParsedCommand) -> ExResult:
        self.host.execute_action("save")
        self.host.execute_action("close_buffer")
        return ExResult()

    def _write_all(self, cmd: ParsedCommand) -> ExResult:
        self.host.execute_action("save_all")
        return ExResult(message="All files saved")

    def _quit_all(self, cmd: ParsedCommand) -> ExResult:
        if not cmd.force and any(info.modified for info in self.host.list_buffers()):
            raise ExCommandError("No write since last change (add ! to override: :qa!)")
        self.host.execute_action("quit_all")
        return ExResult()

    def _write_quit_all(self, cmd: ParsedCommand) -> ExResult:
        self.host.execute_action("save_all")
        self.host.execute_action("quit_all")
        return ExResult()

    def _edit(self, cmd: ParsedCommand) -> ExResult:
        if not cmd.args:
            if cmd.force:
                self.host.execute_action("revert")
                return ExResult(message="File reverted, changes discarded")
            self._ensure_saved(":e!")
            self.host.execute_action("revert")
            return ExResult(message="File reverted")
        line = 0
        if cmd.plus is not None and cmd.plus != "$":
            if not cmd.plus.isdigit():
                return ExResult(error=f"Unsupported +cmd: +{cmd.plus}")
            line = int(cmd.plus)
        self.host.open_file(cmd.args, line, 0)
        if cmd.plus == "$":
            self.host.execute_action("move_document_end")
        return ExResult()

    def _enew(self, cmd: ParsedCommand) -> ExResult:
        if not cmd.force:
            self._ensure_saved(":enew!")
        self.host.execute_action("new_buffer")
        return ExResult()

    def _revert(self, cmd: ParsedCommand) -> ExResult:
        self.host.execute_action("revert")
        return ExResult(message="File reverted")

    def _tab_new(self, cmd: ParsedCommand) -> ExResult:
        self.host.execute_action("new_buffer")
        if cmd.args:
            self.host.open_file(cmd.args)
        return ExResult()

    # -- buffers -----------------------------------------------------------
    def _buffer(self, cmd: ParsedCommand) -> ExResult:
        if not cmd.args:
            info = self.host.buffer_info(self.host.active_buffer_id())
            if info is None:
                return ExResult()
            return ExResult(message=f"Buffer {info.id}: {_basename(info.path)}")
        target = cmd.args.strip()
        buffers = list(self.host.list_buffers())
        if target.isdigit():
            number = int(target)
            if any(info.id == number for info in buffers):
                self.host.show_buffer(number)
                return ExResult()
            return ExResult(error=f"Buffer {number} does not exist")
        pattern = target.lower()
        matches = [
            info for info in buffers if info.path and pattern in _basename(info.path).lower()
        ]
        if len(matches) == 1:
            self.host.show_buffer(matches[0].id)
            return ExResult()
        if matches:
            return ExResult(error=f"More than one match for {target}")
        return ExResult(error=f"No matching buffer for {target}")

    def _list_buffers(self, cmd: ParsedCommand) -> ExResult:
        active = self.host.active_buffer_id()
        entries = [
            f"{'%' if info.id == active else ' '}{info.id}: "
            f"{_basename(info.path)}{' [+]' if info.modified else ''}"
            for info in self.host.list_buffers()
        ]
        return ExResult(message=" | ".join(entries) or "No buffers")

    # -- settings and info -------------------------------------------------
    def _set(self, cmd: ParsedCommand) -> ExResult:
        if not cmd.args:
            return ExResult(error="Usage: :set option")
        option = cmd.args.split("=", 1)[0].strip()
        if option in ("number", "nu"):
            self.host.set_line_numbers(True)
            return ExResult(message="Line numbers on")
        if option in ("nonumber", "nonu"):
            self.host.set_line_numbers(False)
            return ExResult(message="Line numbers off")
        if option in ("wrap", "nowrap"):
            self.host.execute_action("toggle_wrap")
            return ExResult(message="Line wrap toggled")
        return ExResult(error=f"Unknown option: {option}")

    def _cd(self, cmd: ParsedCommand) -> ExResult:
        if not cmd.args:
            return ExResult(message=self.host.cwd())
        return ExResult(error="Cannot change directory")

    def _file(self, cmd: ParsedCommand) -> ExResult:
        if cmd.args:
            return ExResult(error="Renaming the buffer is not implemented")
        info = self.host.buffer_info(self.host.active_buffer_id())
        if info is None:
            return ExResult(error="No buffer")
        modified = " [Modified]" if info.modified else ""
        return ExResult(
            message=(
                f'"{info.path or "[No Name]"}"{modified} '
                f"line {self.host.cursor_line()} --{info.length} bytes--"
            )
        )

    def _help(self, cmd: ParsedCommand) -> ExResult:
        if cmd.args:
            return ExResult(message=f"No help available for {cmd.args}")
        return ExResult(message=HELP_MESSAGE)

    def _syntax(self, cmd: ParsedCommand) -> ExResult:
        if cmd.args == "off":
            return ExResult(error="Syntax highlighting cannot be disabled")
        return ExResult(message="Syntax highlighting is always on")

    def _grep(self, cmd: ParsedCommand) -> ExResult:
        self.host.execute_action("search")
        if cmd.args:
            return ExResult(message=f"Use the search dialog for: {cmd.args}")
        return ExResult()


__all__ = ["ExInterpreter", "ExResult", "HELP_MESSAGE", "VERSION_MESSAGE"]
