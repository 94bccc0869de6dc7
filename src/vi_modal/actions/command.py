"""Actions that evaluate ex command lines."""

from __future__ import annotations

from vi_modal.ex import ExResult
from vi_modal.modes.base_mode import ModeContext


async def submit_command_line(context: ModeContext, text: str) -> ExResult:
    """Run a confirmed ``:`` line and surface the outcome on the status line."""

    line = text.strip()
    if not line:
        return ExResult()
    context.bus.emit("command.submit", line)
    result = await context.components.ex.execute(line)
    status = result.status_text
    if status:
        context.host.set_status(status)
    if result.error is not None:
        context.bus.emit("command.error", result.error)
    return result


def cancel_command_line(context: ModeContext) -> None:
    context.bus.emit("command.cancel", None)


__all__ = ["cancel_command_line", "submit_command_line"]
