"""Replays the last recorded change for the ``.`` command."""

from __future__ import annotations

from typing import Optional

from vi_modal.engine.count import CountAccumulator
from vi_modal.engine.state import (
    EngineState,
    InsertChange,
    LineOpChange,
    Operator,
    OperatorMotionChange,
    OperatorTextObjectChange,
    SimpleChange,
)
from vi_modal.host import HostEditor
from vi_modal.runtime import telemetry

from .composer import OperatorComposer, run_counted
from .text_objects import TextObjectResolver

NO_CHANGE_MESSAGE = "No change to repeat"


def clear_line(host: HostEditor) -> None:
    """Delete the current line's content, keeping its newline."""

    host.execute_action("move_line_start")
    start = host.cursor_position()
    host.execute_action("move_line_end")
    end = host.cursor_position()
    if start is not None and end is not None and end > start:
        host.delete_range(start, end)


class RepeatReplayer:
    """Re-runs ``state.last_change`` without re-recording it.

    An explicit count typed before ``.`` replaces the recorded count.
    """

    def __init__(
        self,
        host: HostEditor,
        state: EngineState,
        counter: CountAccumulator,
        composer: OperatorComposer,
        text_objects: TextObjectResolver,
    ) -> None:
        self.host = host
        self.state = state
        self.counter = counter
        self.composer = composer
        self.text_objects = text_objects

    def _resolve_count(self, recorded: Optional[int]) -> int:
        explicit = self.counter.peek()
        self.counter.reset()
        if explicit is not None:
            return explicit
        return recorded or 1

    def _insert(self, text: Optional[str]) -> None:
        if text:
            self.host.insert_text(text)

    async def replay(self) -> Optional[str]:
        """Replay the last change; returns a status message when there is none."""

        change = self.state.last_change
        if change is None:
            self.counter.reset()
            return NO_CHANGE_MESSAGE

        with telemetry.span(
            "repeat::replay", component="operators", metadata={"kind": change.kind}
        ):
            if isinstance(change, SimpleChange):
                count = self._resolve_count(change.count)
                if change.action == "substitute":
                    run_counted(self.host, "delete_forward", count)
                    self._insert(change.inserted_text)
                else:
                    run_counted(self.host, change.action, count)
            elif isinstance(change, LineOpChange):
                count = self._resolve_count(change.count)
                if change.action == "change_line":
                    clear_line(self.host)
                    self._insert(change.inserted_text)
                else:
                    run_counted(self.host, change.action, count)
            elif isinstance(change, OperatorMotionChange):
                count = self._resolve_count(change.count)
                if change.operator is Operator.CHANGE:
                    if self.composer.apply(Operator.DELETE, change.motion, count, record=False):
                        self._insert(change.inserted_text)
                else:
                    self.composer.apply(change.operator, change.motion, count, record=False)
            elif isinstance(change, OperatorTextObjectChange):
                self.counter.reset()
                operator = change.operator
                if operator is Operator.CHANGE:
                    operator = Operator.DELETE
                applied = await self.text_objects.apply(
                    operator, change.modifier, change.object_key, record=False
                )
                if applied and change.operator is Operator.CHANGE:
                    self._insert(change.inserted_text)
            elif isinstance(change, InsertChange):
                self.counter.reset()
                self._insert(change.inserted_text)
        return None


__all__ = ["NO_CHANGE_MESSAGE", "RepeatReplayer", "clear_line"]
