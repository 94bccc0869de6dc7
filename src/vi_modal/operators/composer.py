"""Operator + motion composition (``dw``, ``c$``, ``y3l``...)."""

from __future__ import annotations

from typing import Mapping

from vi_modal.engine.state import EditorMode, EngineState, Operator, OperatorMotionChange
from vi_modal.host import ActionCall, HostEditor
from vi_modal.runtime import telemetry

# Motion primitive -> selection-extending primitive covering the same span.
MOTION_SELECTIONS: Mapping[str, str] = {
    "move_left": "select_left",
    "move_right": "select_right",
    "move_up": "select_up",
    "move_down": "select_down",
    "move_word_left": "select_word_left",
    "move_word_right": "select_word_right",
    "move_line_start": "select_line_start",
    "move_line_end": "select_line_end",
    "move_document_start": "select_document_start",
    "move_document_end": "select_document_end",
}

# Single host actions that apply an operator through a motion in one step.
COMPOUND_ACTIONS: Mapping[Operator, Mapping[str, str]] = {
    Operator.DELETE: {
        "move_word_right": "delete_word_forward",
        "move_word_left": "delete_word_backward",
        "move_line_end": "delete_to_line_end",
        "move_line_start": "delete_to_line_start",
    },
    Operator.YANK: {
        "move_word_right": "yank_word_forward",
        "move_word_left": "yank_word_backward",
        "move_line_end": "yank_to_line_end",
        "move_line_start": "yank_to_line_start",
    },
}


def target_mode(operator: Operator, applied: bool) -> EditorMode:
    """Mode to enter once an operator finished (or gave up)."""

    if applied and operator is Operator.CHANGE:
        return EditorMode.INSERT
    return EditorMode.NORMAL


def run_counted(host: HostEditor, action: str, count: int) -> bool:
    if count == 1:
        return host.execute_action(action)
    return host.execute_actions([ActionCall(action, count)])


class OperatorComposer:
    """Turns ``(operator, motion, count)`` into host primitives.

    Change is carried out with the delete primitives; the caller then enters
    insert mode via :func:`target_mode`.
    """

    def __init__(self, host: HostEditor, state: EngineState) -> None:
        self.host = host
        self.state = state

    def apply(
        self, operator: Operator, motion: str, count: int = 1, *, record: bool = True
    ) -> bool:
        lookup = Operator.DELETE if operator is Operator.CHANGE else operator
        compound = COMPOUND_ACTIONS.get(lookup, {}).get(motion)
        selection = MOTION_SELECTIONS.get(motion)
        if compound is None and selection is None:
            telemetry.record_event(
                "composer.no_selection",
                level="debug",
                data={"operator": operator.value, "motion": motion},
            )
            return False

        if record and operator.records_change:
            self.state.record_change(
                OperatorMotionChange(operator=operator, motion=motion, count=count),
                enters_insert=operator is Operator.CHANGE,
            )

        with telemetry.span(
            "composer::apply",
            component="operators",
            metadata={"operator": operator.value, "motion": motion, "count": count},
        ) as handle:
            if compound is not None:
                handle.add_metadata("strategy", "compound")
                run_counted(self.host, compound, count)
                if operator is Operator.YANK:
                    self.state.last_yank_was_linewise = False
                return True

            handle.add_metadata("strategy", "selection")
            origin = self.host.cursor_position()
            run_counted(self.host, selection, count)
            if operator is Operator.YANK:
                self.state.last_yank_was_linewise = False
                self.host.execute_action("copy")
                head = self.host.cursor_position()
                if origin is not None and head is not None:
                    self.host.set_cursor(min(origin, head))
            else:
                self.host.execute_action("cut")
            return True

    def apply_to_line_end(self, operator: Operator) -> bool:
        """``D``/``C``: delete from the cursor to the end of the line by range."""

        if operator.records_change:
            self.state.record_change(
                OperatorMotionChange(operator=operator, motion="move_line_end"),
                enters_insert=operator is Operator.CHANGE,
            )
        start = self.host.cursor_position()
        self.host.execute_action("move_line_end")
        end = self.host.cursor_position()
        if start is not None and end is not None and end > start:
            self.host.delete_range(start, end)
        return True


__all__ = [
    "COMPOUND_ACTIONS",
    "MOTION_SELECTIONS",
    "OperatorComposer",
    "run_counted",
    "target_mode",
]
