"""Operators applied through motions and text objects, plus ``.`` replay."""

from .composer import (
    COMPOUND_ACTIONS,
    MOTION_SELECTIONS,
    OperatorComposer,
    run_counted,
    target_mode,
)
from .repeat import NO_CHANGE_MESSAGE, RepeatReplayer, clear_line
from .text_objects import OBJECT_KEYS, TextObjectResolver, locate

__all__ = [
    "COMPOUND_ACTIONS",
    "MOTION_SELECTIONS",
    "NO_CHANGE_MESSAGE",
    "OBJECT_KEYS",
    "OperatorComposer",
    "RepeatReplayer",
    "TextObjectResolver",
    "clear_line",
    "locate",
    "run_counted",
    "target_mode",
]
