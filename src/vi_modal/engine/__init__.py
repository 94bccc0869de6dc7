"""Engine state, change records and count bookkeeping.

The :class:`~vi_modal.engine.vi_engine.ViEngine` façade lives in its own
module because it depends on the mode layer built on top of this package.
"""

from .count import CountAccumulator
from .errors import EngineBusyError
from .state import (
    OPERATOR_MODES,
    VISUAL_MODES,
    BlockAnchor,
    ChangeRecord,
    EditorMode,
    EngineState,
    FindCharMemory,
    FindKind,
    InsertChange,
    LineOpChange,
    Operator,
    OperatorMotionChange,
    OperatorTextObjectChange,
    SimpleChange,
    TextObjectModifier,
)

__all__ = [
    "BlockAnchor",
    "ChangeRecord",
    "CountAccumulator",
    "EditorMode",
    "EngineBusyError",
    "EngineState",
    "FindCharMemory",
    "FindKind",
    "InsertChange",
    "LineOpChange",
    "OPERATOR_MODES",
    "Operator",
    "OperatorMotionChange",
    "OperatorTextObjectChange",
    "SimpleChange",
    "TextObjectModifier",
    "VISUAL_MODES",
]
