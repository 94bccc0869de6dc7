"""Mode classes and shared dispatch types."""

from .base_mode import KeyInput, Mode, ModeBus, ModeContext, ModeResult
from .keymap_mode import KeymapMode
from .normal_mode import NormalMode
from .insert_mode import InsertMode
from .operator_mode import FindCharMode, OperatorPendingMode, TextObjectMode
from .visual_mode import VisualBlockMode, VisualLineMode, VisualMode

DEFAULT_MODES = (
    NormalMode,
    InsertMode,
    OperatorPendingMode,
    FindCharMode,
    TextObjectMode,
    VisualMode,
    VisualLineMode,
    VisualBlockMode,
)

__all__ = [
    "DEFAULT_MODES",
    "KeyInput",
    "KeymapMode",
    "Mode",
    "ModeBus",
    "ModeContext",
    "ModeResult",
    "NormalMode",
    "InsertMode",
    "OperatorPendingMode",
    "FindCharMode",
    "TextObjectMode",
    "VisualMode",
    "VisualLineMode",
    "VisualBlockMode",
]
