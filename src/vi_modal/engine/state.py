"""Engine state, mode identifiers and the change records used by ``.``."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional, Union


class EditorMode(str, Enum):
    """Exclusive interaction states of the engine."""

    NORMAL = "normal"
    INSERT = "insert"
    OPERATOR_PENDING = "operator-pending"
    FIND_CHAR = "find-char"
    VISUAL = "visual"
    VISUAL_LINE = "visual-line"
    VISUAL_BLOCK = "visual-block"
    TEXT_OBJECT = "text-object"

    @property
    def is_visual(self) -> bool:
        return self in VISUAL_MODES

    @property
    def read_only(self) -> bool:
        return self is not EditorMode.INSERT


VISUAL_MODES = frozenset(
    {EditorMode.VISUAL, EditorMode.VISUAL_LINE, EditorMode.VISUAL_BLOCK}
)

# Entering these keeps the pending operator and the pending count alive.
OPERATOR_MODES = frozenset({EditorMode.OPERATOR_PENDING, EditorMode.TEXT_OBJECT})


class Operator(str, Enum):
    DELETE = "d"
    CHANGE = "c"
    YANK = "y"

    @property
    def records_change(self) -> bool:
        return self is not Operator.YANK


class FindKind(str, Enum):
    """``f``/``t`` search forward, ``F``/``T`` backward; ``t``/``T`` stop short."""

    FORWARD = "f"
    FORWARD_TILL = "t"
    BACKWARD = "F"
    BACKWARD_TILL = "T"

    @property
    def forward(self) -> bool:
        return self in (FindKind.FORWARD, FindKind.FORWARD_TILL)

    @property
    def till(self) -> bool:
        return self in (FindKind.FORWARD_TILL, FindKind.BACKWARD_TILL)

    def reversed(self) -> "FindKind":
        return _REVERSED_FIND[self]


_REVERSED_FIND = {
    FindKind.FORWARD: FindKind.BACKWARD,
    FindKind.BACKWARD: FindKind.FORWARD,
    FindKind.FORWARD_TILL: FindKind.BACKWARD_TILL,
    FindKind.BACKWARD_TILL: FindKind.FORWARD_TILL,
}


class TextObjectModifier(str, Enum):
    INNER = "inner"
    AROUND = "around"

    @property
    def key(self) -> str:
        return "i" if self is TextObjectModifier.INNER else "a"


@dataclass(frozen=True, slots=True)
class FindCharMemory:
    kind: FindKind
    character: str


@dataclass(frozen=True, slots=True)
class BlockAnchor:
    line: int
    column: int


@dataclass(slots=True)
class SimpleChange:
    """A single primitive repeated ``count`` times (``x``, ``X``, ``s``)."""

    kind: ClassVar[str] = "simple"

    action: str
    count: int = 1
    inserted_text: Optional[str] = None


@dataclass(slots=True)
class LineOpChange:
    """Whole-line operation (``dd``, ``cc``, ``S``)."""

    kind: ClassVar[str] = "line-op"

    action: str
    count: int = 1
    inserted_text: Optional[str] = None


@dataclass(slots=True)
class OperatorMotionChange:
    kind: ClassVar[str] = "operator-motion"

    operator: Operator
    motion: str
    count: int = 1
    inserted_text: Optional[str] = None


@dataclass(slots=True)
class OperatorTextObjectChange:
    kind: ClassVar[str] = "operator-textobj"

    operator: Operator
    modifier: TextObjectModifier
    object_key: str
    inserted_text: Optional[str] = None


@dataclass(slots=True)
class InsertChange:
    """Plain insertion with no operator (``i``, ``a``, ``o``...)."""

    kind: ClassVar[str] = "insert"

    inserted_text: str


ChangeRecord = Union[
    SimpleChange,
    LineOpChange,
    OperatorMotionChange,
    OperatorTextObjectChange,
    InsertChange,
]


@dataclass(slots=True)
class EngineState:
    """Mutable state of one engine instance.

    ``pending_operator`` is only set while the mode is operator-pending or
    text-object. ``awaiting_insert_text`` marks ``last_change`` as the record
    that the next insert-mode session belongs to.
    """

    mode: EditorMode = EditorMode.NORMAL
    pending_operator: Optional[Operator] = None
    pending_find_char: Optional[FindKind] = None
    pending_text_object: Optional[TextObjectModifier] = None
    last_find_char: Optional[FindCharMemory] = None
    count: Optional[int] = None
    last_change: Optional[ChangeRecord] = None
    awaiting_insert_text: bool = False
    last_yank_was_linewise: bool = False
    visual_anchor: Optional[int] = None
    visual_anchor_line: Optional[int] = None
    visual_block_anchor: Optional[BlockAnchor] = None
    visual_head_line: Optional[int] = None
    insert_start_pos: Optional[int] = None
    enabled: bool = False

    def record_change(self, change: ChangeRecord, *, enters_insert: bool = False) -> None:
        self.last_change = change
        self.awaiting_insert_text = enters_insert

    def clear_visual(self) -> None:
        self.visual_anchor = None
        self.visual_anchor_line = None
        self.visual_block_anchor = None
        self.visual_head_line = None

    def reset(self) -> None:
        self.mode = EditorMode.NORMAL
        self.pending_operator = None
        self.pending_find_char = None
        self.pending_text_object = None
        self.count = None
        self.insert_start_pos = None
        self.awaiting_insert_text = False
        self.clear_visual()


__all__ = [
    "EditorMode",
    "VISUAL_MODES",
    "OPERATOR_MODES",
    "Operator",
    "FindKind",
    "TextObjectModifier",
    "FindCharMemory",
    "BlockAnchor",
    "SimpleChange",
    "LineOpChange",
    "OperatorMotionChange",
    "OperatorTextObjectChange",
    "InsertChange",
    "ChangeRecord",
    "EngineState",
]
