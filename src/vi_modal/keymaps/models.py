"""Dataclasses describing keymap bindings and action metadata."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Iterable, Iterator, Mapping

# Notation prefix <-> modifier name, e.g. ``C-v`` is ctrl+v.
_PREFIXES = {"C": "ctrl", "M": "alt", "S": "shift"}
_PREFIX_FOR = {name: prefix for prefix, name in _PREFIXES.items()}

# Named keys and the character they type, if any.
NAMED_KEYS = {"Escape": None, "Enter": "\n", "Tab": "\t", "Space": " ", "Backspace": None}


def _normalize_modifiers(modifiers: Iterable[str]) -> tuple[str, ...]:
    values = tuple(m.strip().lower() for m in modifiers if m.strip())
    return tuple(sorted(dict.fromkeys(values)))


@dataclass(frozen=True, slots=True)
class KeyStroke:
    """Single normalized key press used by key sequences."""

    key: str
    modifiers: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("key cannot be empty")
        object.__setattr__(self, "modifiers", _normalize_modifiers(self.modifiers))

    @property
    def token(self) -> str:
        prefix = "".join(f"{_PREFIX_FOR.get(m, m)}-" for m in self.modifiers)
        return f"{prefix}{self.key}"

    @property
    def text(self) -> str | None:
        """Character this stroke types, or ``None`` for commands."""

        if self.modifiers:
            return None
        if self.key in NAMED_KEYS:
            return NAMED_KEYS[self.key]
        return self.key if len(self.key) == 1 else None

    @classmethod
    def parse(cls, notation: str) -> "KeyStroke":
        """Parse ``a``, ``$``, ``Escape`` or ``C-v``.

        A lone ``-`` or a trailing ``-`` (``C--``) is the minus key itself.
        """

        modifiers: list[str] = []
        rest = notation
        while len(rest) > 2 and rest[1] == "-" and rest[0] in _PREFIXES:
            modifiers.append(_PREFIXES[rest[0]])
            rest = rest[2:]
        return cls(rest, tuple(modifiers))


@dataclass(frozen=True, slots=True)
class KeySequence:
    """Immutable collection of keystrokes."""

    strokes: tuple[KeyStroke, ...]

    def __post_init__(self) -> None:
        if not self.strokes:
            raise ValueError("KeySequence requires at least one stroke")

    @property
    def tokens(self) -> tuple[str, ...]:
        return tuple(stroke.token for stroke in self.strokes)

    @property
    def notation(self) -> str:
        return " ".join(self.tokens)

    def append(self, *strokes: KeyStroke) -> "KeySequence":
        return KeySequence(self.strokes + tuple(strokes))

    @classmethod
    def from_strings(cls, *keys: str) -> "KeySequence":
        return cls(strokes=tuple(KeyStroke.parse(key) for key in keys if key))

    @classmethod
    def parse(cls, notation: str) -> "KeySequence":
        """Parse space-separated notation such as ``"g g"``."""

        return cls.from_strings(*notation.split(" "))


@dataclass(frozen=True, slots=True)
class ActionRef:
    """Callable metadata used during binding execution.

    ``metadata["preserves_count"]`` keeps the pending count alive after the
    handler runs (digits, operator entry, text-object entry, visual entry).
    """

    id: str
    handler: Callable[..., object]
    telemetry_name: str | None = None
    description: str = ""
    metadata: Mapping[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("ActionRef id cannot be empty")
        if not callable(self.handler):
            raise TypeError("handler must be callable")
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))
        if self.telemetry_name is None:
            object.__setattr__(self, "telemetry_name", self.id)

    @property
    def preserves_count(self) -> bool:
        return bool(self.metadata.get("preserves_count", False))

    def __call__(self, *args: object, **kwargs: object) -> object:
        return self.handler(*args, **kwargs)


@dataclass(frozen=True, slots=True)
class Binding:
    """Associates a key sequence in one mode with an action.

    The binding id doubles as the callback name handed to the host.
    """

    id: str
    mode: str
    sequence: KeySequence
    action_id: str
    description: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("binding id cannot be empty")
        if not self.mode:
            raise ValueError("binding mode cannot be empty")
        if not self.action_id:
            raise ValueError("binding action_id cannot be empty")

    @property
    def key_signature(self) -> str:
        return self.sequence.notation

    @property
    def last_stroke(self) -> KeyStroke:
        return self.sequence.strokes[-1]


@dataclass(frozen=True, slots=True)
class ModeKeymap:
    """Declarative keymap for one mode.

    ``bindings`` holds ``(keys, name, action_id)`` triples; each becomes a
    :class:`Binding` with id ``"<mode>.<name>"``. ``read_only`` is false only
    for modes where typed characters reach the buffer.
    """

    mode: str
    bindings: tuple[tuple[str, str, str], ...]
    read_only: bool = True
    parent: str | None = None

    def iter_bindings(self) -> Iterator[Binding]:
        for keys, name, action_id in self.bindings:
            yield Binding(
                id=f"{self.mode}.{name}",
                mode=self.mode,
                sequence=KeySequence.parse(keys),
                action_id=action_id,
            )


__all__ = [
    "NAMED_KEYS",
    "KeyStroke",
    "KeySequence",
    "ActionRef",
    "Binding",
    "ModeKeymap",
]
