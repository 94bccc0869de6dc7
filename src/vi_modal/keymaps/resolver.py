"""Per-mode trie over registered key sequences."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Literal, Optional, Sequence

from vi_modal.runtime.telemetry import span

from .models import ActionRef, Binding
from .registry import KeymapRegistry


@dataclass(slots=True)
class _Node:
    binding_id: Optional[str] = None
    children: Dict[str, "_Node"] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ResolutionMatch:
    """A binding together with the action it triggers."""

    binding: Binding
    action: ActionRef


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    """``pending`` means the tokens are a strict prefix of some bound sequence.

    There is no timeout: a pending prefix ends only on a match or a miss.
    """

    status: Literal["match", "pending", "miss"]
    match: Optional[ResolutionMatch] = None
    next_expected: tuple[str, ...] = ()


class KeymapResolver:
    """Resolves token sequences against one trie per mode.

    Tries are rebuilt lazily whenever the registry revision moves.
    """

    def __init__(self, registry: KeymapRegistry) -> None:
        self._registry = registry
        self._tries: Dict[str, tuple[int, _Node]] = {}

    def resolve(self, mode: str, tokens: Sequence[str]) -> ResolutionResult:
        with span(
            "keymaps::resolve",
            component="keymaps",
            metadata={"mode": mode, "length": len(tokens)},
        ) as handle:
            node: Optional[_Node] = self._trie(mode)
            for token in tokens:
                node = node.children.get(token)
                if node is None:
                    break

            if node is None or not tokens:
                result = ResolutionResult(status="miss")
            elif node.binding_id is not None:
                result = ResolutionResult(
                    status="match", match=self.match_binding(node.binding_id)
                )
            elif node.children:
                result = ResolutionResult(
                    status="pending", next_expected=tuple(sorted(node.children))
                )
            else:
                result = ResolutionResult(status="miss")
            handle.add_metadata("status", result.status)
            return result

    def match_binding(self, binding_id: str) -> ResolutionMatch:
        """Pair a binding id (as used by host callbacks) with its action."""

        binding = self._registry.get_binding(binding_id)
        return ResolutionMatch(
            binding=binding, action=self._registry.get_action(binding.action_id)
        )

    def _trie(self, mode: str) -> _Node:
        cached = self._tries.get(mode)
        if cached is not None and cached[0] == self._registry.revision:
            return cached[1]

        root = _Node()
        for binding in self._registry.iter_bindings(mode):
            node = root
            for token in binding.sequence.tokens:
                node = node.children.setdefault(token, _Node())
            node.binding_id = binding.id
        self._tries[mode] = (self._registry.revision, root)
        return root


__all__ = ["KeymapResolver", "ResolutionMatch", "ResolutionResult"]
