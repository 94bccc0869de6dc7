"""Keymap registry: actions by id, bindings by id, and a per-mode key index."""

from __future__ import annotations

from typing import Dict, Iterator, Optional

from vi_modal.runtime.telemetry import span

from .models import ActionRef, Binding


class KeymapConflictError(RuntimeError):
    """Raised when a binding reuses keys already bound in its mode."""

    def __init__(self, binding: Binding, existing: Binding):
        super().__init__(
            f"Binding '{binding.id}' conflicts with '{existing.id}' "
            f"on '{binding.key_signature}' in mode '{binding.mode}'"
        )
        self.binding = binding
        self.existing = existing


class KeymapRegistry:
    """Owns the actions and bindings resolved by :class:`KeymapResolver`.

    ``revision`` increases on every binding change so resolvers know when a
    cached trie is stale.
    """

    def __init__(self) -> None:
        self._actions: Dict[str, ActionRef] = {}
        self._bindings: Dict[str, Binding] = {}
        # mode -> key signature -> binding id
        self._by_keys: Dict[str, Dict[str, str]] = {}
        self.revision = 0

    def get_action(self, action_id: str) -> ActionRef:
        try:
            return self._actions[action_id]
        except KeyError:
            raise KeyError(f"Action '{action_id}' is not registered") from None

    def get_binding(self, binding_id: str) -> Binding:
        try:
            return self._bindings[binding_id]
        except KeyError:
            raise KeyError(f"Binding '{binding_id}' is not registered") from None

    def register_action(self, action: ActionRef, *, replace: bool = False) -> ActionRef:
        if action.id in self._actions and not replace:
            raise ValueError(f"Action '{action.id}' already registered")
        self._actions[action.id] = action
        return action

    def register_binding(self, binding: Binding, *, replace: bool = False) -> Binding:
        """Add ``binding``; with ``replace`` it evicts whatever held its id or keys."""

        with span(
            "keymaps::register_binding",
            component="keymaps",
            metadata={"binding_id": binding.id, "mode": binding.mode},
        ) as handle:
            if binding.action_id not in self._actions:
                raise KeyError(
                    f"Binding '{binding.id}' references unknown action '{binding.action_id}'"
                )

            holder = self.binding_for_keys(binding.mode, binding.key_signature)
            if holder is not None and holder.id != binding.id:
                if not replace:
                    raise KeymapConflictError(binding, holder)
                handle.add_metadata("replaced", holder.id)
                self._drop(holder)
            if binding.id in self._bindings:
                if not replace:
                    raise ValueError(f"Binding id '{binding.id}' already registered")
                self._drop(self._bindings[binding.id])

            self._bindings[binding.id] = binding
            self._by_keys.setdefault(binding.mode, {})[binding.key_signature] = binding.id
            self.revision += 1
            return binding

    def binding_for_keys(self, mode: str, key_signature: str) -> Optional[Binding]:
        binding_id = self._by_keys.get(mode, {}).get(key_signature)
        return None if binding_id is None else self._bindings[binding_id]

    def iter_bindings(self, mode: Optional[str] = None) -> Iterator[Binding]:
        """Yield bindings in registration order, optionally for one mode."""

        if mode is None:
            yield from self._bindings.values()
            return
        for binding_id in self._by_keys.get(mode, {}).values():
            yield self._bindings[binding_id]

    def _drop(self, binding: Binding) -> None:
        self._bindings.pop(binding.id, None)
        keys = self._by_keys.get(binding.mode, {})
        if keys.get(binding.key_signature) == binding.id:
            del keys[binding.key_signature]


__all__ = ["KeymapConflictError", "KeymapRegistry"]
