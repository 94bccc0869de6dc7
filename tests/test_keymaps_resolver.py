from __future__ import annotations

from vi_modal.keymaps import (
    ActionRef,
    Binding,
    KeySequence,
    KeyStroke,
    KeymapRegistry,
    KeymapResolver,
)


def make_action(action_id: str) -> ActionRef:
    return ActionRef(id=action_id, handler=lambda *args, **kwargs: None)


def make_binding(
    binding_id: str,
    *,
    mode: str = "normal",
    keys: tuple[str, ...] = ("g", "g"),
    action_id: str = "core.test",
) -> Binding:
    return Binding(
        id=binding_id,
        mode=mode,
        sequence=KeySequence.from_strings(*keys),
        action_id=action_id,
    )


def build_registry(bindings: list[Binding]) -> KeymapRegistry:
    registry = KeymapRegistry()
    action_ids = {binding.action_id for binding in bindings}
    for action_id in action_ids:
        registry.register_action(make_action(action_id))
    for binding in bindings:
        registry.register_binding(binding)
    return registry


def test_resolver_matches_exact_sequence() -> None:
    binding = make_binding("normal.gg")
    registry = build_registry([binding])
    resolver = KeymapResolver(registry)

    result = resolver.resolve("normal", ("g", "g"))

    assert result.status == "match"
    assert result.match is not None
    assert result.match.binding.id == binding.id


def test_resolver_reports_pending_for_prefix() -> None:
    binding = make_binding("normal.gg")
    registry = build_registry([binding])
    resolver = KeymapResolver(registry)

    result = resolver.resolve("normal", ("g",))

    assert result.status == "pending"
    assert result.next_expected == ("g",)


def test_resolver_scopes_bindings_by_mode() -> None:
    binding = make_binding("visual.gg", mode="visual")
    registry = build_registry([binding])
    resolver = KeymapResolver(registry)

    assert resolver.resolve("normal", ("g", "g")).status == "miss"
    assert resolver.resolve("visual", ("g", "g")).status == "match"


def test_resolver_cache_refreshes_on_revision() -> None:
    registry = build_registry([])
    resolver = KeymapResolver(registry)

    miss = resolver.resolve("normal", ("x",))
    assert miss.status == "miss"

    new_binding = make_binding("normal.x", keys=("x",), action_id="core.x")
    registry.register_action(make_action("core.x"))
    registry.register_binding(new_binding)

    match = resolver.resolve("normal", ("x",))
    assert match.status == "match"
    assert match.match is not None
    assert match.match.binding.id == new_binding.id


def test_match_binding_pairs_binding_with_action() -> None:
    binding = make_binding("normal.x", keys=("x",), action_id="core.x")
    registry = build_registry([binding])
    resolver = KeymapResolver(registry)

    match = resolver.match_binding("normal.x")

    assert match.binding == binding
    assert match.action.id == "core.x"


def test_key_notation_round_trips_modifiers() -> None:
    stroke = KeyStroke.parse("C-v")

    assert stroke.key == "v"
    assert stroke.modifiers == ("ctrl",)
    assert stroke.token == "C-v"
    assert stroke.text is None
    assert KeyStroke.parse("Space").text == " "
    assert KeyStroke.parse("-").key == "-"
    assert KeySequence.parse("z z").tokens == ("z", "z")
