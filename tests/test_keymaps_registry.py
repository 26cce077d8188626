import pytest

from sequential_text import Command, CommandKind, CoordinatorSettings, create_coordinator
from sequential_text.keymaps import (
    DEFAULT_BINDINGS,
    Binding,
    KeymapConflictError,
    KeymapRegistry,
    KeyStroke,
    load_default_keymaps,
)


def make_binding(
    *,
    binding_id: str,
    stroke: str = "shift+up",
    command: Command | None = None,
) -> Binding:
    return Binding(
        id=binding_id,
        stroke=KeyStroke.parse(stroke),
        command=command or Command(CommandKind.MOVE_UP, extend=True),
    )


def test_keystroke_normalizes_modifiers() -> None:
    stroke = KeyStroke("Up", ("Shift", "control", "shift"))

    assert stroke.token == "ctrl+shift+up"
    assert stroke.shifted
    assert KeyStroke.parse("Option+Left").token == "alt+left"
    assert KeyStroke.parse("ctrl++") == KeyStroke("+", ("ctrl",))


def test_binding_accepts_string_forms() -> None:
    binding = Binding(id="b", stroke="ctrl+shift+end", command="extend:global_end")

    assert binding.stroke == KeyStroke("end", ("ctrl", "shift"))
    assert binding.command == Command(CommandKind.GLOBAL_END, extend=True)
    assert binding.key_signature == "ctrl+shift+end"


def test_unknown_command_token_is_rejected() -> None:
    with pytest.raises(KeyError):
        Command.parse("extend:teleport")


def test_register_and_resolve_binding() -> None:
    registry = KeymapRegistry()
    binding = make_binding(binding_id="extend.up")

    registry.register_binding(binding)

    assert registry.stats().binding_count == 1
    assert registry.resolve("shift+up") == binding
    assert registry.resolve(KeyStroke("up", ("shift",))) == binding
    assert registry.resolve("up") is None


def test_register_binding_conflict_detection() -> None:
    registry = KeymapRegistry()
    registry.register_binding(make_binding(binding_id="extend.up"))

    with pytest.raises(KeymapConflictError) as excinfo:
        registry.register_binding(make_binding(binding_id="extend.up.duplicate"))

    assert excinfo.value.existing.id == "extend.up"


def test_register_binding_with_replace() -> None:
    registry = KeymapRegistry()
    first = make_binding(binding_id="first")
    second = make_binding(binding_id="second")

    registry.register_binding(first)
    registry.register_binding(second, replace=True)

    assert list(registry.iter_bindings()) == [second]
    assert registry.resolve("shift+up") == second


def test_update_binding_moves_stroke() -> None:
    registry = KeymapRegistry()
    registry.register_binding(make_binding(binding_id="binding"))
    before = registry.revision()

    updated = registry.update_binding(
        "binding", stroke=KeyStroke.parse("alt+up"), description="alt variant"
    )

    assert updated.description == "alt variant"
    assert registry.resolve("alt+up") == updated
    assert registry.resolve("shift+up") is None
    assert registry.revision() == before + 1


def test_update_binding_refuses_taken_stroke() -> None:
    registry = KeymapRegistry()
    registry.register_binding(make_binding(binding_id="a", stroke="up"))
    registry.register_binding(make_binding(binding_id="b", stroke="down"))

    with pytest.raises(KeymapConflictError):
        registry.update_binding("b", stroke=KeyStroke.parse("up"))

    with pytest.raises(KeyError):
        registry.update_binding("missing", description="nope")


def test_unregister_binding() -> None:
    registry = KeymapRegistry()
    binding = make_binding(binding_id="binding")
    registry.register_binding(binding)

    removed = registry.unregister_binding("binding")

    assert removed == binding
    assert registry.stats().binding_count == 0
    assert registry.resolve("shift+up") is None
    assert registry.unregister_binding("binding") is None


def test_default_keymaps_cover_every_command() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(registry)

    stats = registry.stats()
    assert stats.binding_count == len(DEFAULT_BINDINGS) == 25
    assert registry.resolve("ctrl+shift+home").command == Command(
        CommandKind.GLOBAL_START, extend=True
    )
    assert registry.resolve("alt+shift+right").command == Command(
        CommandKind.WORD_RIGHT, extend=True
    )
    assert registry.resolve("backspace").command.kind is CommandKind.DELETE
    assert {kind.value for kind in CommandKind} <= {
        token.split(":")[-1] for token in stats.commands
    }


def test_load_default_keymaps_filters() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(
        registry,
        include_bindings=("move.up", "move.down", "edit.copy"),
        exclude_bindings=("edit.copy",),
    )

    assert {binding.id for binding in registry.iter_bindings()} == {"move.up", "move.down"}


def test_load_default_keymaps_extra_bindings() -> None:
    registry = KeymapRegistry()
    extra = make_binding(
        binding_id="custom.select_all",
        stroke="super+a",
        command=Command(CommandKind.SELECT_ALL),
    )

    load_default_keymaps(registry, extra_bindings=(extra,))

    assert registry.resolve("cmd+a") == extra


def test_coordinator_dispatches_bound_keys() -> None:
    coordinator = create_coordinator(["ab", "cd"], columns=10, settings=CoordinatorSettings())

    for _ in range(4):
        coordinator.handle_key("shift+right")
    result = coordinator.handle_key("ctrl+c")

    assert result.message == "ab\n\nc"
    assert coordinator.handle_key("f13").status == "unbound"


def test_get_binding_by_id() -> None:
    registry = KeymapRegistry()
    load_default_keymaps(registry)

    binding = registry.get_binding("extend.global.end")

    assert binding.stroke == KeyStroke("end", ("ctrl", "shift"))
    with pytest.raises(KeyError):
        registry.get_binding("missing")
