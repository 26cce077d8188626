"""Built-in keymaps for a desktop-style text surface."""

from __future__ import annotations

from typing import Iterable, Sequence

from sequential_text.navigation.commands import Command, CommandKind

from .models import Binding, KeyStroke
from .registry import KeymapRegistry


def _bind(
    binding_id: str,
    stroke: str,
    kind: CommandKind,
    description: str,
    *,
    extend: bool = False,
    tags: tuple[str, ...] = (),
) -> Binding:
    return Binding(
        id=binding_id,
        stroke=KeyStroke.parse(stroke),
        command=Command(kind, extend=extend),
        description=description,
        tags=tags,
        source="defaults",
    )


_ARROWS = (
    ("up", CommandKind.MOVE_UP),
    ("down", CommandKind.MOVE_DOWN),
    ("left", CommandKind.MOVE_LEFT),
    ("right", CommandKind.MOVE_RIGHT),
)

_WORDS = (
    ("left", CommandKind.WORD_LEFT),
    ("right", CommandKind.WORD_RIGHT),
)

_GLOBAL = (
    ("home", CommandKind.GLOBAL_START),
    ("end", CommandKind.GLOBAL_END),
)


def _navigation_bindings() -> list[Binding]:
    bindings: list[Binding] = []
    for key, kind in _ARROWS:
        bindings.append(_bind(f"move.{key}", key, kind, f"Move caret {key}", tags=("move",)))
        bindings.append(
            _bind(
                f"extend.{key}",
                f"shift+{key}",
                kind,
                f"Extend selection {key}",
                extend=True,
                tags=("extend",),
            )
        )
    for modifier in ("alt", "ctrl"):
        for key, kind in _WORDS:
            bindings.append(
                _bind(
                    f"word.{modifier}.{key}",
                    f"{modifier}+{key}",
                    kind,
                    f"Move by word {key}",
                    tags=("word",),
                )
            )
            bindings.append(
                _bind(
                    f"extend.word.{modifier}.{key}",
                    f"{modifier}+shift+{key}",
                    kind,
                    f"Extend selection by word {key}",
                    extend=True,
                    tags=("word", "extend"),
                )
            )
    for key, kind in _GLOBAL:
        bindings.append(
            _bind(f"global.{key}", f"ctrl+{key}", kind, f"Jump to document {key}", tags=("global",))
        )
        bindings.append(
            _bind(
                f"extend.global.{key}",
                f"ctrl+shift+{key}",
                kind,
                f"Extend selection to document {key}",
                extend=True,
                tags=("global", "extend"),
            )
        )
    return bindings


DEFAULT_BINDINGS: tuple[Binding, ...] = tuple(_navigation_bindings()) + (
    _bind("edit.select_all", "ctrl+a", CommandKind.SELECT_ALL, "Select every region"),
    _bind("edit.backspace", "backspace", CommandKind.DELETE, "Delete backward"),
    _bind("edit.delete", "delete", CommandKind.DELETE, "Delete selection"),
    _bind("edit.copy", "ctrl+c", CommandKind.COPY, "Copy selection"),
    _bind("edit.cut", "ctrl+x", CommandKind.CUT, "Cut selection"),
)


def load_default_keymaps(
    registry: KeymapRegistry,
    *,
    replace: bool = False,
    extra_bindings: Iterable[Binding] | None = None,
    include_bindings: Sequence[str] | None = None,
    exclude_bindings: Sequence[str] | None = None,
) -> None:
    """Register the built-in bindings, optionally filtered by id."""

    allowed = _build_filters(include_bindings, exclude_bindings)
    for binding in DEFAULT_BINDINGS:
        if _selected(binding.id, allowed):
            registry.register_binding(binding, replace=replace)

    for binding in extra_bindings or ():
        registry.register_binding(binding, replace=replace)


def _build_filters(
    include: Sequence[str] | None, exclude: Sequence[str] | None
) -> tuple[set[str] | None, set[str]]:
    include_set = set(include) if include else None
    exclude_set = set(exclude or ())
    return include_set, exclude_set


def _selected(item_id: str, filters: tuple[set[str] | None, set[str]]) -> bool:
    include, exclude = filters
    if include is not None and item_id not in include:
        return False
    return item_id not in exclude


__all__ = ["DEFAULT_BINDINGS", "load_default_keymaps"]
