"""Dataclasses describing key strokes and the commands bound to them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, MutableMapping

from sequential_text.navigation.commands import Command

MODIFIER_ALIASES = {
    "control": "ctrl",
    "option": "alt",
    "meta": "alt",
    "cmd": "super",
    "command": "super",
}


def _normalize_modifiers(modifiers: Iterable[str]) -> tuple[str, ...]:
    values = []
    for modifier in modifiers:
        cleaned = modifier.strip().lower()
        if cleaned:
            values.append(MODIFIER_ALIASES.get(cleaned, cleaned))
    return tuple(sorted(dict.fromkeys(values)))


@dataclass(frozen=True, slots=True)
class KeyStroke:
    """Single normalized key press, e.g. ``shift+up`` or ``ctrl+shift+home``."""

    key: str
    modifiers: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("key cannot be empty")
        object.__setattr__(self, "key", self.key.strip().lower())
        object.__setattr__(self, "modifiers", _normalize_modifiers(self.modifiers))

    @classmethod
    def parse(cls, token: str) -> "KeyStroke":
        """Parse ``"ctrl+shift+home"``; a trailing ``+`` is the plus key itself."""

        text = token.strip()
        if not text:
            raise ValueError("key cannot be empty")
        if text == "+" or text.endswith("++"):
            parts = text[:-2].split("+") if len(text) > 1 else []
            return cls("+", tuple(parts))
        *modifiers, key = text.split("+")
        return cls(key, tuple(modifiers))

    @property
    def token(self) -> str:
        if self.modifiers:
            return "+".join(self.modifiers + (self.key,))
        return self.key

    @property
    def shifted(self) -> bool:
        return "shift" in self.modifiers


def _normalize_tags(tags: Iterable[str]) -> tuple[str, ...]:
    seen: MutableMapping[str, None] = {}
    result: list[str] = []
    for tag in tags:
        cleaned = tag.strip()
        if cleaned and cleaned not in seen:
            seen[cleaned] = None
            result.append(cleaned)
    return tuple(result)


@dataclass(frozen=True, slots=True)
class Binding:
    """Associates one key stroke with a command."""

    id: str
    stroke: KeyStroke
    command: Command
    description: str = ""
    tags: tuple[str, ...] = ()
    source: str | None = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("binding id cannot be empty")
        if isinstance(self.stroke, str):
            object.__setattr__(self, "stroke", KeyStroke.parse(self.stroke))
        if isinstance(self.command, str):
            object.__setattr__(self, "command", Command.parse(self.command))
        object.__setattr__(self, "tags", _normalize_tags(self.tags))

    @property
    def key_signature(self) -> str:
        return self.stroke.token


__all__ = ["Binding", "KeyStroke", "MODIFIER_ALIASES"]
