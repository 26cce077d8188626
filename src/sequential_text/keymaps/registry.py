"""Keymap registry mapping key strokes to commands."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterator, Optional

from sequential_text.runtime.telemetry import span

from .models import Binding, KeyStroke


@dataclass(slots=True)
class RegistryStats:
    """Lightweight snapshot describing registry state."""

    binding_count: int
    commands: tuple[str, ...]


class KeymapConflictError(RuntimeError):
    """Raised when a binding reuses a stroke that is already bound."""

    def __init__(self, binding: Binding, existing: Binding) -> None:
        super().__init__(
            f"Binding '{binding.id}' conflicts with '{existing.id}' on '{binding.key_signature}'"
        )
        self.binding = binding
        self.existing = existing


class KeymapRegistry:
    """Owns bindings and the stroke index used to resolve them."""

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._bindings: Dict[str, Binding] = {}
        self._by_stroke: Dict[str, str] = {}
        self._logger_name = logger_name
        self._revision = 0

    def revision(self) -> int:
        return self._revision

    def get_binding(self, binding_id: str) -> Binding:
        try:
            return self._bindings[binding_id]
        except KeyError as exc:
            raise KeyError(f"Binding '{binding_id}' is not registered") from exc

    def register_binding(self, binding: Binding, *, replace: bool = False) -> Binding:
        with span(
            "keymaps::register_binding",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"binding_id": binding.id, "stroke": binding.key_signature},
        ) as handle:
            conflict = self._conflict_for(binding)
            if conflict is not None and not replace:
                handle.add_metadata("conflict", conflict.id)
                raise KeymapConflictError(binding, conflict)
            if binding.id in self._bindings and not replace:
                raise ValueError(f"Binding id '{binding.id}' already registered")

            if conflict is not None:
                self._drop(conflict)
            existing = self._bindings.get(binding.id)
            if existing is not None:
                self._drop(existing)

            self._bindings[binding.id] = binding
            self._by_stroke[binding.key_signature] = binding.id
            self._revision += 1
            return binding

    def unregister_binding(self, binding_id: str) -> Optional[Binding]:
        with span(
            "keymaps::unregister_binding",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"binding_id": binding_id},
        ):
            binding = self._bindings.get(binding_id)
            if binding is None:
                return None
            self._drop(binding)
            self._revision += 1
            return binding

    def update_binding(self, binding_id: str, **changes: object) -> Binding:
        with span(
            "keymaps::update_binding",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"binding_id": binding_id},
        ) as handle:
            current = self._bindings.get(binding_id)
            if current is None:
                handle.fail("missing_binding")
                raise KeyError(f"Binding '{binding_id}' not found")

            updated = replace(current, **changes)  # type: ignore[arg-type]
            conflict = self._conflict_for(updated)
            if conflict is not None and conflict.id != binding_id:
                handle.add_metadata("conflict", conflict.id)
                raise KeymapConflictError(updated, conflict)

            self._drop(current)
            self._bindings[binding_id] = updated
            self._by_stroke[updated.key_signature] = binding_id
            self._revision += 1
            return updated

    def resolve(self, stroke: KeyStroke | str) -> Optional[Binding]:
        if isinstance(stroke, str):
            stroke = KeyStroke.parse(stroke)
        binding_id = self._by_stroke.get(stroke.token)
        return self._bindings.get(binding_id) if binding_id else None

    def iter_bindings(self) -> Iterator[Binding]:
        yield from self._bindings.values()

    def stats(self) -> RegistryStats:
        return RegistryStats(
            binding_count=len(self._bindings),
            commands=tuple(
                sorted({binding.command.token for binding in self._bindings.values()})
            ),
        )

    def _conflict_for(self, binding: Binding) -> Optional[Binding]:
        existing_id = self._by_stroke.get(binding.key_signature)
        if existing_id is None or existing_id == binding.id:
            return None
        return self._bindings[existing_id]

    def _drop(self, binding: Binding) -> None:
        self._bindings.pop(binding.id, None)
        if self._by_stroke.get(binding.key_signature) == binding.id:
            self._by_stroke.pop(binding.key_signature, None)


__all__ = ["KeymapConflictError", "KeymapRegistry", "RegistryStats"]
