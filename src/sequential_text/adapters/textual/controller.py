"""Textual-facing adapter translating widget input into coordinator calls.

Nothing here imports Textual, so hosts and tests can drive the adapter with
plain key names and cell coordinates.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional

from sequential_text.coordinator import DocumentCoordinator, DocumentSnapshot
from sequential_text.events import (
    BOUNDARY_REACHED,
    CLIPBOARD_COPY,
    CONTENT_REPLACED,
    FOCUS_CHANGED,
    SELECTION_CHANGED,
    BoundaryReached,
    ClipboardCopied,
)
from sequential_text.keymaps import KeyStroke
from sequential_text.navigation.commands import CommandResult
from sequential_text.region.geometry import Point

TEXT_KEYS = {"enter": "\n", "return": "\n", "tab": "\t", "space": " "}


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_document: Callable[[DocumentSnapshot], None]
    update_status: Callable[[str], None] = _noop
    handle_event: Callable[[str, object | None], None] = _noop
    log: Callable[[str], None] = _noop


class TextualDocumentAdapter:
    """Bridges a DocumentCoordinator and its bus to a Textual-friendly surface."""

    def __init__(self, coordinator: DocumentCoordinator, hooks: TextualUIHooks) -> None:
        self.coordinator = coordinator
        self.hooks = hooks
        self._subscribe_events()
        self._refresh()

    def handle_textual_key(
        self,
        key: str,
        *,
        text: Optional[str] = None,
        modifiers: Iterable[str] = (),
    ) -> CommandResult:
        """Dispatch a key; unbound printable keys are inserted as text."""

        base = KeyStroke.parse(key)
        stroke = KeyStroke(base.key, base.modifiers + tuple(modifiers))
        self._log_state("key ->", stroke=stroke.token, text=text)

        result = self.coordinator.handle_key(stroke)
        if not result.consumed and result.status == "unbound":
            insertion = self._insertion_for(stroke, text)
            if insertion is not None:
                result = self.coordinator.insert_text(insertion)

        self._after_result(result)
        self._log_state("result <-", consumed=result.consumed, status=result.status)
        return result

    @staticmethod
    def _insertion_for(stroke: KeyStroke, text: Optional[str]) -> Optional[str]:
        if set(stroke.modifiers) - {"shift"}:
            return None
        if stroke.key in TEXT_KEYS:
            return TEXT_KEYS[stroke.key]
        if text and text.isprintable():
            return text
        return None

    def handle_mouse_down(self, x: float, y: float, *, shift: bool = False) -> bool:
        point = Point(x, y)
        region = self.coordinator.region_at(point)
        if region is None:
            return False
        if shift:
            handled = self.coordinator.shift_click(region, point)
        else:
            handled = self.coordinator.begin_drag(region, point)
        self._log_state("mouse down ->", x=x, y=y, shift=shift, handled=handled)
        self._refresh()
        return handled

    def handle_mouse_move(self, x: float, y: float) -> bool:
        handled = self.coordinator.drag(Point(x, y))
        if handled:
            self._refresh()
        return handled

    def handle_mouse_up(self) -> None:
        self.coordinator.end_drag()
        self._log_state("mouse up ->")

    def _after_result(self, result: CommandResult) -> None:
        status = result.message if result.status == "copied" else result.status
        if status:
            self.hooks.update_status(status.replace("\n", "⏎"))
        self._refresh()

    def _subscribe_events(self) -> None:
        bus = self.coordinator.bus
        for event in (
            BOUNDARY_REACHED,
            SELECTION_CHANGED,
            CONTENT_REPLACED,
            FOCUS_CHANGED,
            CLIPBOARD_COPY,
        ):
            bus.subscribe(
                event, lambda payload, name=event: self._handle_event(name, payload)
            )

    def _handle_event(self, name: str, payload: object | None) -> None:
        self._log_state("event ->", event=name)
        self.hooks.handle_event(name, payload)
        if isinstance(payload, BoundaryReached):
            self.hooks.update_status(f"boundary:{payload.direction.value}")
        elif isinstance(payload, ClipboardCopied):
            self.hooks.update_status(f"copied {len(payload.text)} chars")

    def _refresh(self) -> None:
        self.hooks.update_document(self.coordinator.snapshot())

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = self._state_metadata()
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix] + [f"{key}={value!r}" for key, value in snapshot.items()]
        self.hooks.log(" ".join(parts))

    def _state_metadata(self) -> Dict[str, object]:
        focused = self.coordinator.focused
        anchor = self.coordinator.selection.anchor
        return {
            "focus": focused.id if focused else None,
            "selection": focused.selection if focused else None,
            "anchor": (anchor.region.id, anchor.index) if anchor else None,
            "memory": self.coordinator.memory.value,
            "dragging": self.coordinator.selection.drag.active,
        }


__all__ = ["TextualDocumentAdapter", "TextualUIHooks"]
