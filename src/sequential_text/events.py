"""Notification bus the coordinator uses to talk to its host."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Dict, Optional, Tuple

from .region.geometry import Direction, TextRange

if TYPE_CHECKING:
    from .region.region import Region

BOUNDARY_REACHED = "boundary.reached"
SELECTION_CHANGED = "selection.changed"
CONTENT_REPLACED = "content.replaced"
FOCUS_CHANGED = "focus.changed"
CLIPBOARD_COPY = "clipboard.copy"


@dataclass(frozen=True, slots=True)
class BoundaryReached:
    region: "Region"
    direction: Direction


@dataclass(frozen=True, slots=True)
class SelectionChanged:
    """Per-region ranges in document order, keyed by region id."""

    ranges: Tuple[Tuple[str, TextRange], ...]

    def as_dict(self) -> Dict[str, TextRange]:
        return dict(self.ranges)


@dataclass(frozen=True, slots=True)
class ContentReplaced:
    region: "Region"
    text: str


@dataclass(frozen=True, slots=True)
class FocusChanged:
    region: Optional["Region"]


@dataclass(frozen=True, slots=True)
class ClipboardCopied:
    text: str


Subscriber = Callable[[object], None]


class EventBus:
    """Minimal publish/subscribe bus scoped to one document."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Subscriber]] = {}

    def subscribe(self, event: str, callback: Subscriber) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in list(self._subscribers.get(event, [])):
            callback(payload)


__all__ = [
    "BOUNDARY_REACHED",
    "CLIPBOARD_COPY",
    "CONTENT_REPLACED",
    "FOCUS_CHANGED",
    "SELECTION_CHANGED",
    "BoundaryReached",
    "ClipboardCopied",
    "ContentReplaced",
    "EventBus",
    "FocusChanged",
    "SelectionChanged",
    "Subscriber",
]
