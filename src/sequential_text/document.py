"""Ordered region list and focus ownership."""

from __future__ import annotations

from typing import Iterator, Optional, Protocol

from .events import FOCUS_CHANGED, EventBus, FocusChanged
from .region.region import Region
from .runtime import telemetry


class FocusController(Protocol):
    """Capability deciding which region holds keyboard focus."""

    def request_focus(self, region: Optional[Region]) -> None:
        ...

    def current_focus(self) -> Optional[Region]:
        ...


class FocusTracker:
    """In-process focus controller keeping at most one region focused."""

    def __init__(self, bus: Optional[EventBus] = None) -> None:
        self._bus = bus
        self._focused: Optional[Region] = None

    def request_focus(self, region: Optional[Region]) -> None:
        if region is self._focused:
            return
        if self._focused is not None:
            self._focused.focused = False
        self._focused = region
        if region is not None:
            region.focused = True
        if self._bus is not None:
            self._bus.emit(FOCUS_CHANGED, FocusChanged(region))

    def current_focus(self) -> Optional[Region]:
        return self._focused


class Document:
    """Regions in visual top-to-bottom order.

    Registration order does not have to match visual order. Sorting is
    deferred until the order is next read, because frames may not exist yet
    when a region registers.
    """

    def __init__(self) -> None:
        self._regions: list[Region] = []
        self._needs_sort = False

    def __len__(self) -> int:
        return len(self._regions)

    def __iter__(self) -> Iterator[Region]:
        return iter(self.regions)

    def __contains__(self, region: object) -> bool:
        return any(candidate is region for candidate in self._regions)

    def register(self, region: Region) -> None:
        if region in self:
            return
        self._regions.append(region)
        self._needs_sort = True
        telemetry.record_event(
            "document.register",
            data={"region": region.id, "count": len(self._regions)},
        )

    def unregister(self, region: Region) -> None:
        if region not in self:
            return
        self._regions = [candidate for candidate in self._regions if candidate is not region]
        self._needs_sort = True
        telemetry.record_event(
            "document.unregister",
            data={"region": region.id, "count": len(self._regions)},
        )

    def invalidate_order(self) -> None:
        self._needs_sort = True

    def _sort_if_needed(self) -> None:
        if not self._needs_sort:
            return
        # Stable sort: unframed regions keep registration order after framed ones.
        self._regions.sort(
            key=lambda region: (
                region.frame is None,
                region.frame.min_y if region.frame is not None else 0.0,
            )
        )
        self._needs_sort = False

    @property
    def regions(self) -> list[Region]:
        self._sort_if_needed()
        return list(self._regions)

    @property
    def first(self) -> Optional[Region]:
        regions = self.regions
        return regions[0] if regions else None

    @property
    def last(self) -> Optional[Region]:
        regions = self.regions
        return regions[-1] if regions else None

    def index_of(self, region: Region) -> Optional[int]:
        for position, candidate in enumerate(self.regions):
            if candidate is region:
                return position
        return None

    def neighbor(self, region: Region, step: int) -> Optional[Region]:
        position = self.index_of(region)
        if position is None:
            return None
        target = position + step
        regions = self.regions
        if 0 <= target < len(regions):
            return regions[target]
        return None

    def between(self, first: int, last: int) -> list[Region]:
        """Regions with order in ``[first, last]`` (inclusive, any order)."""

        low, high = sorted((first, last))
        return self.regions[low : high + 1]


__all__ = ["Document", "FocusController", "FocusTracker"]
