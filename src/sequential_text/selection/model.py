"""Anchor/head selection spanning several regions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sequential_text.events import SELECTION_CHANGED, EventBus, SelectionChanged
from sequential_text.region.geometry import EMPTY_RANGE, Point, TextRange
from sequential_text.region.region import Region
from sequential_text.region.validation import clamp_index
from sequential_text.runtime import telemetry

if TYPE_CHECKING:
    from sequential_text.document import Document, FocusController


@dataclass(frozen=True, slots=True)
class Position:
    """A ``(region, index)`` pair; the index is clamped when used."""

    region: Region
    index: int

    def clamped(self) -> "Position":
        return Position(self.region, clamp_index(self.index, self.region.length))


class SelectionBoundary(Enum):
    START = "start"
    END = "end"


@dataclass(slots=True)
class DragState:
    active: bool = False
    anchor_point: Optional[Point] = None

    def begin(self, point: Point) -> None:
        self.active = True
        self.anchor_point = point

    def end(self) -> None:
        self.active = False
        self.anchor_point = None


class SelectionModel:
    """Owns the anchor and projects anchor/head pairs onto region ranges.

    The head is never stored: it is derived from the focused region's own
    selection, so extending always re-projects from the unchanged anchor.
    """

    def __init__(
        self,
        document: "Document",
        focus: "FocusController",
        *,
        bus: Optional[EventBus] = None,
        separator: str = "\n\n",
    ) -> None:
        self.document = document
        self.focus = focus
        self.bus = bus
        self.separator = separator
        self.drag = DragState()
        self._anchor: Optional[Position] = None

    # -- anchor -----------------------------------------------------------

    @property
    def anchor(self) -> Optional[Position]:
        anchor = self._anchor
        if anchor is not None and anchor.region not in self.document:
            telemetry.record_event(
                "selection.anchor_stale", data={"region": anchor.region.id}
            )
            self._anchor = None
            return None
        return anchor

    def set_anchor(self, position: Position) -> Position:
        self._anchor = position.clamped()
        return self._anchor

    def clear_anchor(self) -> None:
        self._anchor = None

    def ensure_anchor(self, region: Region) -> Position:
        """Anchor at the caret (or selection start) unless one already exists."""

        anchor = self.anchor
        if anchor is None:
            anchor = self.set_anchor(Position(region, region.selection.location))
            telemetry.record_event(
                "selection.anchor", data={"region": region.id, "index": anchor.index}
            )
        return anchor

    # -- head -------------------------------------------------------------

    def head(self, region: Region) -> Position:
        """Derive the moving end of the selection inside ``region``."""

        selection = region.selection
        if selection.is_empty:
            return Position(region, selection.location)

        anchor = self.anchor
        lower, upper = selection.location, selection.upper_bound
        if anchor is None:
            return Position(region, upper)

        if anchor.region is region:
            if anchor.index == lower:
                return Position(region, upper)
            if anchor.index == upper:
                return Position(region, lower)
            farther = upper if abs(upper - anchor.index) >= abs(anchor.index - lower) else lower
            return Position(region, farther)

        anchor_order = self.document.index_of(anchor.region)
        head_order = self.document.index_of(region)
        if anchor_order is None or head_order is None or anchor_order < head_order:
            return Position(region, upper)
        return Position(region, lower)

    # -- projection -------------------------------------------------------

    def project(self, anchor: Position, head: Position) -> list[TextRange]:
        """Ranges for every region, in document order, for ``anchor`` to ``head``.

        Pure: reads region lengths and order, writes nothing.
        """

        regions = self.document.regions
        anchor_order = self.document.index_of(anchor.region)
        head_order = self.document.index_of(head.region)
        if anchor_order is None or head_order is None:
            raise KeyError("Anchor and head must belong to registered regions.")

        anchor_index = clamp_index(anchor.index, anchor.region.length)
        head_index = clamp_index(head.index, head.region.length)
        forward = anchor_order < head_order or (
            anchor_order == head_order and anchor_index <= head_index
        )
        low, high = sorted((anchor_order, head_order))

        ranges: list[TextRange] = []
        for order, region in enumerate(regions):
            length = region.length
            if order == anchor_order == head_order:
                ranges.append(TextRange.between(anchor_index, head_index))
            elif order == anchor_order:
                if forward:
                    ranges.append(TextRange(anchor_index, length - anchor_index))
                else:
                    ranges.append(TextRange(0, anchor_index))
            elif order == head_order:
                if forward:
                    ranges.append(TextRange(0, head_index))
                else:
                    ranges.append(TextRange(head_index, length - head_index))
            elif low < order < high:
                ranges.append(TextRange(0, length))
            else:
                ranges.append(EMPTY_RANGE)
        return ranges

    def apply(self, anchor: Position, head: Position) -> list[TextRange]:
        """Project and write the ranges, then focus the head region."""

        with telemetry.span(
            name="selection.project",
            metadata={"anchor": anchor.region.id, "head": head.region.id},
        ):
            ranges = self.project(anchor, head)
            for region, selection in zip(self.document.regions, ranges):
                region.set_selection(selection)
            self.focus.request_focus(head.region)
        self.notify()
        return ranges

    def extend(self, region: Region, index: int) -> list[TextRange]:
        """Move the head to ``(region, index)`` keeping the anchor fixed."""

        anchor = self.ensure_anchor(self.focus.current_focus() or region)
        return self.apply(anchor, Position(region, index))

    # -- queries ----------------------------------------------------------

    def selected_regions(self) -> list[Region]:
        return [region for region in self.document.regions if region.has_selection]

    def has_multi_region_selection(self) -> bool:
        return len(self.selected_regions()) > 1

    def is_contiguous(self) -> bool:
        """Every non-empty region between the outermost selected ones is full."""

        regions = self.document.regions
        orders = [order for order, region in enumerate(regions) if region.has_selection]
        if len(orders) < 2:
            return True
        for region in regions[orders[0] + 1 : orders[-1]]:
            if region.length and region.selection != TextRange(0, region.length):
                return False
        return True

    def collapse(self, boundary: SelectionBoundary) -> Optional[Position]:
        """Extremity of the current selection, or ``None`` when nothing is selected."""

        selected = self.selected_regions()
        if not selected:
            return None
        if boundary is SelectionBoundary.START:
            first = selected[0]
            return Position(first, first.selection.location)
        last = selected[-1]
        return Position(last, last.selection.upper_bound)

    def selected_text(self) -> Optional[str]:
        selected = self.selected_regions()
        if not selected:
            return None
        return self.separator.join(region.substring() for region in selected)

    def snapshot(self) -> SelectionChanged:
        return SelectionChanged(
            tuple((region.id, region.selection) for region in self.document.regions)
        )

    # -- bulk mutations ---------------------------------------------------

    def clear_all(
        self, except_region: Optional[Region] = None, *, keep_anchor: bool = False
    ) -> None:
        for region in self.document.regions:
            if region is not except_region and region.has_selection:
                region.collapse_selection()
        if not keep_anchor:
            self.clear_anchor()

    def select_all(self) -> bool:
        if self.drag.active:
            telemetry.record_event("selection.select_all_rejected", level="info")
            return False
        for region in self.document.regions:
            region.select_all()
        self.notify()
        return True

    def notify(self) -> None:
        if self.bus is not None:
            self.bus.emit(SELECTION_CHANGED, self.snapshot())


__all__ = [
    "DragState",
    "Position",
    "SelectionBoundary",
    "SelectionModel",
]
