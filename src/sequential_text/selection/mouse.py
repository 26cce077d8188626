"""Mouse-driven selection gestures over document coordinates."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Optional

from sequential_text.caret.memory import HorizontalMemory
from sequential_text.region.geometry import Point
from sequential_text.region.layout import LayoutUnavailableError
from sequential_text.region.region import Region
from sequential_text.region.validation import clamp_index
from sequential_text.runtime import telemetry

from .model import Position, SelectionModel

if TYPE_CHECKING:
    from sequential_text.document import Document

Locator = Callable[[Point], Optional[Position]]


class MouseSelection:
    """Translates press/drag/release into anchor and head positions.

    Points are in document coordinates; a region's ``frame`` maps them into
    its local space. A region without a frame treats points as local.
    """

    def __init__(
        self,
        document: "Document",
        selection: SelectionModel,
        memory: HorizontalMemory,
        *,
        threshold: float = 0.5,
    ) -> None:
        self.document = document
        self.selection = selection
        self.memory = memory
        self.threshold = threshold

    @property
    def dragging(self) -> bool:
        return self.selection.drag.active

    def index_at(self, region: Region, point: Point) -> int:
        frame = region.frame
        local = point if frame is None else point.offset(-frame.x, -frame.y)
        if region.length == 0:
            return 0
        index, fraction = region.require_layout().character_index(local)
        if fraction >= self.threshold:
            index += 1
        return clamp_index(index, region.length)

    def locate(self, point: Point) -> Optional[Position]:
        """Region and index under ``point``, snapping gap hits to the nearest region."""

        framed = [region for region in self.document.regions if region.frame is not None]
        if not framed:
            return None
        for region in framed:
            frame = region.frame
            assert frame is not None
            if frame.min_y <= point.y < frame.max_y:
                return Position(region, self.index_at(region, point))

        nearest = min(framed, key=lambda region: region.frame.vertical_distance(point.y))  # type: ignore[union-attr]
        frame = nearest.frame
        assert frame is not None
        index = 0 if point.y < frame.min_y else nearest.length
        return Position(nearest, index)

    def begin_drag(self, region: Region, point: Point) -> bool:
        try:
            index = self.index_at(region, point)
        except LayoutUnavailableError:
            telemetry.record_event(
                "mouse.geometry_unavailable", level="info", data={"region": region.id}
            )
            return False

        self.selection.clear_all(except_region=region)
        region.place_caret(index)
        self.selection.set_anchor(Position(region, index))
        self.selection.drag.begin(point)
        self.selection.focus.request_focus(region)
        self.memory.reset(reason="mouse")
        self.selection.notify()
        telemetry.record_event(
            "mouse.begin_drag", data={"region": region.id, "index": index}
        )
        return True

    def drag(self, point: Point) -> bool:
        if not self.dragging:
            return False
        return self._extend_to(self.locate, point)

    def end_drag(self) -> None:
        self.selection.drag.end()

    def shift_click(self, region: Region, point: Point) -> bool:
        if self.selection.anchor is None:
            return self.begin_drag(region, point)
        return self._extend_to(self._locate_in(region), point)

    def _locate_in(self, region: Region) -> Locator:
        def locate(point: Point) -> Optional[Position]:
            return Position(region, self.index_at(region, point))

        return locate

    def _extend_to(self, locate: Locator, point: Point) -> bool:
        anchor = self.selection.anchor
        if anchor is None:
            return False
        try:
            target = locate(point)
        except LayoutUnavailableError:
            return False
        if target is None:
            return False

        self.memory.reset(reason="mouse")
        self.selection.apply(anchor, target)
        return True


__all__ = ["MouseSelection"]
