"""Caret and selection movement across region boundaries."""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING, Callable, Dict, Optional, Tuple

from sequential_text.caret.memory import HorizontalMemory
from sequential_text.caret.vertical import (
    DEFAULT_ROUNDING_THRESHOLD,
    landing_index,
    native_vertical_move,
    resolve_vertical_move,
)
from sequential_text.events import BOUNDARY_REACHED, BoundaryReached, EventBus
from sequential_text.region.geometry import Direction, TextRange
from sequential_text.region.layout import LayoutUnavailableError
from sequential_text.region.region import Region
from sequential_text.runtime import telemetry
from sequential_text.selection.model import Position, SelectionBoundary, SelectionModel

from .commands import Command, CommandKind, CommandResult

if TYPE_CHECKING:
    from sequential_text.document import Document, FocusController

Handler = Callable[[Region], CommandResult]


def _step(direction: Direction) -> int:
    return -1 if direction.is_backward else 1


def _collapse_boundary(direction: Direction) -> SelectionBoundary:
    return SelectionBoundary.START if direction.is_backward else SelectionBoundary.END


class NavigationCoordinator:
    """Interprets directional commands for the focused region.

    Commands resolve inside the focused region when they can and hand the
    caret (or the selection head) to the neighbouring region when the region
    reports it is at its own edge.
    """

    def __init__(
        self,
        document: "Document",
        focus: "FocusController",
        selection: SelectionModel,
        memory: HorizontalMemory,
        *,
        bus: Optional[EventBus] = None,
        threshold: float = DEFAULT_ROUNDING_THRESHOLD,
    ) -> None:
        self.document = document
        self.focus = focus
        self.selection = selection
        self.memory = memory
        self.bus = bus
        self.threshold = threshold
        self._handlers: Dict[Tuple[CommandKind, bool], Handler] = {
            (CommandKind.MOVE_UP, False): partial(self._move_vertical, Direction.UP),
            (CommandKind.MOVE_DOWN, False): partial(self._move_vertical, Direction.DOWN),
            (CommandKind.MOVE_LEFT, False): partial(self._move_horizontal, Direction.LEFT),
            (CommandKind.MOVE_RIGHT, False): partial(self._move_horizontal, Direction.RIGHT),
            (CommandKind.WORD_LEFT, False): partial(self._move_word, Direction.LEFT),
            (CommandKind.WORD_RIGHT, False): partial(self._move_word, Direction.RIGHT),
            (CommandKind.GLOBAL_START, False): partial(self._move_global, Direction.UP),
            (CommandKind.GLOBAL_END, False): partial(self._move_global, Direction.DOWN),
            (CommandKind.MOVE_UP, True): partial(self._extend_vertical, Direction.UP),
            (CommandKind.MOVE_DOWN, True): partial(self._extend_vertical, Direction.DOWN),
            (CommandKind.MOVE_LEFT, True): partial(self._extend_horizontal, Direction.LEFT),
            (CommandKind.MOVE_RIGHT, True): partial(self._extend_horizontal, Direction.RIGHT),
            (CommandKind.WORD_LEFT, True): partial(self._extend_word, Direction.LEFT),
            (CommandKind.WORD_RIGHT, True): partial(self._extend_word, Direction.RIGHT),
            (CommandKind.GLOBAL_START, True): partial(self._extend_global, Direction.UP),
            (CommandKind.GLOBAL_END, True): partial(self._extend_global, Direction.DOWN),
        }

    def handles(self, command: Command) -> bool:
        return (command.kind, command.extend) in self._handlers

    def handle(self, command: Command) -> CommandResult:
        handler = self._handlers.get((command.kind, command.extend))
        if handler is None:
            return CommandResult(consumed=False, status="unhandled")
        region = self._focused_region()
        if region is None:
            return CommandResult(consumed=False, status="empty_document")
        return handler(region)

    # -- shared helpers ---------------------------------------------------

    def _focused_region(self) -> Optional[Region]:
        region = self.focus.current_focus()
        if region is not None and region in self.document:
            return region
        region = self.document.first
        if region is not None:
            self.focus.request_focus(region)
        return region

    def _place(self, region: Region, index: int, *, status: str) -> CommandResult:
        self.focus.request_focus(region)
        caret = region.place_caret(index)
        self.selection.notify()
        return CommandResult(consumed=True, status=status, region=region, index=caret)

    def _reached(self, region: Region, direction: Direction) -> None:
        telemetry.record_event(
            "navigation.boundary",
            data={"region": region.id, "direction": direction.value},
        )
        if self.bus is not None:
            self.bus.emit(BOUNDARY_REACHED, BoundaryReached(region, direction))

    def _collapse_multi(self, direction: Direction) -> Optional[Position]:
        if not self.selection.has_multi_region_selection():
            return None
        target = self.selection.collapse(_collapse_boundary(direction))
        self.selection.clear_all()
        telemetry.record_event(
            "navigation.collapse",
            data={"direction": direction.value, "region": target.region.id if target else None},
        )
        return target

    def _extended(self, anchor: Position, head: Position, *, status: str) -> CommandResult:
        self.selection.apply(anchor, head)
        head = head.clamped()
        return CommandResult(consumed=True, status=status, region=head.region, index=head.index)

    # -- plain moves ------------------------------------------------------

    def _move_vertical(self, direction: Direction, region: Region) -> CommandResult:
        collapsed = self._collapse_multi(direction)
        if collapsed is not None:
            self.memory.reset(reason="collapse")
            self._place(collapsed.region, collapsed.index, status="collapsed")
            return self._vertical_step(collapsed.region, collapsed.index, direction)

        selection = region.selection
        index = selection.location if direction is Direction.UP else selection.upper_bound
        self.selection.clear_all(except_region=region)
        return self._vertical_step(region, index, direction)

    def _vertical_step(self, region: Region, index: int, direction: Direction) -> CommandResult:
        try:
            target = resolve_vertical_move(
                region, index, direction, self.memory, threshold=self.threshold
            )
        except LayoutUnavailableError:
            return self._native_vertical(region, index, direction)
        if target is not None:
            return self._place(region, target, status="moved")

        neighbor = self.document.neighbor(region, _step(direction))
        if neighbor is None:
            self.memory.reset(reason="document_edge")
            self._reached(region, direction)
            edge = 0 if direction is Direction.UP else region.length
            return self._place(region, edge, status="document_edge")

        if not self.memory.has_value():
            self.memory.store(region, index)
        landing = self._landing(neighbor, direction)
        telemetry.record_event(
            "navigation.cross",
            data={"from": region.id, "to": neighbor.id, "index": landing},
        )
        return self._place(neighbor, landing, status="crossed")

    def _landing(self, neighbor: Region, direction: Direction) -> int:
        from_end = direction is Direction.UP
        try:
            return landing_index(
                neighbor,
                self.memory.value or 0.0,
                from_end=from_end,
                threshold=self.threshold,
            )
        except LayoutUnavailableError:
            return neighbor.length if from_end else 0

    def _native_vertical(self, region: Region, index: int, direction: Direction) -> CommandResult:
        telemetry.record_event(
            "navigation.native_fallback",
            level="info",
            data={"region": region.id, "direction": direction.value},
        )
        target = native_vertical_move(region.text, index, direction)
        return self._place(region, target, status="native")

    def _move_horizontal(self, direction: Direction, region: Region) -> CommandResult:
        collapsed = self._collapse_multi(direction)
        self.memory.reset(reason="horizontal")
        if collapsed is not None:
            return self._place(collapsed.region, collapsed.index, status="collapsed")

        selection = region.selection
        self.selection.clear_all(except_region=region)
        if not selection.is_empty:
            index = selection.location if direction is Direction.LEFT else selection.upper_bound
            return self._place(region, index, status="collapsed")

        caret = region.caret
        if direction is Direction.LEFT and caret > 0:
            return self._place(region, caret - 1, status="moved")
        if direction is Direction.RIGHT and caret < region.length:
            return self._place(region, caret + 1, status="moved")

        neighbor = self.document.neighbor(region, _step(direction))
        if neighbor is None:
            self._reached(region, direction)
            return self._place(region, caret, status="document_edge")
        entry = neighbor.length if direction is Direction.LEFT else 0
        return self._place(neighbor, entry, status="crossed")

    def _move_word(self, direction: Direction, region: Region) -> CommandResult:
        forward = direction is Direction.RIGHT
        collapsed = self._collapse_multi(direction)
        self.memory.reset(reason="word")
        if collapsed is not None:
            return self._place(collapsed.region, collapsed.index, status="collapsed")

        selection = region.selection
        self.selection.clear_all(except_region=region)
        caret = selection.upper_bound if forward else selection.location
        at_edge = selection.is_empty and caret == (region.length if forward else 0)
        if not at_edge:
            return self._place(region, region.word_move(caret, forward=forward), status="moved")

        neighbor = self.document.neighbor(region, _step(direction))
        if neighbor is None:
            self._reached(region, direction)
            return CommandResult(consumed=True, status="document_edge", region=region, index=caret)
        entry = 0 if forward else neighbor.length
        return self._place(
            neighbor, neighbor.word_move(entry, forward=forward), status="crossed"
        )

    def _move_global(self, direction: Direction, region: Region) -> CommandResult:
        del region
        self.selection.clear_all()
        self.memory.reset(reason="global")
        target = self.document.first if direction is Direction.UP else self.document.last
        assert target is not None
        index = 0 if direction is Direction.UP else target.length
        return self._place(target, index, status="global")

    # -- extending moves --------------------------------------------------

    def _extend_vertical(self, direction: Direction, region: Region) -> CommandResult:
        had_anchor = self.selection.anchor is not None
        anchor = self.selection.ensure_anchor(region)
        head = self.selection.head(region)
        try:
            target = resolve_vertical_move(
                region, head.index, direction, self.memory, threshold=self.threshold
            )
        except LayoutUnavailableError:
            if not had_anchor:
                self.selection.clear_anchor()
            return self._native_vertical_extend(region, head.index, direction)

        if target is not None:
            return self._extended(anchor, Position(region, target), status="extended")

        neighbor = self.document.neighbor(region, _step(direction))
        if neighbor is None:
            self._reached(region, direction)
            edge = 0 if direction is Direction.UP else region.length
            return self._extended(anchor, Position(region, edge), status="document_edge")

        if not self.memory.has_value():
            self.memory.store(region, head.index)
        landing = self._landing(neighbor, direction)
        return self._extended(anchor, Position(neighbor, landing), status="crossed")

    def _native_vertical_extend(
        self, region: Region, head: int, direction: Direction
    ) -> CommandResult:
        selection = region.selection
        fixed = selection.location if head == selection.upper_bound else selection.upper_bound
        target = native_vertical_move(region.text, head, direction)
        region.set_selection(TextRange.between(fixed, target))
        self.selection.notify()
        return CommandResult(consumed=True, status="native", region=region, index=target)

    def _extend_horizontal(self, direction: Direction, region: Region) -> CommandResult:
        anchor = self.selection.ensure_anchor(region)
        head = self.selection.head(region)
        self.memory.reset(reason="horizontal")
        if direction is Direction.LEFT and head.index > 0:
            return self._extended(anchor, Position(region, head.index - 1), status="extended")
        if direction is Direction.RIGHT and head.index < region.length:
            return self._extended(anchor, Position(region, head.index + 1), status="extended")

        neighbor = self.document.neighbor(region, _step(direction))
        if neighbor is None:
            self._reached(region, direction)
            return self._extended(anchor, head, status="document_edge")
        entry = neighbor.length if direction is Direction.LEFT else 0
        return self._extended(anchor, Position(neighbor, entry), status="crossed")

    def _extend_word(self, direction: Direction, region: Region) -> CommandResult:
        forward = direction is Direction.RIGHT
        anchor = self.selection.ensure_anchor(region)
        head = self.selection.head(region)
        self.memory.reset(reason="word")
        edge = region.length if forward else 0
        if head.index != edge:
            target = region.word_move(head.index, forward=forward)
            return self._extended(anchor, Position(region, target), status="extended")

        neighbor = self.document.neighbor(region, _step(direction))
        if neighbor is None:
            self._reached(region, direction)
            return self._extended(anchor, head, status="document_edge")
        entry = 0 if forward else neighbor.length
        return self._extended(anchor, Position(neighbor, entry), status="crossed")

    def _extend_global(self, direction: Direction, region: Region) -> CommandResult:
        anchor = self.selection.ensure_anchor(region)
        self.memory.reset(reason="global")
        target = self.document.first if direction is Direction.UP else self.document.last
        assert target is not None
        index = 0 if direction is Direction.UP else target.length
        return self._extended(anchor, Position(target, index), status="global")


__all__ = ["NavigationCoordinator"]
