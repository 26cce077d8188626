"""Document-level coordinator owning every per-document service."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional

from sequential_text.caret.memory import HorizontalMemory
from sequential_text.config import CoordinatorSettings
from sequential_text.document import Document, FocusController, FocusTracker
from sequential_text.editing.coordinator import EditCoordinator
from sequential_text.events import EventBus
from sequential_text.keymaps import KeymapRegistry, KeyStroke, load_default_keymaps
from sequential_text.navigation.commands import Command, CommandKind, CommandResult
from sequential_text.navigation.coordinator import NavigationCoordinator
from sequential_text.region.geometry import Point, Rect, TextRange
from sequential_text.region.layout import GridLayout, stack_frames
from sequential_text.region.region import Region
from sequential_text.runtime import telemetry
from sequential_text.selection.clipboard import ClipboardBank
from sequential_text.selection.model import SelectionModel
from sequential_text.selection.mouse import MouseSelection

CommandHandler = Callable[[Command], CommandResult]


@dataclass(slots=True)
class RegionSnapshot:
    id: str
    text: str
    selection: TextRange
    focused: bool
    frame: Optional[Rect]


@dataclass(slots=True)
class DocumentSnapshot:
    regions: tuple[RegionSnapshot, ...]
    focused_id: Optional[str]
    anchor: Optional[tuple[str, int]]
    memory_x: Optional[float]
    dragging: bool

    @property
    def texts(self) -> list[str]:
        return [region.text for region in self.regions]


class DocumentCoordinator:
    """Single entry point for keyboard, mouse and edit commands on one document.

    Every instance owns its own anchor, horizontal memory and focus, so two
    coordinators never share interaction state.
    """

    def __init__(
        self,
        *,
        settings: Optional[CoordinatorSettings] = None,
        focus: Optional[FocusController] = None,
        keymap_registry: Optional[KeymapRegistry] = None,
        load_defaults: bool = True,
        stack_gap: Optional[float] = None,
    ) -> None:
        self.settings = settings or CoordinatorSettings()
        self.bus = EventBus()
        self.document = Document()
        self.focus: FocusController = focus or FocusTracker(self.bus)
        self.memory = HorizontalMemory()
        self.clipboard = ClipboardBank()
        self.selection = SelectionModel(
            self.document,
            self.focus,
            bus=self.bus,
            separator=self.settings.copy_separator,
        )
        self.mouse = MouseSelection(
            self.document,
            self.selection,
            self.memory,
            threshold=self.settings.rounding_threshold,
        )
        self.navigation = NavigationCoordinator(
            self.document,
            self.focus,
            self.selection,
            self.memory,
            bus=self.bus,
            threshold=self.settings.rounding_threshold,
        )
        self.editing = EditCoordinator(
            self.document,
            self.focus,
            self.selection,
            self.memory,
            clipboard=self.clipboard,
            bus=self.bus,
        )
        self.keymap_registry = keymap_registry or KeymapRegistry(
            logger_name="sequential_text.keymaps"
        )
        if load_defaults and keymap_registry is None:
            load_default_keymaps(self.keymap_registry)
        self._stack_gap = stack_gap
        self._command_handlers: Dict[CommandKind, CommandHandler] = {
            CommandKind.SELECT_ALL: self._select_all,
            CommandKind.DELETE: lambda command: self.editing.delete(),
            CommandKind.COPY: lambda command: self.editing.copy(),
            CommandKind.CUT: lambda command: self.editing.cut(),
        }

    # -- regions ----------------------------------------------------------

    @property
    def regions(self) -> list[Region]:
        return self.document.regions

    @property
    def focused(self) -> Optional[Region]:
        return self.focus.current_focus()

    def register(self, region: Region) -> Region:
        if region in self.document:
            return region
        self.document.register(region)
        region.add_listener(self._on_region_content)
        if self._stack_gap is not None:
            self.restack()
        return region

    def unregister(self, region: Region) -> None:
        if region not in self.document:
            return
        if self.focus.current_focus() is region:
            self.focus.request_focus(None)
        region.remove_listener(self._on_region_content)
        self.document.unregister(region)
        if self._stack_gap is not None:
            self.restack()

    def restack(self) -> None:
        """Re-assign grid frames top to bottom, keeping the current order."""

        stack_frames(self.document.regions, gap=self._stack_gap or 0.0)
        self.document.invalidate_order()

    def _on_region_content(self, region: Region, text: str) -> None:
        del text
        self.memory.reset(reason="content")
        if self._stack_gap is not None and region in self.document:
            self.restack()

    def focus_region(self, region: Region, index: Optional[int] = None) -> None:
        """Programmatically focus ``region``, dropping any selection gesture."""

        self.selection.clear_all()
        self.memory.reset(reason="focus")
        self.focus.request_focus(region)
        region.place_caret(region.caret if index is None else index)
        self.selection.notify()

    # -- commands ---------------------------------------------------------

    def handle_command(self, command: Command) -> CommandResult:
        with telemetry.span(
            name=f"command::{command.kind.value}",
            component=True,
            metadata={"command": command.token},
        ) as handle:
            if self.navigation.handles(command):
                result = self.navigation.handle(command)
            else:
                handler = self._command_handlers.get(command.kind)
                result = (
                    handler(command)
                    if handler is not None
                    else CommandResult(consumed=False, status="unhandled")
                )
            handle.add_metadata("status", result.status)
        return result

    def handle_key(self, stroke: KeyStroke | str) -> CommandResult:
        binding = self.keymap_registry.resolve(stroke)
        if binding is None:
            return CommandResult(consumed=False, status="unbound")
        return self.handle_command(binding.command)

    def _select_all(self, command: Command) -> CommandResult:
        del command
        if not self.selection.select_all():
            return CommandResult(consumed=False, status="dragging")
        return CommandResult(consumed=True, status="selected_all")

    def select_all(self) -> CommandResult:
        return self.handle_command(Command(CommandKind.SELECT_ALL))

    def delete(self) -> CommandResult:
        return self.handle_command(Command(CommandKind.DELETE))

    def copy(self) -> CommandResult:
        return self.handle_command(Command(CommandKind.COPY))

    def cut(self) -> CommandResult:
        return self.handle_command(Command(CommandKind.CUT))

    def insert_text(self, text: str) -> CommandResult:
        with telemetry.span(name="command::insert_text", component=True):
            return self.editing.insert_text(text)

    # -- mouse ------------------------------------------------------------

    def begin_drag(self, region: Region, point: Point) -> bool:
        with telemetry.span(name="mouse::begin_drag", metadata={"region": region.id}):
            return self.mouse.begin_drag(region, point)

    def drag(self, point: Point) -> bool:
        return self.mouse.drag(point)

    def end_drag(self) -> None:
        self.mouse.end_drag()

    def shift_click(self, region: Region, point: Point) -> bool:
        with telemetry.span(name="mouse::shift_click", metadata={"region": region.id}):
            return self.mouse.shift_click(region, point)

    def region_at(self, point: Point) -> Optional[Region]:
        position = self.mouse.locate(point)
        return position.region if position is not None else None

    # -- state ------------------------------------------------------------

    def snapshot(self) -> DocumentSnapshot:
        anchor = self.selection.anchor
        focused = self.focus.current_focus()
        return DocumentSnapshot(
            regions=tuple(
                RegionSnapshot(
                    id=region.id,
                    text=region.text,
                    selection=region.selection,
                    focused=region is focused,
                    frame=region.frame,
                )
                for region in self.document.regions
            ),
            focused_id=focused.id if focused is not None else None,
            anchor=(anchor.region.id, anchor.index) if anchor is not None else None,
            memory_x=self.memory.value,
            dragging=self.selection.drag.active,
        )


def create_coordinator(
    texts: Iterable[str],
    *,
    columns: Optional[int] = None,
    settings: Optional[CoordinatorSettings] = None,
    load_defaults: bool = True,
) -> DocumentCoordinator:
    """Build a coordinator over grid-laid regions stacked top to bottom."""

    settings = settings or CoordinatorSettings.from_env()
    coordinator = DocumentCoordinator(
        settings=settings,
        load_defaults=load_defaults,
        stack_gap=settings.region_gap,
    )
    width = columns or settings.default_columns
    for position, text in enumerate(texts):
        coordinator.register(
            Region(text, region_id=f"region-{position}", layout=GridLayout(columns=width))
        )
    first = coordinator.document.first
    if first is not None:
        coordinator.focus_region(first, 0)
    telemetry.record_event(
        "coordinator.created",
        data={"regions": len(coordinator.document), "columns": width},
    )
    return coordinator


__all__ = [
    "DocumentCoordinator",
    "DocumentSnapshot",
    "RegionSnapshot",
    "create_coordinator",
]
