"""Edits that may span several regions: merge-delete, copy, cut and insert."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from sequential_text.caret.memory import HorizontalMemory
from sequential_text.events import (
    CLIPBOARD_COPY,
    CONTENT_REPLACED,
    ClipboardCopied,
    ContentReplaced,
    EventBus,
)
from sequential_text.navigation.commands import CommandResult
from sequential_text.region.geometry import TextRange
from sequential_text.region.region import Region
from sequential_text.runtime import telemetry
from sequential_text.selection.clipboard import ClipboardBank
from sequential_text.selection.model import SelectionModel

if TYPE_CHECKING:
    from sequential_text.document import Document, FocusController


class EditCoordinator:
    """Applies edits to the focused region or to a multi-region selection."""

    def __init__(
        self,
        document: "Document",
        focus: "FocusController",
        selection: SelectionModel,
        memory: HorizontalMemory,
        *,
        clipboard: Optional[ClipboardBank] = None,
        bus: Optional[EventBus] = None,
    ) -> None:
        self.document = document
        self.focus = focus
        self.selection = selection
        self.memory = memory
        self.clipboard = clipboard or ClipboardBank()
        self.bus = bus

    def _replaced(self, region: Region) -> None:
        if self.bus is not None:
            self.bus.emit(CONTENT_REPLACED, ContentReplaced(region, region.text))

    def merge_delete(self) -> Optional[CommandResult]:
        """Delete a multi-region selection, folding the survivors into the first region.

        Returns ``None`` when fewer than two regions are selected.
        """

        selected = self.selection.selected_regions()
        if len(selected) < 2:
            return None

        first, last = selected[0], selected[-1]
        with telemetry.span(
            name="edit.merge_delete",
            component="edit",
            metadata={"first": first.id, "last": last.id, "regions": len(selected)},
        ):
            prefix = first.text[: first.selection.location]
            suffix = last.text[last.selection.upper_bound :]
            touched = list(selected)

            self.memory.reset(reason="edit")
            self.selection.clear_all()
            first.replace_content(prefix + suffix, caret=len(prefix))
            for region in touched[1:]:
                region.replace_content("", caret=0)
            self.focus.request_focus(first)

            for region in touched:
                self._replaced(region)
        self.selection.notify()
        telemetry.record_event(
            "edit.merged",
            data={"region": first.id, "caret": len(prefix), "emptied": len(touched) - 1},
        )
        return CommandResult(consumed=True, status="merged", region=first, index=len(prefix))

    def delete(self) -> CommandResult:
        """Backward delete: merge a multi-region selection, else edit the focused region."""

        merged = self.merge_delete()
        if merged is not None:
            return merged

        region = self._focused()
        if region is None:
            return CommandResult(consumed=False, status="empty_document")

        selection = region.selection
        if selection.is_empty and selection.location == 0:
            return CommandResult(consumed=True, status="noop", region=region, index=0)

        self.selection.clear_all(except_region=region)
        self.memory.reset(reason="edit")
        if selection.is_empty:
            selection = TextRange(selection.location - 1, 1)
        caret = region.replace_range(selection, "")
        self._replaced(region)
        self.selection.notify()
        return CommandResult(consumed=True, status="deleted", region=region, index=caret)

    def insert_text(self, text: str) -> CommandResult:
        """Replace the current selection (merging across regions first) with ``text``."""

        merged = self.merge_delete()
        region = merged.region if merged is not None else self._focused()
        if region is None:
            return CommandResult(consumed=False, status="empty_document")

        self.selection.clear_all(except_region=region)
        self.memory.reset(reason="edit")
        caret = region.replace_range(region.selection, text)
        self._replaced(region)
        self.selection.notify()
        return CommandResult(consumed=True, status="inserted", region=region, index=caret)

    def copy(self) -> CommandResult:
        text = self.selection.selected_text()
        if text is None:
            return CommandResult(consumed=False, status="nothing_selected")
        count = len(self.selection.selected_regions())
        self.clipboard.put(text, region_count=count)
        if self.bus is not None:
            self.bus.emit(CLIPBOARD_COPY, ClipboardCopied(text))
        telemetry.record_event("edit.copy", data={"regions": count, "chars": len(text)})
        return CommandResult(consumed=True, status="copied", message=text)

    def cut(self) -> CommandResult:
        copied = self.copy()
        if not copied.consumed:
            return copied
        result = self.delete()
        result.message = copied.message
        return result

    def _focused(self) -> Optional[Region]:
        region = self.focus.current_focus()
        if region is not None and region in self.document:
            return region
        return None


__all__ = ["EditCoordinator"]
