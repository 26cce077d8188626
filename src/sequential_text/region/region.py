"""A single boundary-enforcing text region."""

from __future__ import annotations

import uuid
import weakref
from typing import Callable, Optional

from .geometry import Rect, TextRange
from .layout import LayoutQuery, LayoutUnavailableError
from .validation import clamp_index, clamp_range
from .words import next_word_boundary, previous_word_boundary

ContentListener = Callable[["Region", str], None]


class Region:
    """Text buffer with its own selection and hard edges.

    A region never lets its caret or selection leave ``[0, length]``; moving
    past an edge is the coordinator's business. Listeners are held weakly so a
    region never keeps its coordinator alive.
    """

    def __init__(
        self,
        text: str = "",
        *,
        region_id: Optional[str] = None,
        layout: Optional[LayoutQuery] = None,
        frame: Optional[Rect] = None,
    ) -> None:
        self.id = region_id or uuid.uuid4().hex[:8]
        self._text = text
        self._selection = TextRange(0, 0)
        self.focused = False
        self.frame = frame
        self.layout: Optional[LayoutQuery] = None
        self._listeners: list[weakref.ref] = []
        if layout is not None:
            self.attach_layout(layout)

    def __repr__(self) -> str:
        return f"Region(id={self.id!r}, length={self.length}, selection={self._selection})"

    @property
    def text(self) -> str:
        return self._text

    @property
    def length(self) -> int:
        return len(self._text)

    @property
    def selection(self) -> TextRange:
        return self._selection

    @property
    def caret(self) -> int:
        return self._selection.location

    @property
    def has_selection(self) -> bool:
        return not self._selection.is_empty

    def attach_layout(self, layout: LayoutQuery) -> None:
        layout.bind(lambda: self._text)
        self.layout = layout

    def require_layout(self) -> LayoutQuery:
        if self.layout is None:
            raise LayoutUnavailableError(
                "Region has no layout attached.", region_id=self.id
            )
        return self.layout

    def set_selection(self, selection: TextRange) -> TextRange:
        self._selection = clamp_range(selection, self.length)
        return self._selection

    def place_caret(self, index: int) -> int:
        return self.set_selection(TextRange(clamp_index(index, self.length), 0)).location

    def select_all(self) -> TextRange:
        return self.set_selection(TextRange(0, self.length))

    def collapse_selection(self) -> None:
        self._selection = TextRange(self._selection.location, 0)

    def substring(self, selection: Optional[TextRange] = None) -> str:
        bounds = clamp_range(selection or self._selection, self.length)
        return self._text[bounds.location : bounds.upper_bound]

    def add_listener(self, callback: ContentListener) -> None:
        if hasattr(callback, "__self__"):
            ref: weakref.ref = weakref.WeakMethod(callback)  # type: ignore[arg-type]
        else:
            ref = weakref.ref(callback)
        self._listeners.append(ref)

    def remove_listener(self, callback: ContentListener) -> None:
        self._listeners = [ref for ref in self._listeners if ref() not in (None, callback)]

    def _notify(self) -> None:
        alive: list[weakref.ref] = []
        for ref in self._listeners:
            callback = ref()
            if callback is None:
                continue
            alive.append(ref)
            callback(self, self._text)
        self._listeners = alive

    def replace_content(self, text: str, *, caret: Optional[int] = None) -> None:
        """Swap the whole buffer, clamp the selection and notify listeners."""

        self._text = text
        if caret is None:
            self._selection = clamp_range(self._selection, self.length)
        else:
            self.place_caret(caret)
        self._notify()

    def replace_range(self, selection: TextRange, text: str) -> int:
        """Replace ``selection`` with ``text`` and leave the caret after it."""

        bounds = clamp_range(selection, self.length)
        updated = self._text[: bounds.location] + text + self._text[bounds.upper_bound :]
        caret = bounds.location + len(text)
        self.replace_content(updated, caret=caret)
        return caret

    def word_move(self, index: int, *, forward: bool) -> int:
        """Native single-region word move from ``index``."""

        try:
            target = self.require_layout().word_boundary(index, forward=forward)
        except LayoutUnavailableError:
            if forward:
                target = next_word_boundary(self._text, index)
            else:
                target = previous_word_boundary(self._text, index)
        return clamp_index(target, self.length)


__all__ = ["ContentListener", "Region"]
