"""Remembered horizontal target for chains of vertical moves."""

from __future__ import annotations

from typing import Optional

from sequential_text.region.layout import LayoutUnavailableError
from sequential_text.region.region import Region
from sequential_text.runtime import telemetry


class HorizontalMemory:
    """Holds at most one x coordinate, in layout units.

    The value is only meaningful between consecutive vertical moves; every
    other mutation is expected to call ``reset``.
    """

    def __init__(self) -> None:
        self._value: Optional[float] = None

    @property
    def value(self) -> Optional[float]:
        return self._value

    def has_value(self) -> bool:
        return self._value is not None

    def reset(self, *, reason: str = "explicit") -> None:
        if self._value is None:
            return
        self._value = None
        telemetry.record_event("memory.reset", data={"reason": reason})

    def store(self, region: Region, index: int) -> Optional[float]:
        """Remember the x of the insertion point at ``index``.

        Empty regions store 0, an index at or past the end stores the right
        edge of the last glyph, anything else the left edge of its glyph.
        Missing geometry leaves the memory empty.
        """

        try:
            x = self._measure(region, index)
        except LayoutUnavailableError:
            self._value = None
            return None
        self._value = x
        telemetry.record_event(
            "memory.store", data={"region": region.id, "index": index, "x": x}
        )
        return x

    def store_from_caret(self, region: Region) -> Optional[float]:
        """Store from the caret; a non-empty selection stores nothing."""

        if region.has_selection:
            return None
        return self.store(region, region.caret)

    @staticmethod
    def _measure(region: Region, index: int) -> float:
        layout = region.require_layout()
        length = region.length
        if length == 0:
            return 0.0
        if index >= length:
            return layout.glyph_rect(length - 1).max_x
        return layout.glyph_rect(max(0, index)).min_x


__all__ = ["HorizontalMemory"]
