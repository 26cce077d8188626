"""Clamping helpers shared by every boundary computation."""

from __future__ import annotations

from .geometry import TextRange


def clamp_index(index: int, length: int) -> int:
    return max(0, min(index, length))


def clamp_range(selection: TextRange, length: int) -> TextRange:
    location = clamp_index(selection.location, length)
    upper = clamp_index(selection.upper_bound, length)
    return TextRange(location, max(0, upper - location))


__all__ = ["clamp_index", "clamp_range"]
