"""Vertical caret resolution against a region's layout.

Every function here may raise ``LayoutUnavailableError``; callers decide how
to degrade (see ``native_vertical_move`` for the geometry-free fallback).
"""

from __future__ import annotations

from typing import Optional

from sequential_text.region.geometry import Direction, LineFragment, Point
from sequential_text.region.region import Region
from sequential_text.region.validation import clamp_index

from .memory import HorizontalMemory

DEFAULT_ROUNDING_THRESHOLD = 0.5


def probe_index(index: int, length: int) -> int:
    """An end-of-buffer caret visually sits on the line ending at ``index``."""

    if index == length and index > 0:
        return index - 1
    return index


def current_line(region: Region, index: int) -> LineFragment:
    layout = region.require_layout()
    return layout.line_fragment(probe_index(clamp_index(index, region.length), region.length))


def _last_real_glyph(region: Region, line: LineFragment) -> Optional[int]:
    text = region.text
    end = line.end
    if end > line.start and text[end - 1] == "\n":
        end -= 1
    if end <= line.start:
        return None
    return end - 1


def line_end_index(region: Region, line: LineFragment) -> int:
    """Caret index at the visual end of ``line``, terminator excluded."""

    text = region.text
    if line.end > line.start and text[line.end - 1] == "\n":
        return line.end - 1
    layout = region.require_layout()
    if layout.is_last_line(line.range, region.length) or line.range.is_empty:
        return line.end
    # Soft wrap: the upper bound already belongs to the next visual line.
    return line.end - 1


def index_for_point(
    region: Region,
    x: float,
    line: LineFragment,
    *,
    threshold: float = DEFAULT_ROUNDING_THRESHOLD,
) -> int:
    """Resolve the caret index nearest to ``x`` on ``line``."""

    length = region.length
    if length == 0:
        return 0
    layout = region.require_layout()

    index, fraction = layout.character_index(Point(x, line.rect.mid_y))
    if fraction >= threshold:
        index += 1
    index = clamp_index(index, length)

    if not line.range.contains(index) and not line.range.is_empty:
        # The query drifted off the line; snap to its last glyph.
        last = line.end - 1
        index = last if region.text[last] == "\n" else last + 1
        index = clamp_index(index, length)

    last_real = _last_real_glyph(region, line)
    if last_real is not None and line.start <= index <= line.end:
        if x >= layout.glyph_rect(last_real).max_x:
            index = line_end_index(region, line)
    return clamp_index(index, length)


def landing_index(
    region: Region,
    x: float,
    *,
    from_end: bool,
    threshold: float = DEFAULT_ROUNDING_THRESHOLD,
) -> int:
    """Where a caret entering ``region`` vertically lands for a remembered ``x``."""

    if region.length == 0:
        return 0
    line = region.require_layout().boundary_line_fragment(from_end=from_end)
    return index_for_point(region, x, line, threshold=threshold)


def is_at_vertical_edge(region: Region, index: int, direction: Direction) -> bool:
    line = current_line(region, index)
    if direction is Direction.UP:
        return line.start == 0
    return line.end >= region.length


def resolve_vertical_move(
    region: Region,
    index: int,
    direction: Direction,
    memory: HorizontalMemory,
    *,
    threshold: float = DEFAULT_ROUNDING_THRESHOLD,
) -> Optional[int]:
    """Target index one line up or down, or ``None`` at the region's edge.

    The remembered x is stored from ``index`` first when the memory is empty.
    """

    if not direction.is_vertical:
        raise ValueError(f"{direction} is not a vertical direction.")
    layout = region.require_layout()
    length = region.length
    index = clamp_index(index, length)
    source = layout.line_fragment(probe_index(index, length))

    if direction is Direction.UP:
        target_probe = source.start - 1
        if target_probe < 0:
            return None
    else:
        target_probe = source.end
        if target_probe >= length:
            return None

    target = layout.line_fragment(target_probe)
    if target.rect.y == source.rect.y:
        return None

    if not memory.has_value():
        memory.store(region, index)
    x = memory.value if memory.value is not None else 0.0
    return index_for_point(region, x, target, threshold=threshold)


def native_vertical_move(text: str, index: int, direction: Direction) -> int:
    """Geometry-free move over hard lines, keeping the character column.

    The first line moves to 0 and the last line to the end of the text, like
    a plain single-buffer editor.
    """

    index = clamp_index(index, len(text))
    line_start = text.rfind("\n", 0, index) + 1
    column = index - line_start

    if direction is Direction.UP:
        if line_start == 0:
            return 0
        previous_start = text.rfind("\n", 0, line_start - 1) + 1
        previous_length = (line_start - 1) - previous_start
        return previous_start + min(column, previous_length)

    newline = text.find("\n", index)
    if newline == -1:
        return len(text)
    next_start = newline + 1
    next_end = text.find("\n", next_start)
    if next_end == -1:
        next_end = len(text)
    return next_start + min(column, next_end - next_start)


__all__ = [
    "DEFAULT_ROUNDING_THRESHOLD",
    "current_line",
    "index_for_point",
    "is_at_vertical_edge",
    "landing_index",
    "line_end_index",
    "native_vertical_move",
    "probe_index",
    "resolve_vertical_move",
]
