"""Geometry queries consumed by the coordinator, plus a terminal grid layout."""

from __future__ import annotations

from bisect import bisect_right
from typing import TYPE_CHECKING, Callable, Iterable, Optional, Protocol

from .geometry import LineFragment, Point, Rect, TextRange
from .words import next_word_boundary, previous_word_boundary

if TYPE_CHECKING:
    from .region import Region

TextSource = Callable[[], str]


class LayoutUnavailableError(RuntimeError):
    """Raised when a layout cannot answer geometric questions yet."""

    def __init__(self, message: str, *, region_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.region_id = region_id


class LayoutQuery(Protocol):
    """Per-region geometry service. Glyph and character indices coincide."""

    def line_fragment(self, index: int) -> LineFragment:
        """Return the laid-out line containing ``index``."""
        ...

    def boundary_line_fragment(self, *, from_end: bool) -> LineFragment:
        """Return the first line, or the last one when ``from_end`` is set."""
        ...

    def character_index(self, point: Point) -> tuple[int, float]:
        """Return the nearest index to ``point`` and the fraction past it."""
        ...

    def is_first_line(self, line_range: TextRange) -> bool:
        ...

    def is_last_line(self, line_range: TextRange, total_glyphs: int) -> bool:
        ...

    def glyph_rect(self, index: int) -> Rect:
        ...

    def word_boundary(self, index: int, *, forward: bool) -> int:
        ...

    def bind(self, source: TextSource) -> None:
        ...


class GridLayout:
    """Monospace layout on a character grid.

    Hard lines end after ``"\\n"`` and are wrapped every ``columns``
    characters. A terminator stays on the line it ends and has zero width.
    Empty text still lays out one empty line so carets have somewhere to sit.
    """

    def __init__(
        self,
        *,
        columns: int = 72,
        cell_width: float = 1.0,
        line_height: float = 1.0,
        source: Optional[TextSource] = None,
    ) -> None:
        if columns < 1:
            raise ValueError("GridLayout needs at least one column.")
        self.columns = columns
        self.cell_width = cell_width
        self.line_height = line_height
        self._source = source
        self._cached_text: Optional[str] = None
        self._lines: list[LineFragment] = []
        self._starts: list[int] = []

    def bind(self, source: TextSource) -> None:
        self._source = source
        self._cached_text = None

    def _text(self) -> str:
        if self._source is None:
            raise LayoutUnavailableError("Layout is not attached to any text.")
        return self._source()

    def _ensure_lines(self) -> tuple[str, list[LineFragment]]:
        text = self._text()
        if text != self._cached_text:
            self._lines = self._layout(text)
            self._starts = [line.start for line in self._lines]
            self._cached_text = text
        return text, self._lines

    def _fragment(self, start: int, length: int, row: int) -> LineFragment:
        rect = Rect(
            0.0, row * self.line_height, self.columns * self.cell_width, self.line_height
        )
        return LineFragment(TextRange(start, length), rect)

    def _layout(self, text: str) -> list[LineFragment]:
        if not text:
            return [self._fragment(0, 0, 0)]

        lines: list[LineFragment] = []
        position = 0
        while position < len(text):
            newline = text.find("\n", position)
            hard_end = len(text) if newline == -1 else newline
            segment = position
            while hard_end - segment > self.columns:
                lines.append(self._fragment(segment, self.columns, len(lines)))
                segment += self.columns
            if newline == -1:
                lines.append(self._fragment(segment, hard_end - segment, len(lines)))
                position = len(text)
            else:
                lines.append(self._fragment(segment, hard_end - segment + 1, len(lines)))
                position = newline + 1
        return lines

    @property
    def line_count(self) -> int:
        return len(self._ensure_lines()[1])

    @property
    def height(self) -> float:
        return self.line_count * self.line_height

    def lines(self) -> list[LineFragment]:
        return list(self._ensure_lines()[1])

    def line_fragment(self, index: int) -> LineFragment:
        text, lines = self._ensure_lines()
        probe = max(0, min(index, len(text) - 1))
        return lines[max(0, bisect_right(self._starts, probe) - 1)]

    def boundary_line_fragment(self, *, from_end: bool) -> LineFragment:
        _, lines = self._ensure_lines()
        return lines[-1] if from_end else lines[0]

    def character_index(self, point: Point) -> tuple[int, float]:
        text, lines = self._ensure_lines()
        row = int(point.y // self.line_height) if point.y > 0 else 0
        line = lines[min(row, len(lines) - 1)]
        if line.range.is_empty:
            return line.start, 0.0

        terminated = text[line.end - 1] == "\n"
        visible = line.range.length - (1 if terminated else 0)
        column = point.x / self.cell_width
        if column <= 0:
            return line.start, 0.0
        if column < visible:
            whole = int(column)
            return line.start + whole, column - whole
        if terminated:
            return line.start + visible, 0.0
        return line.start + visible - 1, 1.0

    def is_first_line(self, line_range: TextRange) -> bool:
        return line_range.location == 0

    def is_last_line(self, line_range: TextRange, total_glyphs: int) -> bool:
        return line_range.upper_bound >= total_glyphs

    def glyph_rect(self, index: int) -> Rect:
        text, _ = self._ensure_lines()
        if not text:
            return Rect(0.0, 0.0, 0.0, self.line_height)
        probe = max(0, min(index, len(text) - 1))
        line = self.line_fragment(probe)
        width = 0.0 if text[probe] == "\n" else self.cell_width
        return Rect(
            (probe - line.start) * self.cell_width, line.rect.y, width, self.line_height
        )

    def word_boundary(self, index: int, *, forward: bool) -> int:
        text = self._text()
        if forward:
            return next_word_boundary(text, index)
        return previous_word_boundary(text, index)


def stack_frames(
    regions: Iterable["Region"],
    *,
    gap: float = 1.0,
    origin: Point = Point(0.0, 0.0),
) -> float:
    """Give each grid-laid region a frame directly below the previous one.

    Returns the total height consumed, gaps included.
    """

    y = origin.y
    consumed = 0.0
    for position, region in enumerate(regions):
        if position:
            y += gap
        layout = region.layout
        if isinstance(layout, GridLayout):
            width = layout.columns * layout.cell_width
            height = layout.height
        else:
            width, height = 0.0, 0.0
        region.frame = Rect(origin.x, y, width, height)
        y += height
        consumed = y - origin.y
    return consumed


__all__ = [
    "GridLayout",
    "LayoutQuery",
    "LayoutUnavailableError",
    "TextSource",
    "stack_frames",
]
