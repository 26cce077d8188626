"""Region buffers, geometry value types and layout queries."""

from .geometry import EMPTY_RANGE, Direction, LineFragment, Point, Rect, TextRange
from .layout import (
    GridLayout,
    LayoutQuery,
    LayoutUnavailableError,
    TextSource,
    stack_frames,
)
from .region import ContentListener, Region
from .validation import clamp_index, clamp_range

__all__ = [
    "ContentListener",
    "Direction",
    "EMPTY_RANGE",
    "GridLayout",
    "LayoutQuery",
    "LayoutUnavailableError",
    "LineFragment",
    "Point",
    "Rect",
    "Region",
    "TextRange",
    "TextSource",
    "clamp_index",
    "clamp_range",
    "stack_frames",
]
