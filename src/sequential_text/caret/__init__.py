"""Caret geometry: horizontal memory and vertical move resolution."""

from .memory import HorizontalMemory
from .vertical import (
    index_for_point,
    is_at_vertical_edge,
    landing_index,
    native_vertical_move,
    resolve_vertical_move,
)

__all__ = [
    "HorizontalMemory",
    "index_for_point",
    "is_at_vertical_edge",
    "landing_index",
    "native_vertical_move",
    "resolve_vertical_move",
]
