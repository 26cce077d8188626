"""Selection state spanning regions, mouse gestures and the clipboard."""

from .clipboard import ClipboardBank, ClipboardEntry
from .model import DragState, Position, SelectionBoundary, SelectionModel
from .mouse import MouseSelection

__all__ = [
    "ClipboardBank",
    "ClipboardEntry",
    "DragState",
    "MouseSelection",
    "Position",
    "SelectionBoundary",
    "SelectionModel",
]
