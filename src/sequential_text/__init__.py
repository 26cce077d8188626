"""Caret, selection and merge-delete coordination across ordered text regions."""

from .config import CoordinatorSettings
from .coordinator import (
    DocumentCoordinator,
    DocumentSnapshot,
    RegionSnapshot,
    create_coordinator,
)
from .navigation.commands import Command, CommandKind, CommandResult
from .region import GridLayout, Point, Rect, Region, TextRange

__all__ = [
    "Command",
    "CommandKind",
    "CommandResult",
    "CoordinatorSettings",
    "DocumentCoordinator",
    "DocumentSnapshot",
    "GridLayout",
    "Point",
    "Rect",
    "Region",
    "RegionSnapshot",
    "TextRange",
    "create_coordinator",
]

__version__ = "0.1.0"
