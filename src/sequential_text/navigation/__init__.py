"""Command vocabulary and the boundary-crossing navigation coordinator."""

from .commands import Command, CommandKind, CommandResult
from .coordinator import NavigationCoordinator

__all__ = [
    "Command",
    "CommandKind",
    "CommandResult",
    "NavigationCoordinator",
]
