"""Cross-region editing."""

from .coordinator import EditCoordinator

__all__ = ["EditCoordinator"]
