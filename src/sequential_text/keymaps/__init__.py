"""Key stroke models, registry and default bindings."""

from .defaults import DEFAULT_BINDINGS, load_default_keymaps
from .models import Binding, KeyStroke
from .registry import KeymapConflictError, KeymapRegistry, RegistryStats

__all__ = [
    "Binding",
    "DEFAULT_BINDINGS",
    "KeyStroke",
    "KeymapConflictError",
    "KeymapRegistry",
    "RegistryStats",
    "load_default_keymaps",
]
