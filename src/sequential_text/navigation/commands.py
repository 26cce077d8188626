"""Command vocabulary accepted by the coordinators."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from sequential_text.region.region import Region


class CommandKind(Enum):
    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    MOVE_LEFT = "move_left"
    MOVE_RIGHT = "move_right"
    WORD_LEFT = "word_left"
    WORD_RIGHT = "word_right"
    GLOBAL_START = "global_start"
    GLOBAL_END = "global_end"
    SELECT_ALL = "select_all"
    DELETE = "delete"
    COPY = "copy"
    CUT = "cut"


@dataclass(frozen=True, slots=True)
class Command:
    """A command, optionally extending the selection (shift held)."""

    kind: CommandKind
    extend: bool = False

    @classmethod
    def parse(cls, token: str) -> "Command":
        """Build a command from ``"move_up"`` or ``"extend:move_up"``."""

        extend = token.startswith("extend:")
        name = token.split(":", 1)[1] if extend else token
        try:
            kind = CommandKind(name)
        except ValueError as exc:
            raise KeyError(f"Unknown command '{token}'") from exc
        return cls(kind, extend=extend)

    @property
    def token(self) -> str:
        return f"extend:{self.kind.value}" if self.extend else self.kind.value


@dataclass(slots=True)
class CommandResult:
    """Outcome of a dispatched command."""

    consumed: bool
    status: str = "ok"
    region: Optional[Region] = None
    index: Optional[int] = None
    message: Optional[str] = None


__all__ = ["Command", "CommandKind", "CommandResult"]
