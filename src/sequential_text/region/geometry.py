"""Value types for ranges, points and line rects."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True, slots=True)
class Point:
    x: float
    y: float

    def offset(self, dx: float, dy: float) -> "Point":
        return Point(self.x + dx, self.y + dy)


@dataclass(frozen=True, slots=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def min_x(self) -> float:
        return self.x

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def min_y(self) -> float:
        return self.y

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def mid_y(self) -> float:
        return self.y + self.height / 2

    def contains(self, point: Point) -> bool:
        """Half-open hit test: the bottom and right edges belong to the next rect."""

        return (
            self.min_x <= point.x < self.max_x and self.min_y <= point.y < self.max_y
        )

    def vertical_distance(self, y: float) -> float:
        if y < self.min_y:
            return self.min_y - y
        if y >= self.max_y:
            return y - self.max_y
        return 0.0


@dataclass(frozen=True, slots=True)
class TextRange:
    """Half-open character range ``[location, location + length)``."""

    location: int
    length: int = 0

    def __post_init__(self) -> None:
        if self.location < 0:
            raise ValueError("TextRange location cannot be negative.")
        if self.length < 0:
            raise ValueError("TextRange length cannot be negative.")

    @classmethod
    def between(cls, first: int, second: int) -> "TextRange":
        low, high = sorted((first, second))
        return cls(low, high - low)

    @property
    def upper_bound(self) -> int:
        return self.location + self.length

    @property
    def is_empty(self) -> bool:
        return self.length == 0

    def contains(self, index: int) -> bool:
        return self.location <= index < self.upper_bound


EMPTY_RANGE = TextRange(0, 0)


@dataclass(frozen=True, slots=True)
class LineFragment:
    """One laid-out line: its characters (terminator included) and its rect."""

    range: TextRange
    rect: Rect

    @property
    def start(self) -> int:
        return self.range.location

    @property
    def end(self) -> int:
        return self.range.upper_bound


class Direction(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def is_vertical(self) -> bool:
        return self in (Direction.UP, Direction.DOWN)

    @property
    def is_backward(self) -> bool:
        return self in (Direction.UP, Direction.LEFT)


__all__ = ["Direction", "EMPTY_RANGE", "LineFragment", "Point", "Rect", "TextRange"]
