"""Points, sizes and rectangles in screen coordinates."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Point:
    """A position on the screen."""

    x: int = 0
    y: int = 0


@dataclass(frozen=True)
class Size:
    """A width and a height."""

    width: int = 0
    height: int = 0


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle; the right and bottom edges are exclusive."""

    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def contains(self, x: int, y: int) -> bool:
        """Whether the point ``(x, y)`` lies inside the rectangle."""
        return self.x <= x < self.x + self.width and self.y <= y < self.y + self.height

    def intersect(self, other: Rect) -> Rect:
        """The overlap of two rectangles; width and height are zero if they are apart."""
        x = max(self.x, other.x)
        y = max(self.y, other.y)
        width = min(self.x + self.width, other.x + other.width) - x
        height = min(self.y + self.height, other.y + other.height) - y
        if width < 0 or height < 0:
            width = height = 0
        return Rect(x, y, width, height)

    def union(self, other: Rect) -> Rect:
        """The smallest rectangle holding both; an empty rectangle is ignored."""
        if other.is_empty:
            return self
        if self.is_empty:
            return other
        x = min(self.x, other.x)
        y = min(self.y, other.y)
        return Rect(
            x,
            y,
            max(self.x + self.width, other.x + other.width) - x,
            max(self.y + self.height, other.y + other.height) - y,
        )