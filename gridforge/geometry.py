"""
Geometry primitives in canvas pixel space.

Rect and Point are pydantic models so they nest directly inside cell and
snapshot records. CanvasSize and Padding describe the detector input.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field


class Point(BaseModel):
    """A point in canvas pixel space."""
    x: float = 0.0
    y: float = 0.0

    model_config = ConfigDict(populate_by_name=True)

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


class Rect(BaseModel):
    """Axis-aligned rectangle (x, y, width, height)."""
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    model_config = ConfigDict(populate_by_name=True)

    @property
    def x2(self) -> float:
        """Right edge x coordinate."""
        return self.x + self.width

    @property
    def y2(self) -> float:
        """Bottom edge y coordinate."""
        return self.y + self.height

    @property
    def center(self) -> Point:
        """Center point of the rectangle."""
        return Point(x=self.x + self.width / 2, y=self.y + self.height / 2)

    @property
    def area(self) -> float:
        """Area of the rectangle."""
        return self.width * self.height

    @property
    def aspect_ratio(self) -> float:
        """Width divided by height, 0 for degenerate rectangles."""
        if self.height == 0:
            return 0.0
        return self.width / self.height

    def contains(self, x: float, y: float) -> bool:
        """Check if a point lies inside the rectangle (edges inclusive)."""
        return self.x <= x <= self.x2 and self.y <= y <= self.y2

    def is_valid(self) -> bool:
        """Check for non-negative, finite dimensions."""
        values = (self.x, self.y, self.width, self.height)
        if not all(math.isfinite(v) for v in values):
            return False
        return self.width >= 0 and self.height >= 0

    def to_int_tuple(self) -> tuple[int, int, int, int]:
        """Return as (x, y, width, height) integer tuple."""
        return (int(self.x), int(self.y), int(self.width), int(self.height))


class CanvasSize(BaseModel):
    """Canvas dimensions in pixels."""
    width: float = Field(default=0)
    height: float = Field(default=0)


class Padding(BaseModel):
    """Canvas padding the detector keeps free of regions."""
    top: float = 0
    bottom: float = 0
    left: float = 0
    right: float = 0


def calculate_distance(a: Point, b: Point) -> float:
    """Euclidean distance between two points."""
    return math.hypot(a.x - b.x, a.y - b.y)
