"""Planar coordinate system for the play field.

Screen-style coordinates:
- x grows to the right
- y grows downwards (rockets enter at y = 0 and fall towards the ground)
"""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Point:
    """Immutable 2D point (or vector) in field units.

    Attributes:
        x: Horizontal coordinate.
        y: Vertical coordinate (downwards).
    """

    x: float
    y: float

    # -- Arithmetic ------------------------------------------------------

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    def scaled(self, factor: float) -> Point:
        return Point(self.x * factor, self.y * factor)

    # -- Geometry --------------------------------------------------------

    @property
    def length(self) -> float:
        """Euclidean length when used as a vector."""
        return math.hypot(self.x, self.y)

    def distance_to(self, other: Point) -> float:
        """Euclidean distance between two points."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def direction_to(self, other: Point) -> Point:
        """Unit vector pointing from self to other (zero vector if equal)."""
        delta = other - self
        mag = delta.length
        if mag == 0:
            return Point(0.0, 0.0)
        return delta.scaled(1.0 / mag)

    def within_box(self, other: Point, tolerance: float) -> bool:
        """Axis-aligned proximity test: both |dx| and |dy| below tolerance."""
        return abs(self.x - other.x) < tolerance and abs(self.y - other.y) < tolerance

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y}

    def __repr__(self) -> str:
        return f"Point({self.x:.1f},{self.y:.1f})"
