"""Explosion model — a transient blast zone.

Explosions grow to their maximum radius, then shrink at half the growth
rate until they vanish.  The transition rules live in
engine/explosion_lifecycle.py; this module only holds the record.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from novadefense.models.point import Point


class ExplosionPhase(Enum):
    """Lifecycle phase of an explosion."""

    GROWING = "growing"
    SHRINKING = "shrinking"


class ExplosionOrigin(Enum):
    """What produced the explosion."""

    IMPACT = "impact"        # a rocket reached its target
    INTERCEPT = "intercept"  # an interceptor met a rocket


@dataclass
class Explosion:
    """An active explosion.

    Attributes:
        eid: Unique explosion ID within the level.
        position: Blast center.
        radius: Current radius (never negative, never above max_radius).
        max_radius: Radius at which growth stops.
        growth_rate: Radius gained per tick while growing.
        origin: Impact ground burst or player intercept.
        phase: GROWING until max_radius is reached, then SHRINKING.
        is_finished: Set when the radius returns to 0 while shrinking.
    """

    eid: str
    position: Point
    radius: float
    max_radius: float
    growth_rate: float
    origin: ExplosionOrigin = ExplosionOrigin.IMPACT
    phase: ExplosionPhase = field(default=ExplosionPhase.GROWING)
    is_finished: bool = field(default=False)

    @property
    def is_enlarged(self) -> bool:
        return self.origin is ExplosionOrigin.INTERCEPT

    def contains(self, point: Point) -> bool:
        """True if point lies strictly inside the current radius."""
        return self.position.distance_to(point) < self.radius

    def to_dict(self) -> dict:
        return {
            "id": self.eid,
            "x": self.position.x,
            "y": self.position.y,
            "radius": self.radius,
            "max_radius": self.max_radius,
            "phase": self.phase.value,
            "origin": self.origin.value,
        }
