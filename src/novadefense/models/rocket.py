"""Rocket model — an enemy projectile falling towards a fixed target.

Rockets are pure data. They are created by the spawn scheduler, moved by
the kinematics engine and destroyed by the collision resolver.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from novadefense.models.point import Point


@dataclass
class Rocket:
    """A rocket on the play field.

    Attributes:
        rid: Unique rocket ID within the level.
        position: Current position.
        target: Fixed impact point (a city or battery position).
        speed: Distance travelled per tick.
        is_destroyed: Set once by whichever kill path reaches it first.
    """

    rid: str
    position: Point
    target: Point
    speed: float
    is_destroyed: bool = field(default=False)

    @property
    def distance_to_target(self) -> float:
        return self.position.distance_to(self.target)

    @property
    def has_arrived(self) -> bool:
        """True when the next step would reach or overshoot the target."""
        return self.distance_to_target < self.speed

    def to_dict(self) -> dict:
        return {
            "id": self.rid,
            "x": self.position.x,
            "y": self.position.y,
            "target_x": self.target.x,
            "target_y": self.target.y,
            "speed": self.speed,
        }
