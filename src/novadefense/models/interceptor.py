"""Interceptor model — a player-launched counter-projectile.

The velocity is fixed at launch time and never changes: interceptors fly
in a straight line past their commanded point until they meet a rocket
or leave the field.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from novadefense.models.point import Point


@dataclass
class Interceptor:
    """An interceptor in flight.

    Attributes:
        iid: Unique interceptor ID within the level.
        position: Current position.
        origin: Muzzle point it was launched from (for trail rendering).
        target: Commanded point.
        velocity: Constant per-tick displacement.
        battery_bid: ID of the launching battery.
        is_exploded: Set on a proximity kill or when leaving the field.
    """

    iid: str
    position: Point
    origin: Point
    target: Point
    velocity: Point
    battery_bid: str
    is_exploded: bool = field(default=False)

    def to_dict(self) -> dict:
        return {
            "id": self.iid,
            "x": self.position.x,
            "y": self.position.y,
            "origin_x": self.origin.x,
            "origin_y": self.origin.y,
            "target_x": self.target.x,
            "target_y": self.target.y,
            "vx": self.velocity.x,
            "vy": self.velocity.y,
            "battery": self.battery_bid,
        }
