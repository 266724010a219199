"""Battery model — a player launch site with finite ammo and health.

Batteries are created once per level and mutated in place; they are
never recreated mid-level.  A destroyed battery stays in the store (it
is drawn as a crater) but can neither fire nor be targeted.
"""

from __future__ import annotations

from dataclasses import dataclass

from novadefense.models.point import Point


@dataclass
class Battery:
    """A launch site at the bottom of the field.

    Attributes:
        bid: Battery ID (``b-left``, ``b-mid``, ``b-right``).
        position: Ground position.
        ammo: Interceptors left, within [0, max_ammo].
        max_ammo: Allocation for the level.
        health: Remaining hits, within [0, max_health].
        max_health: Starting health.
        is_destroyed: True exactly when health is 0.
    """

    bid: str
    position: Point
    ammo: int
    max_ammo: int
    health: int
    max_health: int
    is_destroyed: bool = False

    @property
    def can_fire(self) -> bool:
        return not self.is_destroyed and self.ammo > 0

    def muzzle(self, height: float) -> Point:
        """Launch point above the battery."""
        return Point(self.position.x, self.position.y - height)

    def consume_ammo(self) -> None:
        self.ammo = max(0, self.ammo - 1)

    def take_hit(self) -> bool:
        """Apply one point of damage. Returns True if this hit destroyed it."""
        if self.is_destroyed:
            return False
        self.health = max(0, self.health - 1)
        if self.health == 0:
            self.is_destroyed = True
            return True
        return False

    def to_dict(self) -> dict:
        return {
            "id": self.bid,
            "x": self.position.x,
            "y": self.position.y,
            "ammo": self.ammo,
            "max_ammo": self.max_ammo,
            "health": self.health,
            "max_health": self.max_health,
            "destroyed": self.is_destroyed,
        }
