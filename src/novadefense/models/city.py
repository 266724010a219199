"""City model — a passive defended structure with binary state."""

from __future__ import annotations

from dataclasses import dataclass

from novadefense.models.point import Point


@dataclass
class City:
    """A city on the ground line.

    Attributes:
        cid: City ID (``city-0`` .. ``city-5``).
        position: Ground position.
        is_destroyed: Set by the first rocket impact within tolerance.
    """

    cid: str
    position: Point
    is_destroyed: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.cid,
            "x": self.position.x,
            "y": self.position.y,
            "destroyed": self.is_destroyed,
        }
