"""Level configurator — difficulty curve and starting layout per level.

Pure functions of the level index and the game configuration:

- rocket quota interpolated linearly from level 1 to the final level
- ammo = floor(quota * ammo_multiplier), 25 % to each outer battery and
  the remainder to the central one
- fixed ground layout for the three batteries and the cities
- background scenery drawn from the level RNG
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field

from novadefense.loaders.game_config_loader import GameConfig
from novadefense.models.battery import Battery
from novadefense.models.city import City
from novadefense.models.level import Scenery, Silhouette, Star
from novadefense.models.point import Point

log = logging.getLogger(__name__)

BATTERY_IDS: tuple[str, str, str] = ("b-left", "b-mid", "b-right")


@dataclass(frozen=True)
class LevelSetup:
    """Starting parameters for one level.

    Attributes:
        level: The (clamped) level index.
        rocket_quota: Rockets to spawn during the level.
        total_ammo: floor(rocket_quota * ammo_multiplier).
        battery_allocations: Ammo per battery ID, summing to total_ammo.
        battery_positions: Ground position per battery ID.
        city_positions: Ground positions of the cities, left to right.
    """

    level: int
    rocket_quota: int
    total_ammo: int
    battery_allocations: dict[str, int] = field(default_factory=dict)
    battery_positions: dict[str, Point] = field(default_factory=dict)
    city_positions: tuple[Point, ...] = ()

    def to_dict(self) -> dict:
        return {
            "level": self.level,
            "rocket_quota": self.rocket_quota,
            "total_ammo": self.total_ammo,
            "batteries": [
                {"id": bid, "ammo": ammo, **self.battery_positions[bid].to_dict()}
                for bid, ammo in self.battery_allocations.items()
            ],
            "cities": [p.to_dict() for p in self.city_positions],
        }


# -- Difficulty curve ----------------------------------------------------

def clamp_level(level: int, config: GameConfig) -> int:
    """Clamp a level index into [1, total_levels]."""
    return max(1, min(level, config.total_levels))


def rocket_quota(level: int, config: GameConfig) -> int:
    """Rockets for a level: linear from level 1 to the final level.

    Indices at or beyond ``total_levels`` get the final-level count.
    """
    if level >= config.total_levels:
        return config.level_n_rockets
    level = max(1, level)
    span = config.level_n_rockets - config.level_1_rockets
    step = span / (config.total_levels - 1)
    return math.floor(config.level_1_rockets + (level - 1) * step)


def allocate_ammo(total_ammo: int, side_share: float = 0.25) -> dict[str, int]:
    """Split ammo between the batteries; the central one gets the remainder."""
    side = math.floor(total_ammo * side_share)
    mid = total_ammo - 2 * side
    return {"b-left": side, "b-mid": mid, "b-right": side}


# -- Layout --------------------------------------------------------------

def battery_positions(config: GameConfig) -> dict[str, Point]:
    y = config.field_height - config.battery_ground_offset
    return {
        "b-left": Point(config.battery_edge_offset, y),
        "b-mid": Point(config.field_width / 2, y),
        "b-right": Point(config.field_width - config.battery_edge_offset, y),
    }


def city_positions(config: GameConfig) -> tuple[Point, ...]:
    """Cities spread over the ground with a gap in the middle for b-mid."""
    n = config.city_count
    spacing = (config.field_width - 2 * config.city_margin) / (n + 1)
    half = (n + 1) // 2
    y = config.field_height - config.city_ground_offset
    positions = []
    for i in range(n):
        slot = i if i < half else i + 1
        positions.append(Point(config.city_margin + slot * spacing, y))
    return tuple(positions)


def configure(level: int, config: GameConfig) -> LevelSetup:
    """Compute the starting parameters for a level (deterministic, no side effects)."""
    level = clamp_level(level, config)
    quota = rocket_quota(level, config)
    total_ammo = math.floor(quota * config.ammo_multiplier)
    log.debug("[LEVEL] level=%d quota=%d ammo=%d", level, quota, total_ammo)
    return LevelSetup(
        level=level,
        rocket_quota=quota,
        total_ammo=total_ammo,
        battery_allocations=allocate_ammo(total_ammo, config.side_ammo_share),
        battery_positions=battery_positions(config),
        city_positions=city_positions(config),
    )


# -- Entity construction -------------------------------------------------

def build_batteries(setup: LevelSetup, config: GameConfig) -> list[Battery]:
    return [
        Battery(
            bid=bid,
            position=setup.battery_positions[bid],
            ammo=ammo,
            max_ammo=ammo,
            health=config.battery_max_health,
            max_health=config.battery_max_health,
        )
        for bid, ammo in setup.battery_allocations.items()
    ]


def build_cities(setup: LevelSetup) -> list[City]:
    return [City(cid=f"city-{i}", position=p) for i, p in enumerate(setup.city_positions)]


def generate_scenery(rng: random.Random, config: GameConfig) -> Scenery:
    """Stars in the upper 70 % of the sky and a skyline along the ground."""
    width, height = config.field_width, config.field_height
    stars = tuple(
        Star(x=rng.random() * width, y=rng.random() * height * 0.7, size=rng.random() * 2)
        for _ in range(config.star_count)
    )
    silhouettes = tuple(
        Silhouette(
            x=i * (width / 15),
            y=height,
            w=40 + rng.random() * 60,
            h=50 + rng.random() * 150,
        )
        for i in range(config.silhouette_count)
    )
    return Scenery(stars=stars, silhouettes=silhouettes)
