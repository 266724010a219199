"""Level state model — data container for the level being played.

The LevelState exclusively owns every mutable entity collection of the
current level.  It is created once per level by the simulation service,
passed explicitly into every tick, and never shared between levels.
Business logic is in the engine/ modules.
"""

from __future__ import annotations

import random
from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from novadefense.models.battery import Battery
from novadefense.models.city import City
from novadefense.models.explosion import Explosion
from novadefense.models.interceptor import Interceptor
from novadefense.models.point import Point
from novadefense.models.rocket import Rocket
from novadefense.models.status import GameStatus

if TYPE_CHECKING:
    from novadefense.engine.clock import SimulationClock


@dataclass(frozen=True)
class Star:
    x: float
    y: float
    size: float


@dataclass(frozen=True)
class Silhouette:
    """One building of the background skyline."""
    x: float
    y: float
    w: float
    h: float


@dataclass(frozen=True)
class Scenery:
    """Static background layout, drawn once per level from the level RNG."""

    stars: tuple[Star, ...] = ()
    silhouettes: tuple[Silhouette, ...] = ()

    def to_dict(self) -> dict:
        return {
            "stars": [{"x": s.x, "y": s.y, "size": s.size} for s in self.stars],
            "silhouettes": [
                {"x": s.x, "y": s.y, "w": s.w, "h": s.h} for s in self.silhouettes
            ],
        }


@dataclass(frozen=True)
class LaunchCommand:
    """A queued player launch, drained at the start of the next tick."""

    origin: Point
    target: Point


@dataclass
class LevelState:
    """Mutable state container for one level.

    Attributes:
        level: 1-based level index.
        clock: Elapsed / remaining level time.
        rng: The single seedable random source of this level.
        rocket_quota: Rockets the level will spawn in total.
        rockets_remaining: Rockets not yet spawned.
        is_final_level: Completing this level wins the game.

        rockets: Live rockets.
        interceptors: Interceptors in flight.
        explosions: Active explosions.
        batteries: The three launch sites (kept when destroyed).
        cities: The defended cities (kept when destroyed).
        scenery: Background layout for the renderer.

        score: Running score (includes points carried in from earlier levels).
        status: PLAYING until a terminal status is reached.
        tick_count: Ticks executed so far.
        pending_launches: Launch commands waiting for the next tick.
    """

    level: int
    clock: SimulationClock
    rng: random.Random
    rocket_quota: int
    rockets_remaining: int
    is_final_level: bool = False

    rockets: list[Rocket] = field(default_factory=list)
    interceptors: list[Interceptor] = field(default_factory=list)
    explosions: list[Explosion] = field(default_factory=list)
    batteries: list[Battery] = field(default_factory=list)
    cities: list[City] = field(default_factory=list)
    scenery: Scenery = field(default_factory=Scenery)

    score: int = 0
    status: GameStatus = GameStatus.PLAYING
    tick_count: int = 0
    pending_launches: deque[LaunchCommand] = field(default_factory=deque)

    _id_counters: dict[str, int] = field(default_factory=dict, repr=False)

    def next_id(self, prefix: str) -> str:
        """Allocate a level-unique entity ID such as ``r-12``."""
        n = self._id_counters.get(prefix, 0) + 1
        self._id_counters[prefix] = n
        return f"{prefix}-{n}"

    # -- Queries ---------------------------------------------------------

    @property
    def live_cities(self) -> list[City]:
        return [c for c in self.cities if not c.is_destroyed]

    @property
    def live_batteries(self) -> list[Battery]:
        return [b for b in self.batteries if not b.is_destroyed]

    @property
    def live_targets(self) -> list[Point]:
        """Positions a new rocket may aim at: live cities, then live batteries."""
        return [c.position for c in self.live_cities] + [b.position for b in self.live_batteries]

    @property
    def all_cities_destroyed(self) -> bool:
        return all(c.is_destroyed for c in self.cities)

    @property
    def is_over(self) -> bool:
        return self.status.is_terminal

    def battery(self, bid: str) -> Battery | None:
        for b in self.batteries:
            if b.bid == bid:
                return b
        return None
