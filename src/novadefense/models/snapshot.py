"""Level snapshot — the read-only view handed to renderers each tick.

Entities are copied when the snapshot is taken, so mutating the live
level afterwards never changes a snapshot that was already published.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from novadefense.models.battery import Battery
from novadefense.models.city import City
from novadefense.models.explosion import Explosion
from novadefense.models.interceptor import Interceptor
from novadefense.models.level import LevelState
from novadefense.models.rocket import Rocket
from novadefense.models.status import GameStatus


@dataclass(frozen=True)
class LevelSnapshot:
    """Immutable copy of a level at the end of a tick."""

    level: int
    status: GameStatus
    tick: int
    score: int
    rockets_remaining: int
    time_remaining: float
    rockets: tuple[Rocket, ...] = field(default_factory=tuple)
    interceptors: tuple[Interceptor, ...] = field(default_factory=tuple)
    explosions: tuple[Explosion, ...] = field(default_factory=tuple)
    batteries: tuple[Battery, ...] = field(default_factory=tuple)
    cities: tuple[City, ...] = field(default_factory=tuple)

    @classmethod
    def of(cls, level: LevelState) -> LevelSnapshot:
        return cls(
            level=level.level,
            status=level.status,
            tick=level.tick_count,
            score=level.score,
            rockets_remaining=level.rockets_remaining,
            time_remaining=level.clock.remaining,
            rockets=tuple(replace(r) for r in level.rockets),
            interceptors=tuple(replace(i) for i in level.interceptors),
            explosions=tuple(replace(e) for e in level.explosions),
            batteries=tuple(replace(b) for b in level.batteries),
            cities=tuple(replace(c) for c in level.cities),
        )

    @property
    def time_left(self) -> int:
        """Whole seconds shown on the countdown."""
        return int(self.time_remaining)

    def to_dict(self) -> dict[str, Any]:
        return {
            "level": self.level,
            "status": self.status.value,
            "tick": self.tick,
            "score": self.score,
            "rockets_remaining": self.rockets_remaining,
            "time_remaining": self.time_remaining,
            "time_left": self.time_left,
            "rockets": [r.to_dict() for r in self.rockets],
            "interceptors": [i.to_dict() for i in self.interceptors],
            "explosions": [e.to_dict() for e in self.explosions],
            "batteries": [b.to_dict() for b in self.batteries],
            "cities": [c.to_dict() for c in self.cities],
        }
