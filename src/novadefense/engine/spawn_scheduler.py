"""Spawn scheduler — probabilistic rocket release tied to level time.

Each tick draws one uniform sample against

    base_rate = rockets_remaining / (remaining_time * tick_rate)
    weight    = 0.4 + 1.2 * progress
    p         = base_rate * weight

so the expected number of spawns matches the remaining quota over the
remaining time while the intensity ramps up towards the end of the level.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from novadefense.models.point import Point
from novadefense.models.rocket import Rocket
from novadefense.util.events import RocketSpawned

if TYPE_CHECKING:
    from novadefense.loaders.game_config_loader import GameConfig
    from novadefense.models.level import LevelState
    from novadefense.util.events import EventBus

log = logging.getLogger(__name__)

WEIGHT_START = 0.4
WEIGHT_RAMP = 1.2


def spawn_probability(rockets_remaining: int, remaining_time: float,
                      progress: float, tick_rate: int) -> float:
    """Per-tick probability of releasing one rocket."""
    if rockets_remaining <= 0 or remaining_time <= 0:
        return 0.0
    base_rate = rockets_remaining / (remaining_time * tick_rate)
    weight = WEIGHT_START + WEIGHT_RAMP * progress
    return base_rate * weight


class SpawnScheduler:
    """Releases rockets from the level quota.

    Args:
        config: Game configuration (speed range, field width, tick rate).
        event_bus: Optional bus for RocketSpawned events.
    """

    def __init__(self, config: GameConfig, event_bus: Optional[EventBus] = None) -> None:
        self._config = config
        self._events = event_bus

    def step(self, level: LevelState) -> Optional[Rocket]:
        """Maybe spawn one rocket. Returns the new rocket or None."""
        clock = level.clock
        if level.rockets_remaining <= 0 or clock.remaining <= 0:
            return None

        p = spawn_probability(level.rockets_remaining, clock.remaining,
                              clock.progress, self._config.tick_rate)
        if level.rng.random() >= p:
            return None

        targets = level.live_targets
        if not targets:
            # Quota is kept for a later tick.
            log.debug("[SPAWN] No live target at tick %d — deferred", level.tick_count)
            return None

        rng = level.rng
        target = targets[int(rng.random() * len(targets))]
        rocket = Rocket(
            rid=level.next_id("r"),
            position=Point(rng.random() * self._config.field_width, 0.0),
            target=target,
            speed=rng.uniform(self._config.rocket_speed_min, self._config.rocket_speed_max),
        )
        level.rockets.append(rocket)
        level.rockets_remaining -= 1

        log.debug("[SPAWN] Rocket %s -> %r speed=%.2f (%d left)",
                  rocket.rid, target, rocket.speed, level.rockets_remaining)
        if self._events is not None:
            self._events.emit(RocketSpawned(rocket.rid, target.x, target.y))
        return rocket
