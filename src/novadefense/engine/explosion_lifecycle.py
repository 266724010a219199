"""Explosion lifecycle — the grow / shrink / finished state machine.

    GROWING   radius += growth_rate            until radius >= max_radius
    SHRINKING radius -= growth_rate * factor   until radius <= 0 -> finished

With the default factor of 0.5 a blast lingers about twice as long as it
takes to form.  The radius is clamped to [0, max_radius] at both turns.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from novadefense.models.explosion import Explosion, ExplosionPhase

if TYPE_CHECKING:
    from novadefense.models.level import LevelState

log = logging.getLogger(__name__)


def advance_explosion(explosion: Explosion, shrink_factor: float = 0.5) -> None:
    """Advance one explosion by one tick."""
    if explosion.is_finished:
        return

    if explosion.phase is ExplosionPhase.GROWING:
        explosion.radius = min(explosion.max_radius, explosion.radius + explosion.growth_rate)
        if explosion.radius >= explosion.max_radius:
            explosion.phase = ExplosionPhase.SHRINKING
        return

    explosion.radius = max(0.0, explosion.radius - explosion.growth_rate * shrink_factor)
    if explosion.radius <= 0:
        explosion.is_finished = True


class ExplosionLifecycle:
    """Advances all explosions of a level and prunes the finished ones.

    Args:
        shrink_factor: Shrink rate as a fraction of the growth rate.
    """

    def __init__(self, shrink_factor: float = 0.5) -> None:
        self._shrink_factor = shrink_factor

    def step(self, level: LevelState) -> None:
        for explosion in level.explosions:
            advance_explosion(explosion, self._shrink_factor)
        finished = [e for e in level.explosions if e.is_finished]
        if finished:
            level.explosions = [e for e in level.explosions if not e.is_finished]
            log.debug("[BLAST] %d explosion(s) finished at tick %d", len(finished), level.tick_count)
