"""Collision resolver — impacts, intercepts, blast kills and cleanup.

Runs after kinematics, in this order (must be preserved):

1. resolve_impacts     — rockets that reached their target explode there
                         and damage the city / battery around that point
2. resolve_intercepts  — an interceptor destroys every rocket within 3x
                         the rocket radius, one enlarged blast per kill
3. resolve_blasts      — every active explosion destroys the rockets inside
                         its *current* radius, for its whole lifetime
4. flag_out_of_bounds  — interceptors beyond the field margin are dropped
                         without a blast
5. remove_dead         — destroyed rockets and exploded interceptors leave
                         the store

Scoring: a rocket scores at most once, guarded by ``is_destroyed``.
Intercepts score; blast kills score when the blast came from an
intercept.  Ground bursts from rocket impacts never score.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from novadefense.models.explosion import Explosion, ExplosionOrigin
from novadefense.models.point import Point
from novadefense.models.status import KillCause
from novadefense.util.events import (
    BatteryDamaged,
    BatteryDestroyed,
    CityDestroyed,
    ExplosionSpawned,
    RocketDestroyed,
    RocketImpacted,
)

if TYPE_CHECKING:
    from novadefense.loaders.game_config_loader import GameConfig
    from novadefense.models.interceptor import Interceptor
    from novadefense.models.level import LevelState
    from novadefense.models.rocket import Rocket
    from novadefense.util.events import EventBus

log = logging.getLogger(__name__)


class CollisionResolver:
    """Detects and resolves all collisions of one tick.

    Args:
        config: Game configuration (radii, tolerances, scoring, field size).
        event_bus: Optional bus for impact / kill / damage events.
    """

    def __init__(self, config: GameConfig, event_bus: Optional[EventBus] = None) -> None:
        self._config = config
        self._events = event_bus

    def resolve(self, level: LevelState) -> None:
        """Run all collision phases for one tick."""
        self.resolve_impacts(level)
        self.resolve_intercepts(level)
        self.resolve_blasts(level)
        self.flag_out_of_bounds(level)
        self.remove_dead(level)

    # -- 1. Rocket impact ------------------------------------------------

    def resolve_impacts(self, level: LevelState) -> None:
        for rocket in level.rockets:
            if rocket.is_destroyed or not rocket.has_arrived:
                continue
            self._destroy(level, rocket, KillCause.IMPACT, points=0)
            self._spawn_explosion(level, rocket.position, ExplosionOrigin.IMPACT)
            log.debug("[IMPACT] Rocket %s hit %r", rocket.rid, rocket.target)
            self._emit(RocketImpacted(rocket.rid, rocket.position.x, rocket.position.y))
            self._apply_damage(level, rocket.target)

    def _apply_damage(self, level: LevelState, impact: Point) -> None:
        """Damage whatever stands at the impact point (axis-aligned tolerance)."""
        cfg = self._config
        for city in level.cities:
            if city.is_destroyed or not city.position.within_box(impact, cfg.city_hit_tolerance):
                continue
            city.is_destroyed = True
            log.info("[IMPACT] City %s destroyed (level %d)", city.cid, level.level)
            self._emit(CityDestroyed(city.cid))

        for battery in level.batteries:
            if battery.is_destroyed or not battery.position.within_box(impact, cfg.battery_hit_tolerance):
                continue
            destroyed = battery.take_hit()
            log.info("[IMPACT] Battery %s hit, health %d/%d",
                     battery.bid, battery.health, battery.max_health)
            self._emit(BatteryDamaged(battery.bid, battery.health))
            if destroyed:
                log.info("[IMPACT] Battery %s destroyed", battery.bid)
                self._emit(BatteryDestroyed(battery.bid))

    # -- 2. Interceptor proximity ----------------------------------------

    def resolve_intercepts(self, level: LevelState) -> None:
        kill_radius = self._config.rocket_base_radius * self._config.intercept_radius_factor
        for interceptor in level.interceptors:
            if interceptor.is_exploded:
                continue
            for rocket in self._rockets_near(level, interceptor, kill_radius):
                interceptor.is_exploded = True
                self._destroy(level, rocket, KillCause.INTERCEPT, points=self._config.points_per_rocket)
                self._spawn_explosion(level, interceptor.position, ExplosionOrigin.INTERCEPT)
                log.debug("[INTERCEPT] Interceptor %s destroyed rocket %s at %r",
                          interceptor.iid, rocket.rid, interceptor.position)

    @staticmethod
    def _rockets_near(level: LevelState, interceptor: Interceptor,
                      radius: float) -> list[Rocket]:
        return [
            rocket for rocket in level.rockets
            if not rocket.is_destroyed
            and interceptor.position.distance_to(rocket.position) < radius
        ]

    # -- 3. Blast radius -------------------------------------------------

    def resolve_blasts(self, level: LevelState) -> None:
        for explosion in level.explosions:
            if explosion.is_finished or explosion.radius <= 0:
                continue
            points = self._config.points_per_rocket if explosion.is_enlarged else 0
            for rocket in level.rockets:
                if rocket.is_destroyed or not explosion.contains(rocket.position):
                    continue
                self._destroy(level, rocket, KillCause.BLAST, points=points)
                log.debug("[BLAST] Explosion %s caught rocket %s (r=%.1f)",
                          explosion.eid, rocket.rid, explosion.radius)

    # -- 4. Field bounds -------------------------------------------------

    def flag_out_of_bounds(self, level: LevelState) -> None:
        cfg = self._config
        margin = cfg.offscreen_margin
        for interceptor in level.interceptors:
            if interceptor.is_exploded:
                continue
            p = interceptor.position
            if (p.x < -margin or p.x > cfg.field_width + margin
                    or p.y < -margin or p.y > cfg.field_height + margin):
                interceptor.is_exploded = True
                log.debug("[INTERCEPT] Interceptor %s left the field at %r", interceptor.iid, p)

    # -- 5. Cleanup ------------------------------------------------------

    @staticmethod
    def remove_dead(level: LevelState) -> None:
        level.rockets = [r for r in level.rockets if not r.is_destroyed]
        level.interceptors = [i for i in level.interceptors if not i.is_exploded]

    # -- Helpers ---------------------------------------------------------

    def _destroy(self, level: LevelState, rocket: Rocket, cause: KillCause, points: int) -> None:
        rocket.is_destroyed = True
        level.score += points
        self._emit(RocketDestroyed(rocket.rid, cause.value, points))

    def _spawn_explosion(self, level: LevelState, position: Point,
                         origin: ExplosionOrigin) -> Explosion:
        cfg = self._config
        max_radius = cfg.explosion_max_radius
        growth_rate = cfg.explosion_growth_rate
        if origin is ExplosionOrigin.INTERCEPT:
            max_radius *= cfg.collision_explosion_multiplier
            growth_rate *= cfg.collision_growth_multiplier
        explosion = Explosion(
            eid=level.next_id("e"),
            position=position,
            radius=cfg.explosion_initial_radius,
            max_radius=max_radius,
            growth_rate=growth_rate,
            origin=origin,
        )
        level.explosions.append(explosion)
        self._emit(ExplosionSpawned(explosion.eid, position.x, position.y, explosion.is_enlarged))
        return explosion

    def _emit(self, event: object) -> None:
        if self._events is not None:
            self._events.emit(event)
