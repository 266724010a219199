"""Simulation service — the deterministic per-tick engine of a level.

Tick order (must be preserved):
1. clock            — advance level time by one tick
2. launches         — drain queued player launch commands
3. spawn            — maybe release one rocket from the quota
4. kinematics       — move rockets and interceptors
5. collisions       — impacts, intercepts, blast kills, bounds, cleanup
6. explosions       — grow / shrink, prune finished
7. win / loss       — terminal status check

The level state is passed into every call; the service itself holds no
level data, so any number of levels can be simulated side by side (tests
do exactly that).  All randomness comes from ``level.rng``.
"""

from __future__ import annotations

import logging
import random
from typing import Optional

from novadefense.engine.clock import SimulationClock
from novadefense.engine.collision import CollisionResolver
from novadefense.engine.explosion_lifecycle import ExplosionLifecycle
from novadefense.engine.input_gate import InputGate
from novadefense.engine.kinematics import KinematicsEngine
from novadefense.engine.level_config import (
    build_batteries,
    build_cities,
    configure,
    generate_scenery,
)
from novadefense.engine.spawn_scheduler import SpawnScheduler
from novadefense.engine.win_loss import WinLossEvaluator
from novadefense.loaders.game_config_loader import GameConfig
from novadefense.models.interceptor import Interceptor
from novadefense.models.level import LevelState
from novadefense.models.point import Point
from novadefense.models.snapshot import LevelSnapshot
from novadefense.models.status import LaunchResult, StatusTransition
from novadefense.util.events import (
    EventBus,
    InterceptorLaunched,
    LevelStarted,
    LevelStatusChanged,
)

log = logging.getLogger(__name__)

STRAIGHT_UP = Point(0.0, -1.0)


class SimulationService:
    """Builds levels and advances them tick by tick.

    Args:
        config: Game configuration.
        event_bus: Optional bus receiving simulation events.
    """

    def __init__(self, config: GameConfig | None = None, event_bus: EventBus | None = None) -> None:
        self._config = config or GameConfig()
        self._events = event_bus
        self.input_gate = InputGate()
        self._spawner = SpawnScheduler(self._config, event_bus)
        self._kinematics = KinematicsEngine()
        self._collisions = CollisionResolver(self._config, event_bus)
        self._explosions = ExplosionLifecycle(self._config.explosion_shrink_factor)
        self._win_loss = WinLossEvaluator()

    @property
    def config(self) -> GameConfig:
        return self._config

    # ── Level setup ────────────────────────────────────────────

    def new_level(self, level: int, score: int = 0, seed: int | None = None) -> LevelState:
        """Create the state for a level.

        Args:
            level: 1-based level index (clamped to the configured range).
            score: Score carried over from earlier levels.
            seed: Seed for the level RNG; None draws from system entropy.
        """
        cfg = self._config
        setup = configure(level, cfg)
        rng = random.Random(seed)
        state = LevelState(
            level=setup.level,
            clock=SimulationClock(cfg.level_duration_sec, cfg.tick_rate),
            rng=rng,
            rocket_quota=setup.rocket_quota,
            rockets_remaining=setup.rocket_quota,
            is_final_level=setup.level >= cfg.total_levels,
            batteries=build_batteries(setup, cfg),
            cities=build_cities(setup),
            scenery=generate_scenery(rng, cfg),
            score=score,
        )
        log.info("[LEVEL] Level %d ready: %d rockets, ammo %s",
                 state.level, state.rocket_quota, setup.battery_allocations)
        self._emit(LevelStarted(state.level, state.rocket_quota))
        return state

    # ── Deterministic tick (also used by tests) ────────────────

    def tick(self, level: LevelState, dt_ticks: int = 1) -> Optional[StatusTransition]:
        """Run ``dt_ticks`` simulation steps.

        Returns the status transition if the level ended during this call,
        otherwise None.  A level that is already over is left untouched.
        """
        for _ in range(dt_ticks):
            if level.is_over:
                return None
            transition = self._step(level)
            if transition is not None:
                return transition
        return None

    def _step(self, level: LevelState) -> Optional[StatusTransition]:
        level.clock.advance(1)
        level.tick_count += 1

        self.input_gate.drain(level, self.launch_interceptor)
        self._spawner.step(level)
        self._kinematics.step(level)
        self._collisions.resolve(level)
        self._explosions.step(level)

        status = self._win_loss.evaluate(level)
        if status is None:
            return None

        transition = StatusTransition(
            level=level.level,
            previous=level.status,
            status=status,
            score=level.score,
            tick=level.tick_count,
        )
        level.status = status
        log.info("[STATUS] Level %d -> %s after %d ticks (score %d)",
                 level.level, status.value, level.tick_count, level.score)
        self._emit(LevelStatusChanged(level.level, status.value, level.score))
        return transition

    # ── Player commands ────────────────────────────────────────

    def queue_launch(self, level: LevelState, x: float, y: float) -> bool:
        """Queue a pointer launch for the next tick."""
        return self.input_gate.pointer(level, x, y)

    def launch_interceptor(
        self,
        level: LevelState,
        target: Point,
        origin: Point | None = None,
    ) -> LaunchResult:
        """Fire from the nearest battery that can fire.

        The battery is chosen by distance to ``origin`` (the pointer point;
        defaults to ``target``).  Without an eligible battery nothing is
        mutated and a no-op result is returned.
        """
        if level.is_over:
            return LaunchResult.noop("not_playing")

        origin = origin or target
        candidates = [b for b in level.batteries if b.can_fire]
        if not candidates:
            log.debug("[LAUNCH] No battery with ammo at level %d", level.level)
            return LaunchResult.noop("no_battery")

        battery = min(candidates, key=lambda b: b.position.distance_to(origin))
        battery.consume_ammo()

        muzzle = battery.muzzle(self._config.muzzle_height)
        direction = muzzle.direction_to(target)
        if direction.length == 0:
            direction = STRAIGHT_UP

        interceptor = Interceptor(
            iid=level.next_id("i"),
            position=muzzle,
            origin=muzzle,
            target=target,
            velocity=direction.scaled(self._config.interceptor_speed),
            battery_bid=battery.bid,
        )
        level.interceptors.append(interceptor)

        log.debug("[LAUNCH] %s fired %s -> %r (ammo %d/%d)",
                  battery.bid, interceptor.iid, target, battery.ammo, battery.max_ammo)
        self._emit(InterceptorLaunched(interceptor.iid, battery.bid, battery.ammo))
        return LaunchResult(ok=True, battery_id=battery.bid, interceptor_id=interceptor.iid)

    # ── Read-only view ─────────────────────────────────────────

    def snapshot(self, level: LevelState) -> LevelSnapshot:
        return LevelSnapshot.of(level)

    def _emit(self, event: object) -> None:
        if self._events is not None:
            self._events.emit(event)
