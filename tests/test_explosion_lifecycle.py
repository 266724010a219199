"""Tests for the explosion grow / shrink / finished state machine."""

import math

from novadefense.engine.explosion_lifecycle import ExplosionLifecycle, advance_explosion
from novadefense.engine.simulation_service import SimulationService
from novadefense.models.explosion import Explosion, ExplosionOrigin, ExplosionPhase
from novadefense.models.point import Point


def _explosion(max_radius: float = 40, growth_rate: float = 1.5, radius: float = 2,
               origin: ExplosionOrigin = ExplosionOrigin.IMPACT) -> Explosion:
    return Explosion(eid="e-1", position=Point(100, 100), radius=radius,
                     max_radius=max_radius, growth_rate=growth_rate, origin=origin)


def _run(explosion: Explosion) -> tuple[int, int, list[float]]:
    """Advance until finished; return (growing ticks, shrinking ticks, radius trace)."""
    grow_ticks = shrink_ticks = 0
    trace = [explosion.radius]
    while explosion.phase is ExplosionPhase.GROWING:
        advance_explosion(explosion)
        grow_ticks += 1
        trace.append(explosion.radius)
    while not explosion.is_finished:
        advance_explosion(explosion)
        shrink_ticks += 1
        trace.append(explosion.radius)
    return grow_ticks, shrink_ticks, trace


class TestExplosionTiming:
    def test_standard_explosion_tick_counts(self):
        grow, shrink, _ = _run(_explosion())
        assert grow == math.ceil((40 - 2) / 1.5) == 26
        assert shrink == math.ceil(40 / 0.75) == 54

    def test_enlarged_explosion_tick_counts(self):
        grow, shrink, _ = _run(_explosion(max_radius=120, growth_rate=3,
                                          origin=ExplosionOrigin.INTERCEPT))
        assert grow == math.ceil((120 - 2) / 3)
        assert shrink == math.ceil(120 / 1.5)

    def test_radius_clamped_at_max_and_zero(self):
        explosion = _explosion()
        _, _, trace = _run(explosion)
        assert max(trace) == 40
        assert trace[-1] == 0
        assert explosion.radius == 0


class TestExplosionShape:
    def test_radius_trace_is_unimodal(self):
        _, _, trace = _run(_explosion())
        peak = trace.index(max(trace))
        rising, falling = trace[:peak + 1], trace[peak:]
        assert all(a <= b for a, b in zip(rising, rising[1:]))
        assert all(a >= b for a, b in zip(falling, falling[1:]))

    def test_finished_explosion_does_not_change(self):
        explosion = _explosion()
        _run(explosion)
        advance_explosion(explosion)
        assert explosion.is_finished
        assert explosion.radius == 0

    def test_contains_uses_current_radius(self):
        explosion = _explosion(radius=10)
        assert explosion.contains(Point(109, 100))
        assert not explosion.contains(Point(110, 100))
        advance_explosion(explosion)
        assert explosion.contains(Point(110, 100))


class TestExplosionLifecycle:
    def test_finished_explosions_are_pruned(self):
        service = SimulationService()
        level = service.new_level(1, seed=1)
        level.explosions.append(_explosion(radius=0.5, max_radius=0.5))
        level.explosions[0].phase = ExplosionPhase.SHRINKING
        lifecycle = ExplosionLifecycle()
        lifecycle.step(level)
        assert level.explosions == []
