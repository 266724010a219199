"""Tests for probabilistic rocket spawning."""

import random

import pytest

from novadefense.engine.simulation_service import SimulationService
from novadefense.engine.spawn_scheduler import SpawnScheduler, spawn_probability
from novadefense.loaders.game_config_loader import GameConfig
from novadefense.util.events import EventBus, RocketSpawned


class _FixedRandom(random.Random):
    """Random source whose uniform samples are always ``value``."""

    def __init__(self, value: float) -> None:
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value


@pytest.fixture
def cfg() -> GameConfig:
    return GameConfig()


@pytest.fixture
def level(cfg):
    level = SimulationService(cfg).new_level(1, seed=5)
    level.rng = _FixedRandom(0.0)
    return level


class TestSpawnProbability:
    def test_base_rate_at_level_start(self):
        assert spawn_probability(50, 60.0, 0.0, 60) == pytest.approx(50 / 3600 * 0.4)

    def test_weight_ramps_to_one_point_six(self):
        assert spawn_probability(10, 1.0, 1.0, 60) == pytest.approx(10 / 60 * 1.6)

    def test_zero_when_quota_exhausted(self):
        assert spawn_probability(0, 30.0, 0.5, 60) == 0.0

    def test_zero_when_time_is_up(self):
        assert spawn_probability(10, 0.0, 1.0, 60) == 0.0


class TestSpawnScheduler:
    def test_spawns_when_sample_below_probability(self, level, cfg):
        rocket = SpawnScheduler(cfg).step(level)
        assert rocket is not None
        assert level.rockets == [rocket]
        assert level.rockets_remaining == 49
        assert rocket.position.y == 0
        assert rocket.target == level.cities[0].position
        assert rocket.speed == cfg.rocket_speed_min

    def test_no_spawn_when_sample_above_probability(self, level, cfg):
        level.rng = _FixedRandom(0.99)
        assert SpawnScheduler(cfg).step(level) is None
        assert level.rockets == []
        assert level.rockets_remaining == 50

    def test_targets_include_batteries(self, level, cfg):
        for city in level.cities:
            city.is_destroyed = True
        rocket = SpawnScheduler(cfg).step(level)
        assert rocket.target == level.batteries[0].position

    def test_no_live_target_preserves_quota(self, level, cfg):
        for city in level.cities:
            city.is_destroyed = True
        for battery in level.batteries:
            battery.is_destroyed = True
        assert SpawnScheduler(cfg).step(level) is None
        assert level.rockets_remaining == 50
        assert level.rockets == []

    def test_no_spawn_after_quota(self, level, cfg):
        level.rockets_remaining = 0
        assert SpawnScheduler(cfg).step(level) is None

    def test_no_spawn_after_countdown(self, level, cfg):
        level.clock.advance(int(cfg.level_duration_sec * cfg.tick_rate))
        assert SpawnScheduler(cfg).step(level) is None
        assert level.rockets_remaining == 50

    def test_emits_spawn_event(self, level, cfg):
        bus = EventBus()
        received = []
        bus.on(RocketSpawned, received.append)
        rocket = SpawnScheduler(cfg, bus).step(level)
        assert [e.rocket_id for e in received] == [rocket.rid]

    def test_seeded_levels_spawn_identically(self, cfg):
        service = SimulationService(cfg)
        a = service.new_level(1, seed=99)
        b = service.new_level(1, seed=99)
        scheduler = SpawnScheduler(cfg)
        for _ in range(600):
            for level in (a, b):
                level.clock.advance(1)
                scheduler.step(level)
        assert [(r.position, r.target, r.speed) for r in a.rockets] == \
               [(r.position, r.target, r.speed) for r in b.rockets]
        assert a.rockets_remaining == b.rockets_remaining
