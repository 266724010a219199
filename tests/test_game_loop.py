"""Tests for the async fixed-rate game loop."""

import asyncio

import pytest

from novadefense.engine.game_loop import GameLoop
from novadefense.engine.game_session import GameSession
from novadefense.engine.simulation_service import SimulationService
from novadefense.loaders.game_config_loader import GameConfig
from novadefense.models.status import GameStatus


def _loop(**overrides):
    cfg = GameConfig(**overrides)
    session = GameSession(SimulationService(cfg), seed=3)
    sent: list[dict] = []

    async def send(data):
        sent.append(data)

    return GameLoop(session, cfg, send_fn=send), session, sent


class TestGameLoopStep:
    @pytest.mark.asyncio
    async def test_idle_until_game_started(self):
        loop, session, sent = _loop()
        assert await loop.step() is False
        assert loop.tick_count == 0
        assert sent == []

    @pytest.mark.asyncio
    async def test_broadcasts_every_interval(self):
        loop, session, sent = _loop(broadcast_interval_ticks=2)
        session.start_game()
        for _ in range(4):
            await loop.step()
        assert loop.tick_count == 4
        assert [m["type"] for m in sent] == ["level_update", "level_update"]
        assert sent[-1]["tick"] == 4

    @pytest.mark.asyncio
    async def test_transition_pushes_update_and_status(self):
        loop, session, sent = _loop(broadcast_interval_ticks=100)
        session.start_game()
        session.level.rockets_remaining = 0
        await loop.step()

        assert [m["type"] for m in sent] == ["level_update", "level_status"]
        assert sent[0]["status"] == "LEVEL_COMPLETE"
        assert sent[1] == {"type": "level_status", "level": 1,
                           "status": "LEVEL_COMPLETE", "score": 0}

        await loop.step()
        assert loop.tick_count == 1
        assert session.status is GameStatus.LEVEL_COMPLETE

    @pytest.mark.asyncio
    async def test_runs_without_send_fn(self):
        cfg = GameConfig()
        session = GameSession(SimulationService(cfg), seed=3)
        loop = GameLoop(session, cfg)
        session.start_game()
        await loop.step()
        assert session.level.tick_count == 1


class TestGameLoopRun:
    @pytest.mark.asyncio
    async def test_run_and_stop(self):
        loop, session, sent = _loop(tick_rate=1000)
        session.start_game()
        task = asyncio.create_task(loop.run())
        await asyncio.sleep(0.05)
        assert loop.is_running
        loop.stop()
        await asyncio.wait_for(task, timeout=1.0)
        assert not loop.is_running
        assert loop.tick_count > 0
        assert loop.uptime_seconds > 0

    @pytest.mark.asyncio
    async def test_idle_steps_do_not_count_towards_tick_duration(self):
        loop, session, sent = _loop(tick_rate=1000)
        task = asyncio.create_task(loop.run())
        await asyncio.sleep(0.02)
        loop.stop()
        await asyncio.wait_for(task, timeout=1.0)
        assert loop.tick_count == 0
        assert loop.avg_tick_duration_ms == 0.0

    def test_average_covers_only_real_ticks(self):
        loop, session, sent = _loop()
        loop.tick_count = 2
        loop._record_tick_duration(0.002)
        loop._record_tick_duration(0.004)
        assert loop.avg_tick_duration_ms == pytest.approx(3.0)
