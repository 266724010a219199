"""Tests for message parsing, routing and the session handlers."""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from pydantic import ValidationError

from novadefense.engine.game_session import GameSession
from novadefense.engine.simulation_service import SimulationService
from novadefense.loaders.game_config_loader import GameConfig
from novadefense.models.messages import (
    LaunchRequest,
    StartGameRequest,
    MESSAGE_TYPES,
    parse_message,
)
from novadefense.network.handlers import register_all_handlers
from novadefense.network.router import Router


def _services(server=None):
    cfg = GameConfig()
    svc = SimpleNamespace(
        game_config=cfg,
        session=GameSession(SimulationService(cfg), seed=9),
        router=Router(),
        server=server,
        game_loop=None,
    )
    register_all_handlers(svc)
    return svc


class TestParseMessage:
    def test_parse_launch(self):
        msg = parse_message({"type": "launch", "x": 320, "y": 240.5})
        assert isinstance(msg, LaunchRequest)
        assert msg.x == 320
        assert msg.y == 240.5

    def test_parse_command(self):
        assert isinstance(parse_message({"type": "start_game"}), StartGameRequest)

    def test_parse_unknown_type(self):
        msg = parse_message({"type": "nonexistent", "sender": 1})
        assert msg.type == "nonexistent"

    def test_launch_requires_coordinates(self):
        with pytest.raises(ValidationError):
            parse_message({"type": "launch", "x": 1})

    def test_all_types_registered(self):
        assert len(MESSAGE_TYPES) > 0
        for key, cls in MESSAGE_TYPES.items():
            assert cls.model_fields["type"].default == key


class TestRouter:
    @pytest.mark.asyncio
    async def test_dispatch_to_handler(self):
        router = Router()
        handler = AsyncMock(return_value={"type": "ok"})
        router.register("start_game", handler)
        response = await router.route({"type": "start_game"}, sender_uid=-1)
        assert response == {"type": "ok"}
        handler.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unhandled_type_returns_none(self):
        router = Router()
        assert await router.route({"type": "nonexistent"}, sender_uid=-1) is None

    def test_registered_types(self):
        svc = _services()
        assert set(svc.router.registered_types) == {
            "start_game", "next_level", "restart", "end_game", "launch", "snapshot_request",
        }

    @pytest.mark.asyncio
    async def test_register_replaces_existing_handler(self):
        router = Router()
        first, second = AsyncMock(), AsyncMock(return_value={"type": "second"})
        router.register("restart", first)
        router.register("restart", second)
        assert router.registered_types == ["restart"]
        assert await router.route({"type": "restart"}, sender_uid=-1) == {"type": "second"}
        first.assert_not_awaited()


class TestHandlers:
    @pytest.mark.asyncio
    async def test_start_game_returns_setup(self):
        svc = _services()
        response = await svc.router.route({"type": "start_game"}, sender_uid=-1)
        assert response["type"] == "command_response"
        assert response["command"] == "start_game"
        assert response["ok"] is True
        assert response["status"] == "PLAYING"
        assert response["setup"]["rocket_quota"] == 50
        assert len(response["setup"]["scenery"]["stars"]) == svc.game_config.star_count

    @pytest.mark.asyncio
    async def test_rejected_command_has_reason(self):
        svc = _services()
        await svc.router.route({"type": "start_game"}, sender_uid=-1)
        response = await svc.router.route({"type": "next_level"}, sender_uid=-1)
        assert response["ok"] is False
        assert response["reason"] == "level_not_complete"
        assert response["setup"] is None

    @pytest.mark.asyncio
    async def test_launch_is_queued(self):
        svc = _services()
        response = await svc.router.route({"type": "launch", "x": 10, "y": 10}, sender_uid=-1)
        assert response == {"type": "launch_response", "sender": 0, "receiver": 0, "queued": False}

        await svc.router.route({"type": "start_game"}, sender_uid=-1)
        response = await svc.router.route({"type": "launch", "x": 10, "y": 10}, sender_uid=-1)
        assert response["queued"] is True
        assert len(svc.session.level.pending_launches) == 1

    @pytest.mark.asyncio
    async def test_snapshot_request(self):
        svc = _services()
        response = await svc.router.route({"type": "snapshot_request"}, sender_uid=-1)
        assert response["type"] == "session_state"
        assert response["status"] == "START"
        assert response["snapshot"] is None

    @pytest.mark.asyncio
    async def test_commands_push_session_state(self):
        server = SimpleNamespace(broadcast_all=AsyncMock(return_value=1))
        svc = _services(server)
        await svc.router.route({"type": "start_game"}, sender_uid=-1)
        await svc.router.route({"type": "end_game"}, sender_uid=-1)
        pushed = [call.args[0] for call in server.broadcast_all.await_args_list]
        assert [m["type"] for m in pushed] == ["session_state", "session_state"]
        assert [m["status"] for m in pushed] == ["PLAYING", "START"]
