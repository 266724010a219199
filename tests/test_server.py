"""Tests for the WebSocket server's message handling and fan-out."""

import json
from unittest.mock import AsyncMock

import pytest
from websockets.exceptions import ConnectionClosed

from novadefense.network.router import Router
from novadefense.network.server import Server


class _FakeWS:
    """Stands in for a websockets ServerConnection."""

    def __init__(self):
        self.sent: list[dict] = []
        self.remote_address = ("127.0.0.1", 5000)

    async def send(self, raw: str) -> None:
        self.sent.append(json.loads(raw))


@pytest.fixture
def router():
    router = Router()
    router.register("start_game", AsyncMock(return_value={"type": "command_response", "ok": True}))
    router.register("end_game", AsyncMock(side_effect=RuntimeError("boom")))
    return router


@pytest.fixture
def server(router):
    return Server(router)


class TestHandleMessage:
    @pytest.mark.asyncio
    async def test_response_carries_request_id(self, server):
        ws = _FakeWS()
        server.register_connection(ws)
        await server._handle_message(ws, json.dumps({"type": "start_game", "request_id": 7}))
        assert ws.sent == [{"type": "command_response", "ok": True, "request_id": 7}]

    @pytest.mark.asyncio
    async def test_invalid_json(self, server):
        ws = _FakeWS()
        await server._handle_message(ws, "{not json")
        assert ws.sent[0]["type"] == "error"
        assert ws.sent[0]["message"].startswith("Invalid JSON")

    @pytest.mark.asyncio
    async def test_non_object_payload(self, server):
        ws = _FakeWS()
        await server._handle_message(ws, b"[1, 2]")
        assert ws.sent == [{"type": "error", "message": "Message must be a JSON object"}]

    @pytest.mark.asyncio
    async def test_handler_error_is_reported(self, server):
        ws = _FakeWS()
        await server._handle_message(ws, json.dumps({"type": "end_game", "request_id": "a"}))
        assert ws.sent == [{"type": "error", "message": "boom", "request_id": "a"}]

    @pytest.mark.asyncio
    async def test_validation_error_is_reported(self, server):
        ws = _FakeWS()
        await server._handle_message(ws, json.dumps({"type": "launch", "x": "left"}))
        assert ws.sent[0]["type"] == "error"

    @pytest.mark.asyncio
    async def test_unhandled_type_sends_nothing(self, server):
        ws = _FakeWS()
        await server._handle_message(ws, json.dumps({"type": "nonexistent"}))
        assert ws.sent == []


class TestConnections:
    def test_client_ids_are_negative_and_unique(self, server):
        a, b = _FakeWS(), _FakeWS()
        assert server.register_connection(a) == -1
        assert server.register_connection(b) == -2
        assert server.connection_count == 2
        assert server.unregister_connection(a) == -1
        assert server.unregister_connection(a) is None
        assert server.connection_count == 1

    @pytest.mark.asyncio
    async def test_broadcast_all(self, server):
        a, b = _FakeWS(), _FakeWS()
        server.register_connection(a)
        server.register_connection(b)
        sent = await server.broadcast_all({"type": "level_update", "tick": 1})
        assert sent == 2
        assert a.sent == b.sent == [{"type": "level_update", "tick": 1}]

    @pytest.mark.asyncio
    async def test_broadcast_skips_closed_connection(self, server):
        alive, closed = _FakeWS(), _FakeWS()
        closed.send = AsyncMock(side_effect=ConnectionClosed(None, None))
        server.register_connection(alive)
        server.register_connection(closed)
        assert await server.broadcast_all({"type": "session_state"}) == 1
        assert alive.sent == [{"type": "session_state"}]

    @pytest.mark.asyncio
    async def test_stop_without_start(self, server):
        await server.stop()
