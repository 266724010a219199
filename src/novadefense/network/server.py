"""WebSocket push server for Nova Defense clients.

Every client may send session commands, launches and snapshot requests;
every client receives the session state and the level updates pushed
by the game loop.  There are no accounts: a connection is known by the
negative client id handed out when it opens.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional, TYPE_CHECKING

import websockets
from websockets.asyncio.server import ServerConnection, Server as WSServer

from novadefense.loaders.game_config_loader import GameConfig

if TYPE_CHECKING:
    from novadefense.network.router import Router

log = logging.getLogger(__name__)


def _encode(data: dict[str, Any]) -> str:
    return json.dumps(data, ensure_ascii=False, default=str)


class Server:
    """Accepts client connections and pushes game state to all of them.

    Args:
        router: Dispatches decoded client messages to their handlers.
        game_config: Supplies bind address, ping settings and frame limit.
    """

    def __init__(self, router: Router, game_config: Optional[GameConfig] = None) -> None:
        cfg = game_config or GameConfig()
        self._router = router
        self._cfg = cfg
        self._clients: dict[ServerConnection, int] = {}
        self._next_client_id = -1
        self._server: Optional[WSServer] = None

    async def start(self) -> None:
        cfg = self._cfg
        self._server = await websockets.serve(
            self._on_connect,
            cfg.ws_host,
            cfg.ws_port,
            origins=None,  # same open policy as the REST CORS middleware
            ping_interval=cfg.ws_ping_interval,
            ping_timeout=cfg.ws_ping_timeout,
            max_size=cfg.ws_max_message_size,
        )
        log.info("WebSocket server listening on ws://%s:%d", cfg.ws_host, cfg.ws_port)

    async def stop(self) -> None:
        if self._server is None:
            return
        self._server.close()
        await self._server.wait_closed()
        self._server = None
        log.info("WebSocket server stopped")

    # -- Clients ---------------------------------------------------------

    def register_connection(self, ws: ServerConnection) -> int:
        """Give *ws* the next negative client id."""
        client_id = self._next_client_id
        self._next_client_id -= 1
        self._clients[ws] = client_id
        return client_id

    def unregister_connection(self, ws: ServerConnection) -> Optional[int]:
        return self._clients.pop(ws, None)

    @property
    def connection_count(self) -> int:
        return len(self._clients)

    async def broadcast_all(self, data: dict[str, Any]) -> int:
        """Push one message to every client; returns how many got it."""
        raw = _encode(data)
        delivered = 0
        for ws, client_id in list(self._clients.items()):
            try:
                await ws.send(raw)
            except websockets.ConnectionClosed:
                log.debug("Push to client %d skipped, connection closed", client_id)
                continue
            delivered += 1
        return delivered

    # -- Incoming --------------------------------------------------------

    async def _on_connect(self, ws: ServerConnection) -> None:
        client_id = self.register_connection(ws)
        log.info("Client %d connected from %s", client_id, ws.remote_address)
        try:
            async for raw in ws:
                await self._handle_message(ws, raw)
        except websockets.ConnectionClosed as exc:
            log.info("Client %d disconnected (code=%s)", client_id, exc.code)
        finally:
            self.unregister_connection(ws)
            log.info("Client %d removed, %d connected", client_id, self.connection_count)

    async def _handle_message(self, ws: ServerConnection, raw: Any) -> None:
        """Decode one frame, route it and answer the sender."""
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            await self._send_error(ws, f"Invalid JSON: {exc}")
            return
        if not isinstance(data, dict):
            await self._send_error(ws, "Message must be a JSON object")
            return

        client_id = self._clients.get(ws, 0)
        request_id = data.get("request_id")
        try:
            response = await self._router.route(data, client_id)
        except Exception as exc:
            log.exception("Handler for %r failed (client %d)", data.get("type"), client_id)
            await self._send_error(ws, str(exc), request_id)
            return

        if response is None:
            return
        if request_id is not None:
            response["request_id"] = request_id
        await ws.send(_encode(response))

    @staticmethod
    async def _send_error(ws: ServerConnection, message: str, request_id: Any = None) -> None:
        error: dict[str, Any] = {"type": "error", "message": message}
        if request_id is not None:
            error["request_id"] = request_id
        await ws.send(_encode(error))
