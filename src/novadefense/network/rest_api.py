"""REST API — FastAPI application for read and control endpoints.

Level configuration and the session state are served over REST; live
level updates are pushed over the WebSocket server.

Usage::

    from novadefense.network.rest_api import create_app

    app = create_app(services)
    # Start with uvicorn as an asyncio task alongside the WS server
"""

from __future__ import annotations

import logging
from typing import Any, TYPE_CHECKING

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from novadefense.engine.level_config import configure
from novadefense.models.status import CommandResult
from novadefense.network.rest_models import (
    CommandResponseBody,
    ConfigResponse,
    HealthResponse,
    LaunchBody,
    LaunchResponseBody,
    LevelSetupResponse,
    SessionResponse,
)

if TYPE_CHECKING:
    from novadefense.main import Services

log = logging.getLogger(__name__)


def create_app(services: "Services") -> FastAPI:
    """Factory: create and return a configured FastAPI application.

    The ``services`` reference is captured by closure so every endpoint
    can access game logic without global state.
    """
    from novadefense.network.handlers import push_session_state

    app = FastAPI(title="Nova Defense Server", version="1.0.0")

    # CORS — allow browser access from any origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def _command(result: CommandResult) -> dict[str, Any]:
        return {
            "ok": result.ok,
            "status": result.status.value,
            "level": result.level,
            "reason": result.reason,
        }

    # =================================================================
    # Health / config
    # =================================================================

    @app.get("/api/health", response_model=HealthResponse)
    async def health() -> dict[str, Any]:
        loop = services.game_loop
        server = services.server
        return {
            "status": "ok",
            "session_status": services.session.status.value,
            "level": services.session.level_index,
            "connections": server.connection_count if server is not None else 0,
            "loop_running": loop.is_running if loop is not None else False,
            "ticks": loop.tick_count if loop is not None else 0,
            "avg_tick_ms": round(loop.avg_tick_duration_ms, 3) if loop is not None else 0.0,
            "uptime_seconds": round(loop.uptime_seconds, 1) if loop is not None else 0.0,
        }

    @app.get("/api/config", response_model=ConfigResponse)
    async def get_config() -> dict[str, Any]:
        cfg = services.game_config
        return {
            "total_levels": cfg.total_levels,
            "level_duration_sec": cfg.level_duration_sec,
            "tick_rate": cfg.tick_rate,
            "field_width": cfg.field_width,
            "field_height": cfg.field_height,
            "points_per_rocket": cfg.points_per_rocket,
            "battery_max_health": cfg.battery_max_health,
            "explosion_max_radius": cfg.explosion_max_radius,
        }

    # =================================================================
    # Levels
    # =================================================================

    @app.get("/api/levels/{index}", response_model=LevelSetupResponse)
    async def get_level(index: int) -> dict[str, Any]:
        if index < 1:
            raise HTTPException(status_code=404, detail=f"Level {index} does not exist")
        return configure(index, services.game_config).to_dict()

    # =================================================================
    # Session
    # =================================================================

    @app.get("/api/session", response_model=SessionResponse)
    async def get_session() -> dict[str, Any]:
        return services.session.to_dict()

    @app.post("/api/session/start", response_model=CommandResponseBody)
    async def start_game() -> dict[str, Any]:
        result = services.session.start_game()
        await push_session_state()
        return _command(result)

    @app.post("/api/session/next", response_model=CommandResponseBody)
    async def next_level() -> dict[str, Any]:
        result = services.session.next_level()
        await push_session_state()
        return _command(result)

    @app.post("/api/session/restart", response_model=CommandResponseBody)
    async def restart() -> dict[str, Any]:
        result = services.session.restart()
        await push_session_state()
        return _command(result)

    @app.post("/api/session/end", response_model=CommandResponseBody)
    async def end_game() -> dict[str, Any]:
        result = services.session.end_game()
        await push_session_state()
        return _command(result)

    @app.post("/api/launch", response_model=LaunchResponseBody)
    async def launch(body: LaunchBody) -> dict[str, Any]:
        queued = services.session.launch(body.x, body.y)
        log.debug("REST launch at (%.0f, %.0f) queued=%s", body.x, body.y, queued)
        return {"queued": queued}

    log.info("REST API created with %d routes", len(app.routes))
    return app
