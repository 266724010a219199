"""Game server entry point.

Initializes all components and starts the asyncio event loop:
1. Load configuration (config/game.yaml)
2. Create engine services (simulation, session, game loop)
3. Wire event handlers on the event bus
4. Start network servers (WebSocket + REST)
5. Start game loop (tick_rate Hz)

Usage:
    python -m novadefense.main [--config path/to/game.yaml] [--seed N]
    # or via entry point:
    novadefense
"""

from __future__ import annotations

import asyncio
import logging
import signal
import sys
from dataclasses import dataclass
from typing import Any, Optional

from novadefense.engine.game_loop import GameLoop
from novadefense.engine.game_session import GameSession
from novadefense.engine.simulation_service import SimulationService
from novadefense.loaders.game_config_loader import (
    DEFAULT_GAME_CONFIG_PATH,
    GameConfig,
    load_game_config,
)
from novadefense.network.handlers import register_all_handlers
from novadefense.network.router import Router
from novadefense.network.server import Server
from novadefense.util.events import (
    BatteryDestroyed,
    CityDestroyed,
    EventBus,
    LevelStarted,
    LevelStatusChanged,
)

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Container for all services (makes passing around easier)
# ---------------------------------------------------------------------------


@dataclass
class Services:
    """Holds references to all engine services."""

    game_config: Optional[GameConfig] = None
    event_bus: Optional[EventBus] = None
    simulation_service: Optional[SimulationService] = None
    session: Optional[GameSession] = None
    game_loop: Optional[GameLoop] = None
    router: Optional[Router] = None
    server: Optional[Server] = None
    rest_server: Any = None


# ===================================================================
# 1. Load configuration
# ===================================================================


def load_configuration(config_path: str = DEFAULT_GAME_CONFIG_PATH,
                       seed: Optional[int] = None) -> GameConfig:
    """Load the game configuration, applying a command-line seed override.

    Raises:
        ValueError: If the configuration file holds invalid values.
    """
    log.info("Loading configuration …")
    game_cfg = load_game_config(config_path)
    if seed is not None:
        game_cfg.seed = seed
    log.info("  game_config:  %d levels, %d Hz, field %.0fx%.0f (%s)",
             game_cfg.total_levels, game_cfg.tick_rate,
             game_cfg.field_width, game_cfg.field_height, config_path)
    return game_cfg


# ===================================================================
# 2. Create engine services
# ===================================================================


def create_services(game_config: GameConfig) -> Services:
    """Instantiate all engine/network services with proper dependency injection.

    Wiring order matters: services that are injected into others are created first.
    The game loop pushes its updates to every client of the WebSocket server.
    """
    log.info("Creating services …")

    event_bus = EventBus()
    simulation = SimulationService(game_config, event_bus)
    session = GameSession(simulation, seed=game_config.seed)

    router = Router()
    server = Server(router, game_config)
    game_loop = GameLoop(session, game_config, send_fn=server.broadcast_all)

    log.info("  all services created")

    return Services(
        game_config=game_config,
        event_bus=event_bus,
        simulation_service=simulation,
        session=session,
        game_loop=game_loop,
        router=router,
        server=server,
    )


# ===================================================================
# 3. Wire up event handlers
# ===================================================================


def wire_events(services: Services) -> None:
    """Register event handlers on the EventBus.

    Level and structure events are logged here; renderers and audio get
    the same information from the pushed snapshots.
    """
    log.info("Wiring event handlers …")
    bus = services.event_bus

    bus.on(LevelStarted, lambda evt: log.info(
        "[LEVEL] level %d started (%d rockets)", evt.level, evt.rocket_quota))
    bus.on(CityDestroyed, lambda evt: log.info("[CITY] %s destroyed", evt.city_id))
    bus.on(BatteryDestroyed, lambda evt: log.info("[BATTERY] %s destroyed", evt.battery_id))
    bus.on(LevelStatusChanged, lambda evt: log.info(
        "[LEVEL] level %d -> %s (score %d)", evt.level, evt.status, evt.score))

    log.info("  event handlers registered")


# ===================================================================
# 4. Start network server
# ===================================================================


async def start_network(services: Services) -> None:
    """Start the WebSocket server and REST API so clients can connect.

    Message handlers are registered on the router before the server
    begins accepting connections.  The FastAPI REST app is started on
    a separate port via uvicorn.
    """
    log.info("Starting network servers …")

    # Register all message handlers on the router
    register_all_handlers(services)

    await services.server.start()

    # Start REST API (FastAPI + uvicorn)
    from novadefense.network.rest_api import create_app
    import uvicorn

    rest_app = create_app(services)
    rest_port = services.game_config.rest_port
    config = uvicorn.Config(
        rest_app,
        host=services.game_config.ws_host,
        port=rest_port,
        log_level="info",
        access_log=False,
    )
    rest_server = uvicorn.Server(config)
    services.rest_server = rest_server
    # Start as background task (non-blocking)
    asyncio.create_task(rest_server.serve())
    log.info("  REST API listening on http://%s:%d", services.game_config.ws_host, rest_port)


# ===================================================================
# 5. Start game loop
# ===================================================================


async def start_game_loop(services: Services) -> None:
    """Run the fixed-rate game loop until a shutdown signal is received.

    This is the last startup step.  Signal handlers are installed first
    so SIGINT / SIGTERM stop the loop cleanly.
    """
    log.info("Starting game loop …")
    loop = asyncio.get_running_loop()

    # Graceful shutdown on SIGINT / SIGTERM
    def _request_shutdown() -> None:
        log.info("Shutdown signal received — stopping …")
        services.game_loop.stop()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _request_shutdown)

    await services.game_loop.run()

    # --- Cleanup after loop exits ---
    log.info("Shutting down …")
    if services.server is not None:
        await services.server.stop()
    if services.rest_server is not None:
        services.rest_server.should_exit = True
        log.info("  REST API server stopped")
    log.info("  goodbye")


# ===================================================================
# Entry points
# ===================================================================


async def _start(config_path: str = DEFAULT_GAME_CONFIG_PATH, seed: Optional[int] = None) -> None:
    """Initialize and run all server components."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    log.info("=== Nova Defense server starting ===")

    game_config = load_configuration(config_path, seed=seed)
    services = create_services(game_config)
    wire_events(services)
    await start_network(services)

    # Blocks until shutdown
    await start_game_loop(services)


def _arg_value(name: str) -> Optional[str]:
    if name not in sys.argv:
        return None
    idx = sys.argv.index(name)
    if idx + 1 >= len(sys.argv):
        print(f"Error: {name} requires an argument", file=sys.stderr)
        sys.exit(1)
    return sys.argv[idx + 1]


def main() -> None:
    """Entry point for the game server.

    Supports command-line arguments:
        --config <path>  Game configuration YAML (default: config/game.yaml)
        --seed <int>     Master seed for a reproducible game
    """
    config_path = _arg_value("--config") or DEFAULT_GAME_CONFIG_PATH
    seed_arg = _arg_value("--seed")
    seed: Optional[int] = None
    if seed_arg is not None:
        try:
            seed = int(seed_arg)
        except ValueError:
            print(f"Error: --seed must be an integer, got {seed_arg!r}", file=sys.stderr)
            sys.exit(1)

    try:
        asyncio.run(_start(config_path=config_path, seed=seed))
    except ValueError as exc:
        print(f"Error: invalid configuration: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
