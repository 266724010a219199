"""Message handlers — central registry of all message type handlers.

Each handler is an async function that receives a parsed GameMessage
and the sender UID, and returns an optional response dict.

This module is the single place where handler logic lives. To add
a new message handler:

1. Write the handler function below (grouped by category).
2. Register it in :func:`register_all_handlers` at the bottom.

The handler signature is::

    async def handle_xyz(message: GameMessage, sender_uid: int) -> dict | None:
        ...

Returning a dict sends it back to the sender as a JSON response.
Returning None means no response to the sender (fire-and-forget).
"""

from __future__ import annotations

import logging
from typing import Any, Optional, TYPE_CHECKING, cast

from novadefense.engine.level_config import configure
from novadefense.models.messages import (
    CommandResponse,
    GameMessage,
    LaunchRequest,
    LaunchResponse,
    SessionState,
)
from novadefense.models.status import CommandResult

if TYPE_CHECKING:
    from novadefense.main import Services

log = logging.getLogger(__name__)

# Module-level reference set by register_all_handlers()
_services: Optional[Services] = None


def _svc() -> Services:
    """Get the Services container. Raises if not initialized."""
    assert _services is not None, "handlers: services not initialized"
    return _services


# ===================================================================
# Response builders
# ===================================================================

def _command_response(command: str, result: CommandResult) -> dict[str, Any]:
    """Build a command_response, including the level setup when a level began."""
    svc = _svc()
    setup = None
    session = svc.session
    if result.ok and session.level is not None:
        setup = configure(session.level_index, svc.game_config).to_dict()
        setup["scenery"] = session.level.scenery.to_dict()
    return CommandResponse(
        command=command,
        ok=result.ok,
        status=result.status.value,
        level=result.level,
        reason=result.reason,
        setup=setup,
    ).model_dump()


def build_session_state() -> dict[str, Any]:
    """Current session status plus the latest snapshot."""
    state = _svc().session.to_dict()
    return SessionState(**state).model_dump()


async def push_session_state() -> None:
    """Broadcast the session state to every connected client."""
    server = _svc().server
    if server is not None:
        await server.broadcast_all(build_session_state())


# ===================================================================
# Session commands
# ===================================================================

async def handle_start_game(message: GameMessage, sender_uid: int) -> dict[str, Any]:
    result = _svc().session.start_game()
    log.info("start_game from uid=%d -> %s", sender_uid, result.status.value)
    await push_session_state()
    return _command_response("start_game", result)


async def handle_next_level(message: GameMessage, sender_uid: int) -> dict[str, Any]:
    result = _svc().session.next_level()
    log.info("next_level from uid=%d -> ok=%s level=%d", sender_uid, result.ok, result.level)
    await push_session_state()
    return _command_response("next_level", result)


async def handle_restart(message: GameMessage, sender_uid: int) -> dict[str, Any]:
    result = _svc().session.restart()
    log.info("restart from uid=%d", sender_uid)
    await push_session_state()
    return _command_response("restart", result)


async def handle_end_game(message: GameMessage, sender_uid: int) -> dict[str, Any]:
    result = _svc().session.end_game()
    log.info("end_game from uid=%d", sender_uid)
    await push_session_state()
    return _command_response("end_game", result)


# ===================================================================
# Player input
# ===================================================================

async def handle_launch(message: GameMessage, sender_uid: int) -> dict[str, Any]:
    """Queue an interceptor launch at the pointer position."""
    launch = cast(LaunchRequest, message)
    queued = _svc().session.launch(launch.x, launch.y)
    log.debug("launch from uid=%d at (%.0f, %.0f) queued=%s",
              sender_uid, launch.x, launch.y, queued)
    return LaunchResponse(queued=queued).model_dump()


# ===================================================================
# Queries
# ===================================================================

async def handle_snapshot_request(message: GameMessage, sender_uid: int) -> dict[str, Any]:
    return build_session_state()


# ===================================================================
# Registration
# ===================================================================

def register_all_handlers(services: Services) -> None:
    """Register all message handlers on the router.

    Called once during startup from ``main.py``.
    To add a new handler, add a ``router.register(...)`` line below.

    Args:
        services: Fully initialized Services container.
    """
    global _services
    _services = services

    router = services.router

    # -- Session ---------------------------------------------------------
    router.register("start_game", handle_start_game)
    router.register("next_level", handle_next_level)
    router.register("restart", handle_restart)
    router.register("end_game", handle_end_game)

    # -- Input (queued for the next tick) --------------------------------
    router.register("launch", handle_launch)

    # -- Queries ---------------------------------------------------------
    router.register("snapshot_request", handle_snapshot_request)

    log.info("Registered %d message handlers", len(router.registered_types))
