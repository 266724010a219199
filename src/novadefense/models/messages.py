"""Network message models.

Typed Pydantic models for all client ↔ server messages.
Each message type gets its own model with validation.
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel


# -- Base ----------------------------------------------------------------

class GameMessage(BaseModel):
    """Base class for all game messages."""

    type: str
    sender: int = 0
    receiver: int = 0


# -- Session commands ----------------------------------------------------

class StartGameRequest(GameMessage):
    type: Literal["start_game"] = "start_game"


class NextLevelRequest(GameMessage):
    type: Literal["next_level"] = "next_level"


class RestartRequest(GameMessage):
    type: Literal["restart"] = "restart"


class EndGameRequest(GameMessage):
    type: Literal["end_game"] = "end_game"


class CommandResponse(GameMessage):
    type: Literal["command_response"] = "command_response"
    command: str
    ok: bool
    status: str
    level: int
    reason: str = ""
    setup: Optional[dict[str, Any]] = None


# -- Player input --------------------------------------------------------

class LaunchRequest(GameMessage):
    """Pointer press at (x, y) in field coordinates."""

    type: Literal["launch"] = "launch"
    x: float
    y: float


class LaunchResponse(GameMessage):
    type: Literal["launch_response"] = "launch_response"
    queued: bool


# -- Level state ---------------------------------------------------------

class SnapshotRequest(GameMessage):
    type: Literal["snapshot_request"] = "snapshot_request"


class LevelUpdate(GameMessage):
    """Snapshot pushed to renderers (fields of LevelSnapshot.to_dict())."""

    type: Literal["level_update"] = "level_update"
    level: int
    status: str
    tick: int
    score: int
    rockets_remaining: int
    time_remaining: float
    time_left: int
    rockets: list[dict[str, Any]] = []
    interceptors: list[dict[str, Any]] = []
    explosions: list[dict[str, Any]] = []
    batteries: list[dict[str, Any]] = []
    cities: list[dict[str, Any]] = []


class LevelStatus(GameMessage):
    type: Literal["level_status"] = "level_status"
    level: int
    status: str
    score: int


class SessionState(GameMessage):
    type: Literal["session_state"] = "session_state"
    status: str
    level: int
    score: int
    snapshot: Optional[dict[str, Any]] = None


# -- Registry ------------------------------------------------------------

MESSAGE_TYPES: dict[str, type[GameMessage]] = {
    # Session
    "start_game": StartGameRequest,
    "next_level": NextLevelRequest,
    "restart": RestartRequest,
    "end_game": EndGameRequest,
    "command_response": CommandResponse,
    # Input
    "launch": LaunchRequest,
    "launch_response": LaunchResponse,
    # Level
    "snapshot_request": SnapshotRequest,
    "level_update": LevelUpdate,
    "level_status": LevelStatus,
    "session_state": SessionState,
}


def parse_message(data: dict[str, Any]) -> GameMessage:
    """Parse a raw dict into the appropriate typed message model."""
    msg_type = data.get("type", "")
    model_cls = MESSAGE_TYPES.get(msg_type, GameMessage)
    return model_cls.model_validate(data)
