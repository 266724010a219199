"""Status and result records returned by the engine.

Unproductive commands are reported through these values, never through
exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class GameStatus(Enum):
    """Overall game / level status."""

    START = "START"
    PLAYING = "PLAYING"
    WON = "WON"
    LOST = "LOST"
    LEVEL_COMPLETE = "LEVEL_COMPLETE"

    @property
    def is_terminal(self) -> bool:
        """True for statuses that end a level."""
        return self in (GameStatus.WON, GameStatus.LOST, GameStatus.LEVEL_COMPLETE)


class KillCause(Enum):
    """Which collision path destroyed a rocket."""

    IMPACT = "impact"
    INTERCEPT = "intercept"
    BLAST = "blast"


@dataclass(frozen=True)
class StatusTransition:
    """A level reached a terminal status during a tick."""

    level: int
    previous: GameStatus
    status: GameStatus
    score: int
    tick: int


@dataclass(frozen=True)
class LaunchResult:
    """Outcome of a launch command.

    Attributes:
        ok: True if an interceptor was created.
        battery_id: Launching battery (None on a no-op).
        interceptor_id: ID of the new interceptor (None on a no-op).
        reason: Why nothing happened (empty on success).
    """

    ok: bool
    battery_id: Optional[str] = None
    interceptor_id: Optional[str] = None
    reason: str = ""

    @classmethod
    def noop(cls, reason: str) -> LaunchResult:
        return cls(ok=False, reason=reason)

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "battery_id": self.battery_id,
            "interceptor_id": self.interceptor_id,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a session command (start, next level, restart, end)."""

    ok: bool
    status: GameStatus
    level: int
    reason: str = ""

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "status": self.status.value,
            "level": self.level,
            "reason": self.reason,
        }
