"""Game session — the level-to-level flow of one game.

    START --start_game--> PLAYING --(tick)--> LEVEL_COMPLETE --next_level--> PLAYING
                                     \\-----> LOST ---restart--> PLAYING
                                      \\----> WON  (final level completed)
    any --end_game--> START

The score is cumulative: each new level starts with the score the
previous one ended with.  Commands that make no sense for the current
status return a failed ``CommandResult`` instead of raising.
"""

from __future__ import annotations

import logging
import random
from typing import Optional

from novadefense.engine.simulation_service import SimulationService
from novadefense.models.level import LevelState
from novadefense.models.snapshot import LevelSnapshot
from novadefense.models.status import CommandResult, GameStatus, StatusTransition

log = logging.getLogger(__name__)


class GameSession:
    """One player's game across levels.

    Args:
        service: Simulation service used to build and tick levels.
        seed: Master seed; each level gets its own seed drawn from it so
              a whole game replays identically. None means unseeded.
    """

    def __init__(self, service: SimulationService, seed: Optional[int] = None) -> None:
        self._service = service
        self._seeds = random.Random(seed)
        self._seeded = seed is not None
        self.status: GameStatus = GameStatus.START
        self.level_index: int = 1
        self.score: int = 0
        self.level: Optional[LevelState] = None

    # -- Commands ----------------------------------------------------

    def start_game(self) -> CommandResult:
        """Start a new game at level 1 with score 0."""
        if self.status is GameStatus.PLAYING:
            return self._reject("already_playing")
        self._begin(1, score=0)
        return self._accept()

    def restart(self) -> CommandResult:
        """Abandon the current game and start again from level 1."""
        self._begin(1, score=0)
        return self._accept()

    def next_level(self) -> CommandResult:
        """Advance after a completed level, keeping the score."""
        if self.status is not GameStatus.LEVEL_COMPLETE:
            return self._reject("level_not_complete")
        self._begin(self.level_index + 1, score=self.score)
        return self._accept()

    def end_game(self) -> CommandResult:
        """Quit to the menu."""
        self.status = GameStatus.START
        self.level = None
        log.info("Game ended at level %d with score %d", self.level_index, self.score)
        return self._accept()

    def launch(self, x: float, y: float) -> bool:
        """Queue a pointer launch for the next tick."""
        if self.status is not GameStatus.PLAYING or self.level is None:
            return False
        return self._service.queue_launch(self.level, x, y)

    # -- Simulation --------------------------------------------------

    def tick(self, dt_ticks: int = 1) -> Optional[StatusTransition]:
        """Advance the current level; no-op unless PLAYING."""
        if self.status is not GameStatus.PLAYING or self.level is None:
            return None
        transition = self._service.tick(self.level, dt_ticks)
        self.score = self.level.score
        if transition is not None:
            self.status = transition.status
        return transition

    def snapshot(self) -> Optional[LevelSnapshot]:
        if self.level is None:
            return None
        return self._service.snapshot(self.level)

    def to_dict(self) -> dict:
        snap = self.snapshot()
        return {
            "status": self.status.value,
            "level": self.level_index,
            "score": self.score,
            "snapshot": snap.to_dict() if snap is not None else None,
        }

    # -- Internals ---------------------------------------------------

    def _begin(self, level_index: int, score: int) -> None:
        seed = self._seeds.getrandbits(32) if self._seeded else None
        self.level = self._service.new_level(level_index, score=score, seed=seed)
        self.level_index = self.level.level
        self.score = score
        self.status = GameStatus.PLAYING
        log.info("Session playing level %d (score %d)", self.level_index, self.score)

    def _accept(self) -> CommandResult:
        return CommandResult(ok=True, status=self.status, level=self.level_index)

    def _reject(self, reason: str) -> CommandResult:
        log.debug("Session command rejected: %s (status %s)", reason, self.status.value)
        return CommandResult(ok=False, status=self.status, level=self.level_index, reason=reason)
