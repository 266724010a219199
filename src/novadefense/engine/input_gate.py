"""Input gate — turns player pointer actions into launch commands.

Pointer actions may arrive at any time (network handlers, REST calls),
but the level may only be mutated by the tick loop.  The gate therefore
queues commands on the level and the simulation drains them at spawn
time, before kinematics, so a launch never interleaves with collision
resolution.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from novadefense.models.level import LaunchCommand
from novadefense.models.point import Point
from novadefense.models.status import LaunchResult

if TYPE_CHECKING:
    from novadefense.models.level import LevelState

log = logging.getLogger(__name__)

MAX_PENDING_LAUNCHES = 64


class InputGate:
    """Queue of launch commands for one level at a time."""

    def pointer(self, level: LevelState, x: float, y: float) -> bool:
        """Queue a launch for a pointer press at (x, y).

        The pressed point is both the commanded origin (used to choose the
        nearest battery) and the target.  Returns False if the command was
        dropped because the level is over or the queue is full.
        """
        point = Point(float(x), float(y))
        return self.submit(level, LaunchCommand(origin=point, target=point))

    def submit(self, level: LevelState, command: LaunchCommand) -> bool:
        if level.is_over:
            return False
        if len(level.pending_launches) >= MAX_PENDING_LAUNCHES:
            log.warning("[LAUNCH] Queue full at level %d — dropping command", level.level)
            return False
        level.pending_launches.append(command)
        return True

    def drain(
        self,
        level: LevelState,
        launch: Callable[[LevelState, Point, Point], LaunchResult],
    ) -> list[LaunchResult]:
        """Apply every queued command in arrival order."""
        results: list[LaunchResult] = []
        while level.pending_launches:
            command = level.pending_launches.popleft()
            results.append(launch(level, command.target, command.origin))
        return results
