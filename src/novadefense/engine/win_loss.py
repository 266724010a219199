"""Win / loss evaluator — terminal conditions checked after every tick.

- every city destroyed                      -> LOST (takes priority)
- quota spawned and no rocket left in play  -> LEVEL_COMPLETE,
                                               or WON on the final level
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from novadefense.models.status import GameStatus

if TYPE_CHECKING:
    from novadefense.models.level import LevelState


class WinLossEvaluator:
    """Read-only check of a level's terminal conditions."""

    def evaluate(self, level: LevelState) -> Optional[GameStatus]:
        if level.all_cities_destroyed:
            return GameStatus.LOST
        if level.rockets_remaining == 0 and not level.rockets:
            return GameStatus.WON if level.is_final_level else GameStatus.LEVEL_COMPLETE
        return None
