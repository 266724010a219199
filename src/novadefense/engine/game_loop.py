"""Main game loop — asyncio-based fixed-rate tick.

Responsibilities:
- Tick the session's current level at ``tick_rate`` Hz while PLAYING
- Push a ``level_update`` snapshot every ``broadcast_interval_ticks``
- Push a ``level_status`` message when a level reaches a terminal status

Each tick runs to completion before the loop sleeps again; nothing else
mutates the level in between (launch commands are queued and drained by
the tick itself).
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional

from novadefense.models.status import GameStatus

if TYPE_CHECKING:
    from novadefense.engine.game_session import GameSession
    from novadefense.loaders.game_config_loader import GameConfig

log = logging.getLogger(__name__)

# Async callable pushing one message to every connected client.
SendFn = Callable[[dict[str, Any]], Awaitable[Any]]


class GameLoop:
    """The central fixed-rate simulation loop.

    Args:
        session: The game session to drive.
        game_config: Tick rate and broadcast interval.
        send_fn: Async callable used to push messages to clients.
    """

    def __init__(
        self,
        session: GameSession,
        game_config: GameConfig,
        send_fn: Optional[SendFn] = None,
    ) -> None:
        self._session = session
        self._send = send_fn
        self._running = False
        self._step_interval = 1.0 / game_config.tick_rate
        self._broadcast_every = max(1, game_config.broadcast_interval_ticks)

        # --- Debug / monitoring counters ---
        self.tick_count: int = 0
        self.started_at: float = 0.0
        self.avg_tick_duration_ms: float = 0.0
        self._tick_duration_sum: float = 0.0

    async def run(self) -> None:
        """Start the game loop. Runs until stop() is called."""
        self._running = True
        self.started_at = time.monotonic()
        log.info("Game loop running (%.1f ms tick)", self._step_interval * 1000)
        while self._running:
            t0 = time.monotonic()
            ticked = await self.step()
            elapsed = time.monotonic() - t0
            if ticked:
                self._record_tick_duration(elapsed)

            await asyncio.sleep(max(0.0, self._step_interval - elapsed))

    def _record_tick_duration(self, elapsed: float) -> None:
        self._tick_duration_sum += elapsed * 1000
        self.avg_tick_duration_ms = self._tick_duration_sum / max(1, self.tick_count)

    @property
    def uptime_seconds(self) -> float:
        """Seconds since the loop started."""
        if self.started_at == 0.0:
            return 0.0
        return time.monotonic() - self.started_at

    @property
    def is_running(self) -> bool:
        return self._running

    def stop(self) -> None:
        """Signal the game loop to stop."""
        self._running = False

    async def step(self) -> bool:
        """One tick of the game loop. Returns False when idle (not PLAYING)."""
        session = self._session
        if session.status is not GameStatus.PLAYING:
            return False

        transition = session.tick()
        self.tick_count += 1

        if self._send is None:
            return True

        if transition is not None or self.tick_count % self._broadcast_every == 0:
            snap = session.snapshot()
            if snap is not None:
                await self._send({"type": "level_update", **snap.to_dict()})

        if transition is not None:
            await self._send({
                "type": "level_status",
                "level": transition.level,
                "status": transition.status.value,
                "score": transition.score,
            })
        return True
