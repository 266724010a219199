"""Simulation clock — level time measured in ticks.

Time only advances when the tick loop runs, so a level replays exactly
under a fixed seed regardless of how fast the host redraws.  The
countdown is advisory: it shapes the spawn curve and the displayed
clock but never ends a level by itself.
"""

from __future__ import annotations


class SimulationClock:
    """Elapsed and remaining time within one level.

    Args:
        level_duration_sec: Nominal length of the level.
        tick_rate: Ticks per simulated second.
    """

    def __init__(self, level_duration_sec: float, tick_rate: int) -> None:
        self.level_duration_sec = level_duration_sec
        self.tick_rate = tick_rate
        self.ticks: int = 0

    def advance(self, ticks: int = 1) -> None:
        self.ticks += ticks

    @property
    def elapsed(self) -> float:
        """Seconds since the level started."""
        return self.ticks / self.tick_rate

    @property
    def remaining(self) -> float:
        """Seconds left on the countdown, never negative."""
        return max(0.0, self.level_duration_sec - self.elapsed)

    @property
    def progress(self) -> float:
        """Fraction of the level duration elapsed, clamped to [0, 1]."""
        return min(1.0, self.elapsed / self.level_duration_sec)

    @property
    def is_expired(self) -> bool:
        return self.remaining <= 0

    def __repr__(self) -> str:
        return f"SimulationClock(t={self.elapsed:.2f}s, left={self.remaining:.2f}s)"
