"""Typed event bus — decoupled notification of simulation events.

The engine emits these events while it resolves a tick; presentation
collaborators (audio cues, HUD refresh, logging) subscribe to them.
Handlers run synchronously inside the tick and must not mutate the level.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, TypeVar, Type

T = TypeVar("T")


# -- Projectile events ---------------------------------------------------

@dataclass(frozen=True)
class RocketSpawned:
    """A rocket entered the field."""
    rocket_id: str
    target_x: float
    target_y: float


@dataclass(frozen=True)
class RocketImpacted:
    """A rocket reached its target point."""
    rocket_id: str
    x: float
    y: float


@dataclass(frozen=True)
class RocketDestroyed:
    """A rocket was removed by one of the kill paths."""
    rocket_id: str
    cause: str  # "impact", "intercept" or "blast"
    points: int


@dataclass(frozen=True)
class InterceptorLaunched:
    """A battery fired an interceptor."""
    interceptor_id: str
    battery_id: str
    ammo_left: int


@dataclass(frozen=True)
class ExplosionSpawned:
    """An explosion started (the audio cue)."""
    explosion_id: str
    x: float
    y: float
    enlarged: bool


# -- Structure events ----------------------------------------------------

@dataclass(frozen=True)
class CityDestroyed:
    """A city was hit."""
    city_id: str


@dataclass(frozen=True)
class BatteryDamaged:
    """A battery lost one point of health."""
    battery_id: str
    health: int


@dataclass(frozen=True)
class BatteryDestroyed:
    """A battery's health reached 0."""
    battery_id: str


# -- Level events --------------------------------------------------------

@dataclass(frozen=True)
class LevelStarted:
    """A new level was set up."""
    level: int
    rocket_quota: int


@dataclass(frozen=True)
class LevelStatusChanged:
    """A level reached a terminal status."""
    level: int
    status: str
    score: int


# -- Event Bus -----------------------------------------------------------

class EventBus:
    """Simple synchronous event bus with typed events.

    Usage:
        bus = EventBus()
        bus.on(CityDestroyed, lambda e: print(e.city_id))
        bus.emit(CityDestroyed(city_id="city-3"))
    """

    def __init__(self) -> None:
        self._handlers: dict[type, list[Callable[[Any], None]]] = defaultdict(list)

    def on(self, event_type: Type[T], handler: Callable[[T], None]) -> None:
        """Register a handler for an event type."""
        self._handlers[event_type].append(handler)

    def off(self, event_type: Type[T], handler: Callable[[T], None]) -> None:
        """Unregister a handler."""
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: object) -> None:
        """Emit an event to all registered handlers."""
        for handler in self._handlers.get(type(event), []):
            handler(event)

    def clear(self) -> None:
        """Remove all handlers."""
        self._handlers.clear()
