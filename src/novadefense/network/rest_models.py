"""Pydantic request/response models for the REST API.

These models define the HTTP request bodies and response shapes.
They are intentionally separate from the WebSocket GameMessage models
to keep the REST API clean and self-documenting.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


# ===================================================================
# Health / config
# ===================================================================


class HealthResponse(BaseModel):
    status: str = "ok"
    session_status: str
    level: int
    connections: int = 0
    loop_running: bool = False
    ticks: int = 0
    avg_tick_ms: float = 0.0
    uptime_seconds: float = 0.0


class ConfigResponse(BaseModel):
    total_levels: int
    level_duration_sec: float
    tick_rate: int
    field_width: float
    field_height: float
    points_per_rocket: int
    battery_max_health: int
    explosion_max_radius: float


# ===================================================================
# Levels
# ===================================================================


class LevelSetupResponse(BaseModel):
    level: int
    rocket_quota: int
    total_ammo: int
    batteries: List[Dict[str, Any]]
    cities: List[Dict[str, Any]]


# ===================================================================
# Session
# ===================================================================


class SessionResponse(BaseModel):
    status: str
    level: int
    score: int
    snapshot: Optional[Dict[str, Any]] = None


class CommandResponseBody(BaseModel):
    ok: bool
    status: str
    level: int
    reason: str = ""


class LaunchBody(BaseModel):
    """Pointer press in field coordinates."""

    x: float = Field(..., description="Pointer x in field coordinates")
    y: float = Field(..., description="Pointer y in field coordinates")


class LaunchResponseBody(BaseModel):
    queued: bool
