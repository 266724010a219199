"""Game configuration — loads tunable constants from config/game.yaml.

Provides a single ``GameConfig`` dataclass that is loaded once at startup
and then passed (or injected) wherever constants are needed.  The engine
never reads module-level constants; every number below reaches it
through this object.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

log = logging.getLogger(__name__)

DEFAULT_GAME_CONFIG_PATH = "config/game.yaml"


@dataclass
class GameConfig:
    """All tunable gameplay constants.

    Loaded from ``config/game.yaml``.  Every field has a sensible default
    so the server can start even without the file.
    """

    # -- Levels ------------------------------------------------------
    total_levels: int = 100
    level_duration_sec: float = 60.0
    level_1_rockets: int = 50
    level_n_rockets: int = 200
    ammo_multiplier: float = 3.0
    side_ammo_share: float = 0.25

    # -- Timing ------------------------------------------------------
    tick_rate: int = 60  # ticks per second
    broadcast_interval_ticks: int = 2

    # -- Rockets -----------------------------------------------------
    rocket_speed_min: float = 0.5
    rocket_speed_max: float = 1.5
    rocket_base_radius: float = 12.0

    # -- Interceptors ------------------------------------------------
    interceptor_speed: float = 4.5
    intercept_radius_factor: float = 3.0
    muzzle_height: float = 30.0
    offscreen_margin: float = 50.0

    # -- Explosions --------------------------------------------------
    explosion_initial_radius: float = 2.0
    explosion_max_radius: float = 40.0
    explosion_growth_rate: float = 1.5
    explosion_shrink_factor: float = 0.5
    collision_explosion_multiplier: float = 3.0
    collision_growth_multiplier: float = 2.0

    # -- Defended structures -----------------------------------------
    battery_max_health: int = 3
    battery_hit_tolerance: float = 20.0
    city_hit_tolerance: float = 15.0
    city_count: int = 6

    # -- Scoring -----------------------------------------------------
    points_per_rocket: int = 20

    # -- Field geometry ----------------------------------------------
    field_width: float = 1280.0
    field_height: float = 720.0
    battery_edge_offset: float = 80.0
    battery_ground_offset: float = 40.0
    city_ground_offset: float = 20.0
    city_margin: float = 150.0
    star_count: int = 100
    silhouette_count: int = 20

    # -- Randomness --------------------------------------------------
    seed: Optional[int] = None

    # -- Network -----------------------------------------------------
    ws_host: str = "0.0.0.0"
    ws_port: int = 8765
    rest_port: int = 8080
    ws_ping_interval: int = 30
    ws_ping_timeout: int = 10
    ws_max_message_size: int = 1_048_576

    def validate(self) -> list[str]:
        """Return a list of problems with the configured values (empty if OK)."""
        problems: list[str] = []
        if self.total_levels < 1:
            problems.append("total_levels must be >= 1")
        if self.level_duration_sec <= 0:
            problems.append("level_duration_sec must be > 0")
        if self.tick_rate <= 0:
            problems.append("tick_rate must be > 0")
        if self.level_1_rockets < 0 or self.level_n_rockets < 0:
            problems.append("rocket counts must be >= 0")
        if self.level_n_rockets < self.level_1_rockets:
            problems.append("level_n_rockets must be >= level_1_rockets")
        if self.rocket_speed_min <= 0:
            problems.append("rocket_speed_min must be > 0")
        if self.rocket_speed_max < self.rocket_speed_min:
            problems.append("rocket_speed_max must be >= rocket_speed_min")
        if self.interceptor_speed <= 0:
            problems.append("interceptor_speed must be > 0")
        if self.battery_max_health < 1:
            problems.append("battery_max_health must be >= 1")
        if not 0.0 <= self.side_ammo_share <= 0.5:
            problems.append("side_ammo_share must be within [0, 0.5]")
        if self.explosion_growth_rate <= 0 or self.explosion_shrink_factor <= 0:
            problems.append("explosion growth rate and shrink factor must be > 0")
        if self.explosion_max_radius < self.explosion_initial_radius:
            problems.append("explosion_max_radius must be >= explosion_initial_radius")
        if self.city_count < 1:
            problems.append("city_count must be >= 1")
        if self.field_width <= 2 * self.city_margin:
            problems.append("field_width must exceed twice the city margin")
        if self.broadcast_interval_ticks < 1:
            problems.append("broadcast_interval_ticks must be >= 1")
        return problems


def load_game_config(path: str = DEFAULT_GAME_CONFIG_PATH) -> GameConfig:
    """Load game configuration from a YAML file.

    Missing keys fall back to dataclass defaults.  If the file does not
    exist, a warning is logged and pure defaults are returned.

    Raises:
        ValueError: If the loaded values fail :meth:`GameConfig.validate`.
    """
    p = Path(path)
    if not p.exists():
        log.warning("Game config not found at %s — using defaults", p)
        return GameConfig()

    with p.open() as f:
        raw = yaml.safe_load(f) or {}

    log.info("Loaded game config from %s (%d keys)", p, len(raw))

    unknown = sorted(k for k in raw if k not in GameConfig.__dataclass_fields__)
    for key in unknown:
        log.warning("Ignoring unknown game config key: %s", key)

    cfg = GameConfig(**{
        k: v for k, v in raw.items()
        if k in GameConfig.__dataclass_fields__
    })

    problems = cfg.validate()
    for problem in problems:
        log.error("Invalid game config: %s", problem)
    if problems:
        raise ValueError(f"Invalid game config at {p}: {'; '.join(problems)}")
    return cfg
