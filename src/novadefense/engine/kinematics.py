"""Kinematics engine — constant-velocity motion for both projectile classes.

Rockets head straight for their fixed target at their own speed; the
direction is recomputed from the current position every tick.  A rocket
that is within one step of its target is placed on the target instead of
overshooting it; the collision resolver then treats it as an impact.

Interceptors add their launch velocity every tick and never retarget.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from novadefense.models.interceptor import Interceptor
    from novadefense.models.level import LevelState
    from novadefense.models.rocket import Rocket


def move_rocket(rocket: Rocket) -> None:
    dist = rocket.distance_to_target
    if dist <= rocket.speed:
        rocket.position = rocket.target
        return
    direction = rocket.position.direction_to(rocket.target)
    rocket.position = rocket.position + direction.scaled(rocket.speed)


def move_interceptor(interceptor: Interceptor) -> None:
    interceptor.position = interceptor.position + interceptor.velocity


class KinematicsEngine:
    """Advances every live projectile by one tick."""

    def step(self, level: LevelState) -> None:
        for rocket in level.rockets:
            if not rocket.is_destroyed:
                move_rocket(rocket)
        for interceptor in level.interceptors:
            if not interceptor.is_exploded:
                move_interceptor(interceptor)
