from __future__ import annotations

import math

from pygame.math import Vector2


def _safe_normalize_xy(x: float, y: float) -> Vector2:
    magnitude_sq = x * x + y * y
    if magnitude_sq < 1e-10:
        return Vector2()
    inv = 1.0 / math.sqrt(magnitude_sq)
    return Vector2(x * inv, y * inv)


def distance(a: Vector2, b: Vector2) -> float:
    return math.hypot(b.x - a.x, b.y - a.y)


def direction(origin: Vector2, target: Vector2) -> tuple[Vector2, float]:
    """Unit vector from ``origin`` to ``target`` and the distance between them.

    A zero distance means the caller is already at the target; the returned
    direction is then the zero vector.
    """
    dx = target.x - origin.x
    dy = target.y - origin.y
    dist = math.hypot(dx, dy)
    if dist <= 1e-9:
        return Vector2(), 0.0
    return Vector2(dx / dist, dy / dist), dist


def _clamp_value(value: float, min_value: float, max_value: float) -> float:
    return max(min_value, min(max_value, value))


def clamp_to_rect(position: Vector2, width: float, height: float) -> None:
    position.update(_clamp_value(position.x, 0.0, width), _clamp_value(position.y, 0.0, height))
