from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from pygame.math import Vector2

from ..core.entities import Food, Worm
from ..utils.math2d import _safe_normalize_xy, clamp_to_rect, direction, distance
from . import scoring

if TYPE_CHECKING:
    from ..core.config import GameConfig
    from ..core.state import RoundState

logger = logging.getLogger(__name__)


def find_nearest_food(state: RoundState, position: Vector2) -> Optional[Food]:
    nearest: Optional[Food] = None
    nearest_dist = float("inf")
    for food in state.foods.values():
        dist = distance(position, food.position)
        if dist < nearest_dist:
            nearest_dist = dist
            nearest = food
    return nearest


def current_target(state: RoundState, worm: Worm) -> Optional[Food]:
    if worm.target_food_id is None:
        return None
    return state.foods.get(worm.target_food_id)


def facing(state: RoundState, worm: Worm) -> Optional[Vector2]:
    if worm.fading:
        return None
    target = current_target(state, worm)
    if target is None:
        return None
    heading, dist = direction(worm.position, target.position)
    return heading if dist > 0 else None


def avoid_obstacles(state: RoundState, worm: Worm, move_distance: float, config: GameConfig) -> bool:
    blocked = False
    for obstacle in state.obstacles:
        center = obstacle.center
        offset_x = worm.position.x - center.x
        offset_y = worm.position.y - center.y
        if offset_x * offset_x + offset_y * offset_y >= (obstacle.size / 2.0 + config.worm_radius) ** 2:
            continue
        blocked = True
        away = _safe_normalize_xy(offset_x, offset_y)
        worm.position.update(worm.position.x + away.x * move_distance, worm.position.y + away.y * move_distance)
    return blocked


def yield_to_faster(state: RoundState, worm: Worm, move_distance: float, config: GameConfig) -> bool:
    yield_dist = config.worm_radius * 2.0
    for other in state.worms:
        if other is worm or other.fading or other.speed <= worm.speed:
            continue
        if distance(worm.position, other.position) >= yield_dist:
            continue
        nudge = move_distance / 2.0
        worm.position.x += -nudge if worm.position.x < other.position.x else nudge
        return True
    return False


def update_worm(state: RoundState, worm: Worm, elapsed_ms: float, now_ms: float, config: GameConfig) -> bool:
    """Advance one worm by ``elapsed_ms``; returns False once it should be removed."""
    worm.last_update_ms = now_ms
    if worm.fading:
        worm.opacity -= elapsed_ms / config.steering.fade_duration_ms
        if worm.opacity <= 0.0:
            worm.opacity = 0.0
            return False
        return True

    target = current_target(state, worm)
    if target is None:
        target = find_nearest_food(state, worm.position)
        worm.target_food_id = None if target is None else target.id

    if target is not None:
        heading, dist = direction(worm.position, target.position)
        move_distance = worm.speed * elapsed_ms / 1000.0

        blocked = config.steering.avoid_obstacles and avoid_obstacles(state, worm, move_distance, config)
        if not blocked and dist > 0:
            yielded = config.steering.yield_to_faster and yield_to_faster(state, worm, move_distance, config)
            if not yielded:
                step = min(move_distance, dist)
                worm.position.update(worm.position.x + heading.x * step, worm.position.y + heading.y * step)

        if distance(worm.position, target.position) < config.food_radius:
            scoring.consume_food(state, target, config)
            worm.target_food_id = None
            logger.debug("Worm %d ate food %d (kind %d)", worm.id, target.id, target.kind)

    clamp_to_rect(worm.position, config.canvas_width, config.canvas_height)
    return True
