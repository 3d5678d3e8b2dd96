from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Iterator, Tuple

from pygame.math import Vector2

from ..utils.math2d import distance

if TYPE_CHECKING:
    from ...rng import GameRng
    from ..core.config import GameConfig
    from ..core.state import RoundState

logger = logging.getLogger(__name__)


class LayoutError(RuntimeError):
    """Raised when a food or obstacle cannot be placed within the attempt budget."""


def obstacle_radius(size: float) -> float:
    return size * math.sqrt(2.0) / 2.0


def _placed_bodies(state: RoundState, config: GameConfig) -> Iterator[Tuple[Vector2, float]]:
    for food in state.foods.values():
        yield food.position, config.food_radius
    for obstacle in state.obstacles:
        yield obstacle.center, obstacle_radius(obstacle.size)


def is_clear(state: RoundState, config: GameConfig, center: Vector2, radius: float) -> bool:
    margin = config.layout.clearance_margin
    for other_center, other_radius in _placed_bodies(state, config):
        if distance(center, other_center) < radius + other_radius + margin:
            return False
    return True


def _food_candidate(config: GameConfig, rng: GameRng) -> Vector2:
    r = config.food_radius
    top = config.canvas_height * config.layout.food_top_fraction
    x = rng.next_range(r, config.canvas_width - r)
    y = rng.next_range(top + r, config.canvas_height - r)
    return Vector2(x, y)


def _obstacle_candidate(config: GameConfig, rng: GameRng) -> Vector2:
    size = config.obstacle_size
    return Vector2(
        rng.next_range(0.0, config.canvas_width - size),
        rng.next_range(0.0, config.canvas_height - size),
    )


def place_food(state: RoundState, config: GameConfig, rng: GameRng, kind: int):
    for attempt in range(1, config.layout.max_attempts + 1):
        candidate = _food_candidate(config, rng)
        if is_clear(state, config, candidate, config.food_radius):
            food = state.add_food(candidate, kind)
            logger.debug("Placed food %d (kind %d) at %s after %d attempts", food.id, kind, candidate, attempt)
            return food
    raise LayoutError(
        f"Could not place food of kind {kind} after {config.layout.max_attempts} attempts "
        f"({len(state.foods)} foods, {len(state.obstacles)} obstacles already placed)"
    )


def place_obstacle(state: RoundState, config: GameConfig, rng: GameRng):
    size = config.obstacle_size
    half = Vector2(size / 2.0, size / 2.0)
    for attempt in range(1, config.layout.max_attempts + 1):
        corner = _obstacle_candidate(config, rng)
        if is_clear(state, config, corner + half, obstacle_radius(size)):
            obstacle = state.add_obstacle(corner, size)
            logger.debug("Placed obstacle %d at %s after %d attempts", obstacle.id, corner, attempt)
            return obstacle
    raise LayoutError(
        f"Could not place obstacle after {config.layout.max_attempts} attempts "
        f"({len(state.foods)} foods, {len(state.obstacles)} obstacles already placed)"
    )


def generate_layout(state: RoundState, config: GameConfig, rng: GameRng) -> None:
    for kind, food_type in config.food_types.items():
        low, high = food_type.count_range
        for _ in range(rng.next_int_inclusive(low, high)):
            place_food(state, config, rng, kind)
    low, high = config.layout.obstacle_count_range
    for _ in range(rng.next_int_inclusive(low, high)):
        place_obstacle(state, config, rng)
    logger.info("Layout ready: %d foods, %d obstacles", len(state.foods), len(state.obstacles))
