from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, List

from pygame.math import Vector2

from ..core.entities import Food, Tier, Worm
from ..utils.math2d import distance

if TYPE_CHECKING:
    from ..core.config import GameConfig
    from ..core.state import RoundState

logger = logging.getLogger(__name__)


def consume_food(state: RoundState, food: Food, config: GameConfig) -> bool:
    if state.foods.pop(food.id, None) is None:
        return False
    state.score -= config.food_type(food.kind).penalty
    state.eaten += 1
    return True


def kill_at(state: RoundState, point: Vector2, config: GameConfig) -> List[Worm]:
    killed: List[Worm] = []
    for worm in state.worms:
        if worm.fading:
            continue
        if distance(point, worm.position) <= config.kill_radius:
            worm.begin_fade()
            state.score += config.worm_type(worm.category).score
            state.killed += 1
            killed.append(worm)
    return killed


def is_won(state: RoundState) -> bool:
    return not state.foods


def is_finished(state: RoundState) -> bool:
    return not state.foods or state.time_remaining <= 0


def update_high_score(high_scores: Dict[str, int], tier: Tier, score: int) -> bool:
    previous = int(high_scores.get(tier.value, 0))
    if score <= previous:
        return False
    high_scores[tier.value] = score
    logger.info("New high score for %s: %d (was %d)", tier.value, score, previous)
    return True
