from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Mapping

from pygame.math import Vector2

from ..core.entities import Worm

if TYPE_CHECKING:
    from ...rng import GameRng
    from ..core.config import GameConfig, WormTypeConfig
    from ..core.state import RoundState

logger = logging.getLogger(__name__)


def pick_worm_type(rng: GameRng, worm_types: Mapping[str, WormTypeConfig]) -> str:
    roll = rng.next_float()
    total = 0.0
    for name, worm_type in worm_types.items():
        total += worm_type.probability
        if roll < total:
            return name
    # Probabilities that sum just short of 1.0 fall through to the last type.
    return next(reversed(worm_types))


def can_spawn(state: RoundState) -> bool:
    return state.active and bool(state.foods) and state.time_remaining > 0


def spawn_worm(state: RoundState, config: GameConfig, rng: GameRng, now_ms: float = 0.0) -> Worm:
    r = config.worm_radius
    x = rng.next_range(r, config.canvas_width - r)
    category = pick_worm_type(rng, config.worm_types)
    speed = config.worm_type(category).speed_for(state.tier)
    worm = state.add_worm(Vector2(x, 0.0), category, speed, now_ms)
    state.spawned += 1
    logger.debug("Spawned worm %d (%s, %.0f px/s) at x=%.1f", worm.id, category, speed, x)
    return worm


def next_spawn_delay(rng: GameRng, config: GameConfig) -> float:
    return rng.next_range(config.spawn.min_delay_ms, config.spawn.max_delay_ms)
