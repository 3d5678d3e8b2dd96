from __future__ import annotations

from collections import deque

from pygame.math import Vector2

from wormrush.rng import GameRng
from wormrush.sim.core.config import GameConfig, WormTypeConfig
from wormrush.sim.core.entities import Tier
from wormrush.sim.core.state import RoundState
from wormrush.sim.systems.spawner import can_spawn, next_spawn_delay, pick_worm_type, spawn_worm


class ScriptedRng(GameRng):
    def __init__(self, floats):
        super().__init__(0)
        self._floats = deque(floats)

    def next_float(self) -> float:
        return self._floats.popleft()


def test_weighted_draw_uses_cumulative_probability():
    worm_types = GameConfig().worm_types
    rng = ScriptedRng([0.0, 0.29, 0.3, 0.59, 0.65, 0.99])

    picks = [pick_worm_type(rng, worm_types) for _ in range(6)]

    assert picks == ["BLACK", "BLACK", "RED", "RED", "ORANGE", "ORANGE"]


def test_weighted_draw_falls_back_to_last_type():
    worm_types = {
        "A": WormTypeConfig(probability=0.3),
        "B": WormTypeConfig(probability=0.3),
        "C": WormTypeConfig(probability=0.3),
    }

    assert pick_worm_type(ScriptedRng([0.95]), worm_types) == "C"


def test_spawned_worm_starts_on_top_edge_with_tier_speed():
    config = GameConfig()
    state = RoundState(tier=Tier.TIER2, running=True)
    rng = GameRng(5)

    worms = [spawn_worm(state, config, rng, now_ms=1000.0) for _ in range(30)]

    assert state.spawned == 30
    assert state.worms == worms
    for worm in worms:
        assert worm.position.y == 0.0
        assert config.worm_radius <= worm.position.x <= config.canvas_width - config.worm_radius
        assert worm.speed == config.worm_type(worm.category).speed_for(Tier.TIER2)
        assert worm.last_update_ms == 1000.0
        assert not worm.fading


def test_spawn_delay_stays_within_bounds():
    config = GameConfig()
    rng = GameRng(8)

    delays = [next_spawn_delay(rng, config) for _ in range(200)]

    assert all(config.spawn.min_delay_ms <= delay <= config.spawn.max_delay_ms for delay in delays)


def test_spawning_requires_an_active_round_with_food_and_time():
    state = RoundState(running=True)
    assert not can_spawn(state)

    state.add_food(Vector2(100, 200), 1)
    assert can_spawn(state)

    state.paused = True
    assert not can_spawn(state)
    state.paused = False

    state.time_remaining = 0
    assert not can_spawn(state)
