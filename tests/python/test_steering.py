from __future__ import annotations

from pygame.math import Vector2
from pytest import approx

from wormrush.sim.core.config import GameConfig, SteeringConfig
from wormrush.sim.core.entities import WormState
from wormrush.sim.core.state import RoundState
from wormrush.sim.systems.steering import facing, find_nearest_food, update_worm


def _state_with_foods(*positions, kind: int = 1) -> RoundState:
    state = RoundState()
    for position in positions:
        state.add_food(Vector2(position), kind)
    return state


def test_worm_reaches_nearest_food_after_one_second():
    config = GameConfig()
    state = _state_with_foods((100, 50), (500, 350), (550, 380))
    worm = state.add_worm(Vector2(0, 0), "RED", speed=100.0)

    for frame in range(9):
        assert update_worm(state, worm, 100.0, frame * 100.0, config)
    assert len(state.foods) == 3
    assert state.score == 0

    update_worm(state, worm, 100.0, 1000.0, config)

    assert len(state.foods) == 2
    assert state.score == -2
    assert worm.target_food_id is None
    assert worm.last_update_ms == 1000.0


def test_kind_two_food_costs_four_points():
    config = GameConfig()
    state = _state_with_foods((20, 0), kind=2)
    worm = state.add_worm(Vector2(0, 0), "BLACK", speed=150.0)

    update_worm(state, worm, 100.0, 100.0, config)

    assert not state.foods
    assert state.score == -4
    assert state.eaten == 1


def test_nearest_food_ties_go_to_first_placed():
    state = _state_with_foods((10, 0), (-10, 0))
    first = next(iter(state.foods.values()))

    assert find_nearest_food(state, Vector2(0, 0)) is first


def test_stale_target_is_reacquired():
    config = GameConfig()
    state = _state_with_foods((300, 300), (50, 0))
    worm = state.add_worm(Vector2(0, 0), "ORANGE", speed=60.0)
    worm.target_food_id = 9999

    update_worm(state, worm, 16.0, 16.0, config)

    nearest = list(state.foods.values())[1]
    assert worm.target_food_id == nearest.id


def test_food_eaten_by_another_worm_redirects_follower():
    config = GameConfig()
    state = _state_with_foods((30, 0), (300, 0))
    leader = state.add_worm(Vector2(20, 0), "BLACK", speed=150.0)
    follower = state.add_worm(Vector2(0, 0), "BLACK", speed=150.0)
    first_food = list(state.foods.values())[0]
    follower.target_food_id = first_food.id

    update_worm(state, leader, 16.0, 16.0, config)
    assert first_food.id not in state.foods

    update_worm(state, follower, 16.0, 16.0, config)
    assert follower.target_food_id == list(state.foods.values())[0].id


def test_step_stops_at_target_instead_of_overshooting():
    config = GameConfig(food_radius=1.0)
    state = _state_with_foods((5, 0))
    worm = state.add_worm(Vector2(0, 0), "BLACK", speed=1000.0)

    update_worm(state, worm, 100.0, 100.0, config)

    assert worm.position == Vector2(5, 0)
    assert not state.foods


def test_obstacle_pushes_worm_away_instead_of_forward():
    config = GameConfig()
    state = _state_with_foods((0, 115))
    state.add_obstacle(Vector2(100, 100), 30.0)
    worm = state.add_worm(Vector2(120, 115), "RED", speed=100.0)

    update_worm(state, worm, 100.0, 100.0, config)

    assert worm.position.x == approx(130.0)
    assert worm.position.y == approx(115.0)


def test_obstacle_avoidance_can_be_disabled():
    config = GameConfig(steering=SteeringConfig(avoid_obstacles=False))
    state = _state_with_foods((0, 115))
    state.add_obstacle(Vector2(100, 100), 30.0)
    worm = state.add_worm(Vector2(120, 115), "RED", speed=100.0)

    update_worm(state, worm, 100.0, 100.0, config)

    assert worm.position.x == approx(110.0)


def test_slower_worm_yields_sideways_to_faster_neighbour():
    config = GameConfig()
    state = _state_with_foods((200, 300))
    slow = state.add_worm(Vector2(200, 100), "ORANGE", speed=60.0)
    state.add_worm(Vector2(210, 100), "BLACK", speed=150.0)

    update_worm(state, slow, 100.0, 100.0, config)

    assert slow.position.x == approx(197.0)
    assert slow.position.y == approx(100.0)


def test_yield_ignores_slower_and_fading_neighbours():
    config = GameConfig()
    state = _state_with_foods((200, 300))
    worm = state.add_worm(Vector2(200, 100), "RED", speed=75.0)
    state.add_worm(Vector2(205, 100), "ORANGE", speed=60.0)
    fading_fast = state.add_worm(Vector2(195, 100), "BLACK", speed=150.0)
    fading_fast.begin_fade()

    update_worm(state, worm, 100.0, 100.0, config)

    assert worm.position.x == approx(200.0)
    assert worm.position.y == approx(107.5)


def test_yield_can_be_disabled():
    config = GameConfig(steering=SteeringConfig(yield_to_faster=False))
    state = _state_with_foods((200, 300))
    slow = state.add_worm(Vector2(200, 100), "ORANGE", speed=60.0)
    state.add_worm(Vector2(210, 100), "BLACK", speed=150.0)

    update_worm(state, slow, 100.0, 100.0, config)

    assert slow.position == Vector2(200, 106)


def test_fading_worm_is_frozen_and_removed_when_transparent():
    config = GameConfig()
    state = _state_with_foods((300, 300))
    worm = state.add_worm(Vector2(50, 50), "RED", speed=75.0)
    worm.begin_fade()

    opacities = []
    alive = True
    while alive:
        alive = update_worm(state, worm, 100.0, 0.0, config)
        opacities.append(worm.opacity)

    assert opacities == approx([0.75, 0.5, 0.25, 0.0])
    assert all(b <= a for a, b in zip(opacities, opacities[1:]))
    assert worm.position == Vector2(50, 50)
    assert worm.state == WormState.FADING_OUT
    assert facing(state, worm) is None


def test_kill_resets_opacity_and_fade_duration_is_configurable():
    config = GameConfig(steering=SteeringConfig(fade_duration_ms=500.0))
    state = _state_with_foods((300, 300))
    worm = state.add_worm(Vector2(50, 50), "RED", speed=75.0)
    worm.opacity = 0.3
    worm.begin_fade()

    assert worm.opacity == 1.0
    assert update_worm(state, worm, 250.0, 250.0, config)
    assert worm.opacity == approx(0.5)


def test_worm_without_food_stays_put_and_in_bounds():
    config = GameConfig()
    state = RoundState()
    worm = state.add_worm(Vector2(700, -20), "RED", speed=75.0)

    assert update_worm(state, worm, 100.0, 100.0, config)

    assert worm.position == Vector2(600, 0)
    assert worm.target_food_id is None
    assert facing(state, worm) is None


def test_facing_points_at_target():
    config = GameConfig()
    state = _state_with_foods((100, 0))
    worm = state.add_worm(Vector2(0, 0), "ORANGE", speed=60.0)

    update_worm(state, worm, 16.0, 16.0, config)

    heading = facing(state, worm)
    assert heading.x == approx(1.0)
    assert heading.y == approx(0.0)
