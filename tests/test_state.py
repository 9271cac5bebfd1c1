import random

import pytest

from snake_frame.config import GameConfig
from snake_frame.models import BoundaryPolicy, CollisionCause, Direction, FoodMotion, FoodPolicy
from snake_frame.state import GameState


def _state(**overrides) -> GameState:  # type: ignore[no-untyped-def]
    return GameState(GameConfig(**overrides), random.Random(1))


def _place(state: GameState, snake, direction: Direction = Direction.RIGHT, food=(0, 0)) -> None:  # type: ignore[no-untyped-def]
    state.snake = list(snake)
    state.direction = direction
    state.pending_direction = direction
    state.food = food


def test_new_game_starts_in_the_center() -> None:
    state = _state(grid_size=20)

    assert state.snake == [(10, 10)]
    assert state.direction == Direction.RIGHT
    assert state.pending_direction == Direction.RIGHT
    assert state.score == 0
    assert state.tick_interval_ms == 200
    assert state.game_over is False
    assert state.food not in state.snake


def test_wrap_tick_moves_head_right() -> None:
    state = _state(grid_size=10, boundary_policy=BoundaryPolicy.WRAP)
    _place(state, [(5, 5)])

    outcome = state.tick()

    assert outcome.moved is True
    assert state.snake == [(6, 5)]


def test_wrap_tick_crosses_the_edge() -> None:
    state = _state(grid_size=10, boundary_policy=BoundaryPolicy.WRAP)
    _place(state, [(9, 3)], food=(5, 5))

    state.tick()

    assert state.snake == [(0, 3)]


@pytest.mark.parametrize("size", [2, 3, 10, 20])
@pytest.mark.parametrize("direction", list(Direction))
def test_wrap_keeps_every_segment_on_the_board(size: int, direction: Direction) -> None:
    state = _state(grid_size=size, boundary_policy=BoundaryPolicy.WRAP)
    state.request_direction(direction)

    for _ in range(3 * size):
        state.tick()
        for x, y in state.snake:
            assert 0 <= x < size and 0 <= y < size


def test_lethal_boundary_ends_game_without_moving() -> None:
    state = _state(grid_size=20, boundary_policy=BoundaryPolicy.LETHAL)
    _place(state, [(19, 5), (18, 5)], food=(3, 3))
    state.score = 300

    outcome = state.tick()

    assert outcome.game_over is True
    assert outcome.cause == CollisionCause.BOUNDARY
    assert state.game_over is True
    assert state.snake == [(19, 5), (18, 5)]
    assert state.food == (3, 3)
    assert state.score == 300


def test_self_collision_ends_game() -> None:
    state = _state(grid_size=10)
    _place(state, [(5, 5), (5, 6), (4, 6), (4, 5)], direction=Direction.UP)
    state.request_direction(Direction.LEFT)

    outcome = state.tick()

    assert outcome.cause == CollisionCause.SELF
    assert state.game_over is True
    assert state.snake == [(5, 5), (5, 6), (4, 6), (4, 5)]
    assert state.direction == Direction.UP


def test_slide_keeps_length() -> None:
    state = _state(grid_size=10)
    _place(state, [(5, 5), (4, 5), (3, 5)])

    state.tick()

    assert state.snake == [(6, 5), (5, 5), (4, 5)]
    assert state.score == 0
    assert state.tick_interval_ms == 200


def test_eating_grows_scores_and_speeds_up() -> None:
    state = _state(grid_size=20)
    _place(state, [(5, 5), (4, 5)], food=(6, 5))

    outcome = state.tick()

    assert outcome.ate is True
    assert state.snake == [(6, 5), (5, 5), (4, 5)]
    assert state.score == 100
    assert state.tick_interval_ms == max(50, 200 * 0.95)
    assert state.food not in state.snake


def test_speed_never_drops_below_floor() -> None:
    state = _state(grid_size=20, decay_factor=0.90)
    _place(state, [(5, 5)], food=(6, 5))
    state.tick_interval_ms = 52

    state.tick()

    assert state.tick_interval_ms == 50


def test_interval_decays_multiplicatively_over_several_meals() -> None:
    state = _state(grid_size=20, decay_factor=0.90, initial_interval_ms=300)
    expected = 300.0

    for x in range(1, 6):
        _place(state, list(state.snake), food=(state.snake[0][0] + 1, state.snake[0][1]))
        state.tick()
        expected = max(50, expected * 0.90)
        assert state.tick_interval_ms == expected
        assert state.score == 100 * x


def test_opposite_request_is_ignored() -> None:
    state = _state()

    accepted = state.request_direction(Direction.LEFT)

    assert accepted is False
    assert state.pending_direction == Direction.RIGHT


def test_last_accepted_request_wins() -> None:
    state = _state()

    state.request_direction(Direction.UP)
    state.request_direction(Direction.DOWN)

    assert state.pending_direction == Direction.DOWN


def test_reverse_into_neck_is_not_applied() -> None:
    state = _state(grid_size=10)
    _place(state, [(5, 5), (4, 5)])

    state.request_direction(Direction.LEFT)
    outcome = state.tick()

    assert outcome.game_over is False
    assert state.snake == [(6, 5), (5, 5)]


def test_ticks_and_requests_are_noops_after_game_over() -> None:
    state = _state(grid_size=10)
    _place(state, [(9, 5)])
    state.tick()
    frozen = state.snapshot()

    assert state.request_direction(Direction.UP) is False
    outcome = state.tick()

    assert outcome.moved is False
    assert state.snapshot() == frozen


def test_filling_the_board_is_a_win() -> None:
    state = _state(grid_size=2)
    _place(state, [(0, 0), (0, 1), (1, 1)], food=(1, 0))

    outcome = state.tick()

    assert outcome.won is True
    assert state.game_over is True
    assert state.won is True
    assert state.score == 100
    assert len(state.snake) == 4


def test_non_avoiding_policy_may_place_food_on_the_snake() -> None:
    state = GameState(GameConfig(grid_size=2, food_policy=FoodPolicy.NO_AVOID_ON_EAT), random.Random(5))
    _place(state, [(0, 0), (0, 1), (1, 1)], food=(1, 0))

    outcome = state.tick()

    # With a full board there is nowhere else to go.
    assert outcome.game_over is False
    assert state.food in state.snake


def test_reset_restores_initial_values() -> None:
    state = _state(grid_size=20)
    _place(state, [(5, 5)], food=(6, 5))
    state.tick()
    _place(state, [(19, 0), (18, 0)])
    state.tick()
    assert state.game_over is True

    state.reset()

    assert state.snake == [(10, 10)]
    assert state.score == 0
    assert state.tick_interval_ms == 200
    assert state.game_over is False
    assert state.won is False
    assert state.direction == Direction.RIGHT
    assert state.food not in state.snake


def test_reset_uses_configured_start() -> None:
    state = _state(grid_size=10, start=(2, 3))

    assert state.snake == [(2, 3)]


def test_move_food_only_walks_under_random_walk_motion() -> None:
    static = _state(grid_size=10)
    static.food = (4, 4)
    assert static.move_food() == (4, 4)

    walking = _state(grid_size=10, food_motion=FoodMotion.RANDOM_WALK)
    walking.food = (4, 4)
    moved = walking.move_food()
    assert abs(moved[0] - 4) + abs(moved[1] - 4) == 1


def test_move_food_is_noop_after_game_over() -> None:
    state = _state(grid_size=10, food_motion=FoodMotion.RANDOM_WALK)
    state.food = (4, 4)
    state.game_over = True

    assert state.move_food() == (4, 4)


def test_snapshot_is_detached_from_state() -> None:
    state = _state(grid_size=10)
    snapshot = state.snapshot()

    state.tick()

    assert snapshot.snake == ((5, 5),)
    assert snapshot.head == (5, 5)
    assert snapshot.length == 1
