"""
Tests for Snake.

Tests:
- Start and steering
- Eating, growth and bonus food
- Wall and self collisions
- Wrap-around variant
"""

import pytest

from ..engine_core.action import Action
from ..engine_core.reducer import apply_action
from ..engine_core.state import GamePhase
from ..games import SnakeRules
from ..games.snake import SnakeState, BONUS_DURATION_MS


def make_state(body, velocity=(1, 0), food=(0, 0), **kwargs) -> SnakeState:
    kwargs.setdefault("phase", GamePhase.PLAYING)
    kwargs.setdefault("grid_size", 20)
    return SnakeState(
        game_type="snake",
        body=list(body),
        velocity=velocity,
        food=food,
        **kwargs,
    )


class TestStart:
    """Tests for new games and starting."""

    def test_new_game_is_ready(self, snake_rules, rng):
        state = snake_rules.new_game(rng)

        assert state.phase == GamePhase.READY
        assert state.body == [(10, 10)]
        assert state.food is not None
        assert state.food not in state.body

    def test_tick_before_start_is_rejected(self, snake_rules, rng):
        state = snake_rules.new_game(rng)

        result = apply_action(snake_rules, state, Action.tick(100), rng)

        assert result.rejected
        assert result.new_state.body == state.body

    def test_start(self, snake_rules, rng):
        state = snake_rules.new_game(rng)

        started = apply_action(snake_rules, state, Action.start(), rng)
        again = apply_action(snake_rules, started.new_state, Action.start(), rng)

        assert started.new_state.phase == GamePhase.PLAYING
        assert again.rejected

    def test_options(self):
        rules = SnakeRules(grid_size=10, speed=15)
        assert rules.options == {"grid_size": 10, "speed": 15}

        with pytest.raises(ValueError):
            SnakeRules(speed=50)
        with pytest.raises(ValueError):
            SnakeRules(colour="green")


class TestSteering:
    """Tests for direction changes."""

    def test_move_sets_velocity(self, snake_rules, rng):
        state = make_state([(5, 5)], velocity=(0, 0))

        result = apply_action(snake_rules, state, Action.move("up"), rng)

        assert result.new_state.velocity == (0, -1)

    def test_reversal_rejected_when_long(self, snake_rules, rng):
        state = make_state([(4, 5), (5, 5)], velocity=(1, 0))

        result = apply_action(snake_rules, state, Action.move("left"), rng)

        assert result.rejected
        assert result.new_state.velocity == (1, 0)

    def test_reversal_allowed_for_single_segment(self, snake_rules, rng):
        state = make_state([(5, 5)], velocity=(1, 0))

        result = apply_action(snake_rules, state, Action.move("left"), rng)

        assert not result.rejected
        assert result.new_state.velocity == (-1, 0)

    def test_set_speed(self, snake_rules, rng):
        state = make_state([(5, 5)])

        result = apply_action(snake_rules, state, Action.set_speed(15), rng)
        too_fast = apply_action(snake_rules, state, Action.set_speed(30), rng)

        assert result.new_state.speed == 15
        assert snake_rules.tick_interval_ms(result.new_state) == 1000 // 15
        assert not too_fast.success
        assert too_fast.error_code == "INVALID_ACTION"


class TestTick:
    """Tests for movement, food and collisions."""

    def test_tick_moves_head(self, snake_rules, rng):
        state = make_state([(4, 5), (5, 5)], velocity=(1, 0))

        result = apply_action(snake_rules, state, Action.tick(100), rng)

        assert result.new_state.body == [(5, 5), (6, 5)]
        assert result.new_state.clock_ms == 100

    def test_eating_grows_and_scores(self, snake_rules, rng):
        state = make_state([(5, 5)], velocity=(1, 0), food=(5, 5))

        result = apply_action(snake_rules, state, Action.tick(100), rng)
        new_state = result.new_state

        assert new_state.score == 1
        assert new_state.body == [(5, 5), (6, 5)]
        assert new_state.food is not None
        assert new_state.food != (5, 5)
        assert "Ate food" in result.events

    def test_fifth_point_spawns_bonus(self, snake_rules, rng):
        state = make_state([(5, 5)], velocity=(1, 0), food=(5, 5), score=4)

        result = apply_action(snake_rules, state, Action.tick(100), rng)
        new_state = result.new_state

        assert new_state.score == 5
        assert new_state.bonus_food is not None
        assert new_state.bonus_expires_at == 100 + BONUS_DURATION_MS

    def test_bonus_expires(self, snake_rules, rng):
        state = make_state(
            [(5, 5)], velocity=(1, 0), bonus_food=(1, 1), bonus_expires_at=50,
        )

        result = apply_action(snake_rules, state, Action.tick(100), rng)

        assert result.new_state.bonus_food is None
        assert "Bonus food expired" in result.events

    def test_eating_bonus(self, snake_rules, rng):
        state = make_state(
            [(5, 5)], velocity=(1, 0), bonus_food=(5, 5), bonus_expires_at=3000,
        )

        result = apply_action(snake_rules, state, Action.tick(100), rng)

        assert result.new_state.score == 10
        assert result.new_state.bonus_food is None
        assert result.new_state.length == 2

    def test_wall_ends_classic_game(self, snake_rules, rng):
        state = make_state([(19, 10)], velocity=(1, 0))

        result = apply_action(snake_rules, state, Action.tick(100), rng)

        assert result.new_state.phase == GamePhase.GAME_OVER

    def test_wrap_variant_reenters(self, rng):
        rules = SnakeRules("wrap")
        state = make_state([(19, 10)], velocity=(1, 0))

        result = apply_action(rules, state, Action.tick(100), rng)

        assert result.new_state.phase == GamePhase.PLAYING
        assert result.new_state.head == (0, 10)

    def test_self_collision(self, snake_rules, rng):
        body = [(4, 5), (5, 5), (6, 5), (6, 6), (5, 6)]
        state = make_state(body, velocity=(0, -1))

        result = apply_action(snake_rules, state, Action.tick(100), rng)

        assert result.new_state.phase == GamePhase.GAME_OVER

    def test_following_the_tail_is_safe(self, snake_rules, rng):
        body = [(5, 5), (6, 5), (6, 6), (5, 6)]
        state = make_state(body, velocity=(0, -1))

        result = apply_action(snake_rules, state, Action.tick(100), rng)

        assert result.new_state.phase == GamePhase.PLAYING
        assert result.new_state.head == (5, 5)

    def test_filling_the_board_wins(self, rng):
        rules = SnakeRules(grid_size=5)
        # Boustrophedon path over the whole 5x5 board
        body = []
        for y in range(5):
            xs = range(5) if y % 2 == 0 else range(4, -1, -1)
            body.extend((x, y) for x in xs)
        state = make_state(body, velocity=(1, 0), food=body[-1], grid_size=5)

        result = apply_action(rules, state, Action.tick(100), rng)

        assert result.new_state.phase == GamePhase.WON
        assert result.new_state.food is None

    def test_high_score_keys(self, snake_rules):
        assert snake_rules.high_score_key() == "snake-highscore"
        assert SnakeRules("wrap").high_score_key() == "snake-wrap-highscore"
