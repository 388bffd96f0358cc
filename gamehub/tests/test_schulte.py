"""
Tests for the Schulte table.
"""

from ..engine_core.action import Action
from ..engine_core.reducer import apply_action
from ..engine_core.state import GamePhase
from .conftest import FixedRandom


def ordered_game(rules):
    """FixedRandom leaves the numbers in order: 1 2 3 / 4 5 6 / 7 8 9."""
    return rules.new_game(FixedRandom())


class TestSchulte:
    def test_new_game_is_a_permutation(self, schulte_rules, rng):
        state = schulte_rules.new_game(rng)

        assert state.phase == GamePhase.READY
        assert sorted(state.numbers) == list(range(1, 10))
        assert state.found == [False] * 9
        assert state.current_number == 1

    def test_must_start_with_one(self, schulte_rules):
        state = ordered_game(schulte_rules)

        result = apply_action(schulte_rules, state, Action.select(0, 1), FixedRandom())

        assert result.rejected
        assert result.new_state.phase == GamePhase.READY
        assert result.new_state.mistakes == 0

    def test_finding_one_starts_the_clock(self, schulte_rules):
        state = ordered_game(schulte_rules)
        rng = FixedRandom()

        started = apply_action(schulte_rules, state, Action.select(0, 0), rng)
        ticked = apply_action(schulte_rules, started.new_state, Action.tick(10), rng)

        assert started.new_state.phase == GamePhase.PLAYING
        assert started.new_state.current_number == 2
        assert started.new_state.found[0]
        assert ticked.new_state.clock_ms == 10

    def test_clock_waits_for_first_click(self, schulte_rules):
        state = ordered_game(schulte_rules)

        result = apply_action(schulte_rules, state, Action.tick(10), FixedRandom())

        assert result.rejected
        assert result.new_state.clock_ms == 0

    def test_wrong_number_counts_a_mistake(self, schulte_rules):
        rng = FixedRandom()
        state = apply_action(
            schulte_rules, ordered_game(schulte_rules), Action.select(0, 0), rng,
        ).new_state

        result = apply_action(schulte_rules, state, Action.select(2, 2), rng)

        assert result.success
        assert result.rejected
        assert result.new_state.mistakes == 1
        assert result.new_state.current_number == 2
        assert "Looking for 2, not 9" in result.events

    def test_full_run_wins_with_time(self, schulte_rules):
        rng = FixedRandom()
        state = ordered_game(schulte_rules)
        result = None

        for number in range(1, 10):
            row, col = divmod(number - 1, 3)
            result = apply_action(schulte_rules, state, Action.select(row, col), rng)
            state = result.new_state
            if state.phase == GamePhase.PLAYING:
                state = apply_action(schulte_rules, state, Action.tick(250), rng).new_state

        assert state.phase == GamePhase.WON
        assert state.clock_ms == 2000
        assert "Done in 2.00s" in result.events
        assert schulte_rules.high_score_value(state) == 2000

    def test_off_table_click_is_invalid(self, schulte_rules):
        state = ordered_game(schulte_rules)

        result = apply_action(schulte_rules, state, Action.select(3, 0), FixedRandom())

        assert not result.success
        assert result.error_code == "INVALID_ACTION"

    def test_toggle_highlight(self, schulte_rules):
        state = ordered_game(schulte_rules)

        result = apply_action(schulte_rules, state, Action.toggle_highlight(), FixedRandom())

        assert result.new_state.highlight

    def test_high_score_key(self, schulte_rules):
        assert schulte_rules.high_score_key() == "schulte-3-best-ms"
        assert not schulte_rules.higher_is_better
