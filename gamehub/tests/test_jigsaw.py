"""
Tests for the jigsaw puzzles.

Tests:
- Sliding variant: scramble, slides, win
- Slots variant: tray placement, swaps, win
- Timer and best-moves key
"""

from ..engine_core.action import Action
from ..engine_core.reducer import apply_action
from ..engine_core.rng import RandomSource
from ..engine_core.state import GamePhase
from ..games.jigsaw import JigsawState, is_adjacent, is_solved


def sliding_state(slots) -> JigsawState:
    return JigsawState(
        game_type="jigsaw",
        variant="sliding",
        phase=GamePhase.PLAYING,
        difficulty=3,
        slots=list(slots),
        options={"difficulty": 3},
    )


def slots_state(slots, tray) -> JigsawState:
    return JigsawState(
        game_type="jigsaw",
        variant="slots",
        phase=GamePhase.PLAYING,
        difficulty=3,
        slots=list(slots),
        tray=list(tray),
        options={"difficulty": 3},
    )


class TestSliding:
    """Tests for the sliding variant."""

    def test_new_game_is_scrambled(self, sliding_rules, rng):
        state = sliding_rules.new_game(rng)

        assert len(state.slots) == 9
        assert state.slots.count(None) == 1
        assert sorted(p for p in state.slots if p is not None) == list(range(8))
        assert not is_solved(state)

    def test_scramble_is_deterministic(self, sliding_rules):
        a = sliding_rules.new_game(RandomSource(5))
        b = sliding_rules.new_game(RandomSource(5))
        assert a.slots == b.slots

    def test_adjacency(self):
        assert is_adjacent(0, 1, 3)
        assert is_adjacent(1, 4, 3)
        assert not is_adjacent(2, 3, 3)  # Row wrap is not adjacent
        assert not is_adjacent(0, 4, 3)

    def test_slide_into_gap(self, sliding_rules, rng):
        state = sliding_state([0, 1, 2, 3, 4, 5, 6, None, 7])

        result = apply_action(sliding_rules, state, Action.select(1, 1), rng)

        assert result.success
        assert result.new_state.slots[7] == 4
        assert result.new_state.slots[4] is None
        assert result.new_state.moves == 1

    def test_piece_away_from_gap_is_rejected(self, sliding_rules, rng):
        state = sliding_state([0, 1, 2, 3, 4, 5, 6, None, 7])

        result = apply_action(sliding_rules, state, Action.select(0, 0), rng)

        assert result.rejected
        assert result.new_state.slots == state.slots

    def test_last_slide_wins(self, sliding_rules, rng):
        state = sliding_state([0, 1, 2, 3, 4, 5, 6, None, 7])

        result = apply_action(sliding_rules, state, Action.select(2, 2), rng)

        assert result.new_state.phase == GamePhase.WON
        assert sliding_rules.high_score_value(result.new_state) == 1

    def test_place_is_for_slots_only(self, sliding_rules, rng):
        state = sliding_state([0, 1, 2, 3, 4, 5, 6, None, 7])

        result = apply_action(sliding_rules, state, Action.place(7, 2, 1), rng)

        assert not result.success
        assert result.error_code == "UNSUPPORTED_ACTION"

    def test_solved_puzzle_only_accepts_reset(self, sliding_rules, rng):
        state = sliding_state([0, 1, 2, 3, 4, 5, 6, 7, None])
        state.phase = GamePhase.WON

        result = apply_action(sliding_rules, state, Action.select(2, 1), rng)

        assert not result.success
        assert result.error_code == "INVALID_ACTION"


class TestSlots:
    """Tests for the drag-and-drop variant."""

    def test_new_game_has_full_tray(self, slots_rules, rng):
        state = slots_rules.new_game(rng)

        assert state.slots == [None] * 9
        assert sorted(state.tray) == list(range(9))

    def test_place_from_tray(self, slots_rules, rng):
        state = slots_state([None] * 9, [3, 0, 5])

        result = apply_action(slots_rules, state, Action.place(0, 0, 0), rng)

        assert result.new_state.slots[0] == 0
        assert result.new_state.tray == [3, 5]
        assert result.new_state.moves == 1

    def test_place_from_tray_onto_occupied_slot_swaps(self, slots_rules, rng):
        state = slots_state([4] + [None] * 8, [3, 0])

        result = apply_action(slots_rules, state, Action.place(0, 0, 0), rng)

        assert result.new_state.slots[0] == 0
        assert result.new_state.tray == [3, 4]

    def test_move_between_slots_swaps(self, slots_rules, rng):
        state = slots_state([1, 0] + [None] * 7, [])

        result = apply_action(slots_rules, state, Action.place(0, 0, 0), rng)

        assert result.new_state.slots[:2] == [0, 1]

    def test_drop_on_own_slot_is_rejected(self, slots_rules, rng):
        state = slots_state([0] + [None] * 8, [1])

        result = apply_action(slots_rules, state, Action.place(0, 0, 0), rng)

        assert result.rejected
        assert result.new_state.moves == 0

    def test_last_piece_wins(self, slots_rules, rng):
        state = slots_state(list(range(8)) + [None], [8])

        result = apply_action(slots_rules, state, Action.place(8, 2, 2), rng)

        assert result.new_state.phase == GamePhase.WON
        assert result.new_state.tray == []

    def test_unknown_piece_is_invalid(self, slots_rules, rng):
        state = slots_state([None] * 9, [0])

        result = apply_action(slots_rules, state, Action.place(42, 0, 0), rng)

        assert not result.success
        assert result.error_code == "INVALID_ACTION"


class TestTimer:
    def test_tick_advances_clock(self, sliding_rules, rng):
        state = sliding_state([0, 1, 2, 3, 4, 5, 6, None, 7])

        result = apply_action(sliding_rules, state, Action.tick(65000), rng)

        assert result.new_state.elapsed_seconds == 65
        assert result.new_state.elapsed_display == "01:05"

    def test_high_score_key(self, sliding_rules, slots_rules):
        assert sliding_rules.high_score_key() == "jigsaw-sliding-3-best-moves"
        assert slots_rules.high_score_key() == "jigsaw-slots-3-best-moves"
        assert not sliding_rules.higher_is_better

    def test_unfinished_puzzle_has_no_high_score(self, sliding_rules):
        state = sliding_state([0, 1, 2, 3, 4, 5, 6, None, 7])
        assert sliding_rules.high_score_value(state) is None
