"""
Tests for Chain Reaction.

Tests:
- Cell capacities
- Orb placement and turn order
- Explosions, captures and cascades
- Win detection
"""

import pytest

from ..engine_core.action import Action
from ..engine_core.reducer import apply_action
from ..engine_core.state import GamePhase
from ..games import ChainReactionRules
from ..games.chain_reaction import ChainReactionState, cell_capacity


def place(state: ChainReactionState, row: int, col: int, owner: int, orbs: int):
    cell = state.cells[row][col]
    cell.owner = owner
    cell.orbs = orbs


def recount(state: ChainReactionState):
    state.scores = [
        sum(c.orbs for row in state.cells for c in row if c.owner == p + 1)
        for p in range(state.num_players)
    ]


class TestCapacity:
    def test_corners_edges_and_interior(self):
        assert cell_capacity(0, 0, 6) == 2
        assert cell_capacity(5, 5, 6) == 2
        assert cell_capacity(0, 3, 6) == 3
        assert cell_capacity(3, 5, 6) == 3
        assert cell_capacity(2, 3, 6) == 4

    def test_new_game(self, chain_rules, rng):
        state = chain_rules.new_game(rng)

        assert state.grid_size == 6
        assert state.num_players == 2
        assert state.current_player == 1
        assert state.cells[0][0].capacity == 2
        assert state.total_orbs == 0

    def test_player_count_limits(self):
        with pytest.raises(ValueError):
            ChainReactionRules(players=1)
        with pytest.raises(ValueError):
            ChainReactionRules(players=7)


class TestPlacement:
    """Tests for placing orbs."""

    def test_place_on_empty_cell(self, chain_rules, rng):
        state = chain_rules.new_game(rng)

        result = apply_action(chain_rules, state, Action.select(2, 2), rng)
        new_state = result.new_state

        assert result.success
        assert new_state.cells[2][2].owner == 1
        assert new_state.cells[2][2].orbs == 1
        assert new_state.scores == [1, 0]
        assert new_state.current_player == 2

    def test_opponent_cell_is_rejected(self, chain_rules, rng):
        state = chain_rules.new_game(rng)
        place(state, 2, 2, owner=2, orbs=1)

        result = apply_action(chain_rules, state, Action.select(2, 2), rng)

        assert result.rejected
        assert result.new_state.cells[2][2].owner == 2
        assert result.new_state.current_player == 1

    def test_off_board_is_invalid(self, chain_rules, rng):
        state = chain_rules.new_game(rng)

        result = apply_action(chain_rules, state, Action.select(6, 0), rng)

        assert not result.success
        assert result.error_code == "INVALID_ACTION"

    def test_opening_moves_do_not_win(self, chain_rules, rng):
        state = chain_rules.new_game(rng)

        result = apply_action(chain_rules, state, Action.select(0, 0), rng)

        assert result.new_state.phase == GamePhase.PLAYING

    def test_eliminated_player_is_skipped(self, rng):
        rules = ChainReactionRules(players=3, grid_size=6)
        state = rules.new_game(rng)
        place(state, 2, 2, owner=1, orbs=1)
        place(state, 4, 4, owner=3, orbs=2)
        recount(state)

        result = apply_action(rules, state, Action.select(3, 3), rng)

        assert result.new_state.current_player == 3


class TestExplosions:
    """Tests for propagation."""

    def test_corner_explodes_into_neighbors(self, chain_rules, rng):
        state = chain_rules.new_game(rng)
        place(state, 0, 0, owner=1, orbs=1)
        place(state, 4, 4, owner=2, orbs=1)
        recount(state)

        result = apply_action(chain_rules, state, Action.select(0, 0), rng)
        new_state = result.new_state

        assert new_state.cells[0][0].orbs == 0
        assert (new_state.cells[0][1].owner, new_state.cells[0][1].orbs) == (1, 1)
        assert (new_state.cells[1][0].owner, new_state.cells[1][0].orbs) == (1, 1)
        assert new_state.scores == [2, 1]
        assert len(new_state.last_chain) == 2
        assert all(step.wave == 0 for step in new_state.last_chain)
        assert new_state.phase == GamePhase.PLAYING

    def test_capture_wins_the_game(self, chain_rules, rng):
        state = chain_rules.new_game(rng)
        place(state, 0, 0, owner=1, orbs=1)
        place(state, 0, 1, owner=2, orbs=1)
        recount(state)

        result = apply_action(chain_rules, state, Action.select(0, 0), rng)
        new_state = result.new_state

        assert new_state.cells[0][1].owner == 1
        assert new_state.cells[0][1].orbs == 2
        assert new_state.phase == GamePhase.WON
        assert new_state.winner == 1
        assert "Player 1 wins!" in result.events

    def test_cascade_runs_in_waves(self, chain_rules, rng):
        state = chain_rules.new_game(rng)
        place(state, 0, 0, owner=1, orbs=1)
        place(state, 0, 1, owner=1, orbs=2)
        place(state, 5, 5, owner=2, orbs=1)
        recount(state)

        result = apply_action(chain_rules, state, Action.select(0, 0), rng)
        waves = {step.wave for step in result.new_state.last_chain}

        assert waves == {0, 1}
        assert "Chain reaction: 2 wave(s)" in result.events

    def test_full_board_cascade_terminates(self, rng):
        rules = ChainReactionRules(players=2, grid_size=3)
        state = rules.new_game(rng)
        for r in range(3):
            for c in range(3):
                place(state, r, c, owner=1, orbs=state.cells[r][c].capacity - 1)
        place(state, 2, 2, owner=2, orbs=1)
        recount(state)

        result = apply_action(rules, state, Action.select(0, 0), rng)
        new_state = result.new_state

        assert new_state.phase == GamePhase.WON
        assert new_state.winner == 1
        assert new_state.scores[1] == 0
        assert all(
            cell.owner == 1
            for row in new_state.cells for cell in row if cell.orbs
        )

    def test_no_high_score(self, chain_rules):
        assert chain_rules.high_score_key() is None
