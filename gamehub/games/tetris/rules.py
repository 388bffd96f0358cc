"""
Tetris Rules - piece/board state machine.

States: spawning -> falling -> locking -> line clearing -> spawning,
or game over when a freshly spawned piece collides.

Variants:
- classic: fixed 1000ms drop, score += lines^2 * 10
- marathon: level = lines // 10 + 1, faster drops, score scaled by level
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from ...engine_core.state import GamePhase
from ...engine_core.action import Action, ActionType, ActionResult
from ..base import GameRules
from .board import collides, merge, clear_lines, empty_grid, BOARD_WIDTH, BOARD_HEIGHT
from .pieces import Piece, random_piece, kick_offsets
from .state import TetrisState

if TYPE_CHECKING:
    from ...engine_core.rng import RandomSource


BASE_DROP_INTERVAL_MS = 1000
MIN_DROP_INTERVAL_MS = 100
LINES_PER_LEVEL = 10


def line_clear_score(lines_cleared: int, level: int = 1) -> int:
    return lines_cleared ** 2 * 10 * level


class TetrisRules(GameRules):
    """Rules for both Tetris variants."""

    game_type = "tetris"
    title = "Tetris"
    variants = ("classic", "marathon")
    supported_actions = frozenset({
        ActionType.MOVE,
        ActionType.ROTATE,
        ActionType.DROP,
        ActionType.TICK,
        ActionType.PAUSE,
        ActionType.RESET,
    })

    def new_game(self, rng: RandomSource) -> TetrisState:
        state = TetrisState(
            game_type=self.game_type,
            variant=self.variant,
            phase=GamePhase.PLAYING,
            grid=empty_grid(BOARD_WIDTH, BOARD_HEIGHT),
            next_piece=random_piece(rng),
        )
        state, _ = self._spawn(state, rng)
        return state

    def _get_handler(self, action_type: ActionType):
        handlers = {
            ActionType.MOVE: self._handle_move,
            ActionType.ROTATE: self._handle_rotate,
            ActionType.DROP: self._handle_drop,
            ActionType.TICK: self._handle_drop,
        }
        return handlers.get(action_type)

    def tick_interval_ms(self, state: TetrisState) -> int:
        if self.variant == "marathon":
            return max(
                MIN_DROP_INTERVAL_MS,
                BASE_DROP_INTERVAL_MS - (state.level - 1) * 100,
            )
        return BASE_DROP_INTERVAL_MS

    def high_score_key(self) -> str:
        if self.variant == "marathon":
            return "tetris-marathon-highscore"
        return "tetris-highscore"

    # =========================================================================
    # Handlers
    # =========================================================================

    def _handle_move(self, state: TetrisState, action: Action, rng: RandomSource) -> ActionResult:
        dx = action.payload.dx
        if dx == 0:
            return ActionResult.failure(
                "Tetris pieces only move sideways; use drop to move down",
                error_code="INVALID_ACTION",
            )
        moved = state.active.moved(dx=dx)
        if collides(state.grid, moved):
            return ActionResult.rejection(state, "Blocked")
        return ActionResult.success_with_state(state._copy_with(active=moved))

    def _handle_rotate(self, state: TetrisState, action: Action, rng: RandomSource) -> ActionResult:
        rotated = state.active.rotated()
        for offset in kick_offsets(rotated.width):
            candidate = rotated.moved(dx=offset)
            if not collides(state.grid, candidate):
                events = [f"Wall kick {offset:+d}"] if offset else []
                return ActionResult.success_with_state(
                    state._copy_with(active=candidate), events=events,
                )
        return ActionResult.rejection(state, "Rotation blocked")

    def _handle_drop(self, state: TetrisState, action: Action, rng: RandomSource) -> ActionResult:
        """Soft drop / gravity tick: fall one row or lock in place."""
        fallen = state.active.moved(dy=1)
        if not collides(state.grid, fallen):
            return ActionResult.success_with_state(state._copy_with(active=fallen))
        return self._lock(state, rng)

    # =========================================================================
    # Locking and spawning
    # =========================================================================

    def _lock(self, state: TetrisState, rng: RandomSource) -> ActionResult:
        events = []
        grid = merge(state.grid, state.active)
        grid, cleared = clear_lines(grid)

        score = state.score
        lines = state.lines
        level = state.level
        if cleared:
            score_level = level if self.variant == "marathon" else 1
            score += line_clear_score(cleared, score_level)
            lines += cleared
            events.append(f"Cleared {cleared} line{'s' if cleared > 1 else ''}")
            if self.variant == "marathon":
                new_level = lines // LINES_PER_LEVEL + 1
                if new_level != level:
                    events.append(f"Level {new_level}")
                level = new_level

        new_state = state._copy_with(
            grid=grid,
            active=None,
            score=score,
            lines=lines,
            level=level,
            moves=state.moves + 1,
        )
        new_state, spawn_events = self._spawn(new_state, rng)
        return ActionResult.success_with_state(new_state, events=events + spawn_events)

    def _spawn(self, state: TetrisState, rng: RandomSource) -> tuple[TetrisState, list[str]]:
        """Promote the preview piece; a collision on spawn ends the game."""
        piece = state.next_piece or random_piece(rng)
        active = Piece(
            kind=piece.kind,
            shape=[row[:] for row in piece.shape],
            x=state.width // 2 - piece.width // 2,
            y=0,
        )
        new_state = state._copy_with(active=active, next_piece=random_piece(rng))
        if collides(new_state.grid, active):
            new_state.phase = GamePhase.GAME_OVER
            return new_state, [f"Game over! Final score: {new_state.score}"]
        return new_state, []
