"""
Text Renderer - Plain-text drawing of every game.

Used by the CLI and the /render endpoint. Each game has one drawing
method; all of them return a string with a status line on top.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Callable

from ..engine_core.state import GamePhase
from .base import Renderer

if TYPE_CHECKING:
    from ..engine_core.state import GameState
    from ..games.tetris import TetrisState
    from ..games.snake import SnakeState
    from ..games.twenty48 import Twenty48State
    from ..games.chain_reaction import ChainReactionState
    from ..games.jigsaw import JigsawState
    from ..games.schulte import SchulteState


EMPTY = "."
PREVIEW_SIZE = 4

PHASE_BANNERS = {
    GamePhase.READY: "READY - press start",
    GamePhase.PAUSED: "PAUSED",
    GamePhase.WON: "YOU WIN",
    GamePhase.GAME_OVER: "GAME OVER",
}


class TextRenderer(Renderer):
    """
    Renders any supported game as text.

    Usage:
        renderer = TextRenderer()
        print(renderer.render(session.state))
    """

    def render(self, state: GameState) -> str:
        draw = self._get_drawer(state.game_type)
        if draw is None:
            raise ValueError(f"No text renderer for game type {state.game_type!r}")
        lines = draw(state)
        banner = PHASE_BANNERS.get(state.phase)
        if banner:
            lines.append(banner)
        return "\n".join(lines)

    def _get_drawer(self, game_type: str) -> Callable[[GameState], list[str]] | None:
        drawers = {
            "tetris": self._draw_tetris,
            "snake": self._draw_snake,
            "2048": self._draw_twenty48,
            "chain_reaction": self._draw_chain_reaction,
            "jigsaw": self._draw_jigsaw,
            "schulte": self._draw_schulte,
        }
        return drawers.get(game_type)

    # =========================================================================
    # Tetris
    # =========================================================================

    def _draw_tetris(self, state: TetrisState) -> list[str]:
        rows = [
            [cell if cell else EMPTY for cell in row]
            for row in state.grid
        ]
        if state.active and not state.is_over:
            for x, y in state.active.cells():
                if 0 <= y < len(rows) and 0 <= x < len(rows[y]):
                    rows[y][x] = state.active.kind.upper()

        status = f"Score: {state.score}  Lines: {state.lines}"
        if state.variant == "marathon":
            status += f"  Level: {state.level}"
        lines = [status]

        preview = tetris_preview(state.next_piece)
        for y, row in enumerate(rows):
            line = "|" + "".join(row) + "|"
            if y == 0:
                line += "  Next:"
            elif 1 <= y <= PREVIEW_SIZE:
                line += "  " + "".join(preview[y - 1])
            lines.append(line)
        lines.append("+" + "-" * state.width + "+")
        return lines

    # =========================================================================
    # Snake
    # =========================================================================

    def _draw_snake(self, state: SnakeState) -> list[str]:
        n = state.grid_size
        grid = [[EMPTY] * n for _ in range(n)]

        def put(point, char):
            if point is None:
                return
            x, y = point
            if 0 <= x < n and 0 <= y < n:
                grid[y][x] = char

        put(state.food, "*")
        put(state.bonus_food, "$")
        for segment in state.body[:-1]:
            put(segment, "o")
        if state.body:
            put(state.head, "@")

        status = f"Score: {state.score}  Length: {state.length}  Speed: {state.speed}"
        return [status] + ["".join(row) for row in grid]

    # =========================================================================
    # 2048
    # =========================================================================

    def _draw_twenty48(self, state: Twenty48State) -> list[str]:
        values = state.values()
        width = max(4, len(str(state.max_tile)))
        lines = [f"Score: {state.score}  Best tile: {state.max_tile}"]
        for row in values:
            lines.append(" ".join(
                (str(v) if v else EMPTY).rjust(width) for v in row
            ))
        return lines

    # =========================================================================
    # Chain Reaction
    # =========================================================================

    def _draw_chain_reaction(self, state: ChainReactionState) -> list[str]:
        if state.winner is not None:
            status = f"Player {state.winner} wins"
        else:
            status = f"Player {state.current_player} to move"
        scores = "  ".join(
            f"P{i + 1}: {score}" for i, score in enumerate(state.scores)
        )
        lines = [status, scores]
        for row in state.cells:
            lines.append(" ".join(
                f"{cell.orbs}{_player_letter(cell.owner)}" if cell.orbs else " " + EMPTY
                for cell in row
            ))
        return lines

    # =========================================================================
    # Jigsaw
    # =========================================================================

    def _draw_jigsaw(self, state: JigsawState) -> list[str]:
        n = state.difficulty
        width = len(str(n * n))
        lines = [f"Time: {state.elapsed_display}  Moves: {state.moves}"]
        for r in range(n):
            row = state.slots[r * n:(r + 1) * n]
            lines.append(" ".join(
                str(piece + 1).rjust(width) if piece is not None else EMPTY.rjust(width)
                for piece in row
            ))
        if state.variant == "slots":
            tray = " ".join(str(piece + 1) for piece in state.tray) or "(empty)"
            lines.append(f"Tray: {tray}")
        return lines

    # =========================================================================
    # Schulte
    # =========================================================================

    def _draw_schulte(self, state: SchulteState) -> list[str]:
        n = state.grid_size
        width = len(str(state.total))
        target = state.current_number if state.current_number <= state.total else "-"
        lines = [
            f"Find: {target}  Time: {state.elapsed_display}s  Mistakes: {state.mistakes}"
        ]
        for r in range(n):
            cells = []
            for c in range(n):
                index = r * n + c
                label = str(state.numbers[index]).rjust(width)
                if state.highlight and state.found[index]:
                    cells.append(f"[{label}]")
                else:
                    cells.append(f" {label} ")
            lines.append("".join(cells))
        return lines


def tetris_preview(piece) -> list[list[str]]:
    """4x4 preview grid with the piece centered."""
    grid = [[" "] * PREVIEW_SIZE for _ in range(PREVIEW_SIZE)]
    if piece is None:
        return grid
    offset_x = (PREVIEW_SIZE - piece.width) // 2
    offset_y = (PREVIEW_SIZE - piece.height) // 2
    for dy, row in enumerate(piece.shape):
        for dx, value in enumerate(row):
            if value:
                grid[offset_y + dy][offset_x + dx] = piece.kind.upper()
    return grid


def _player_letter(owner: int | None) -> str:
    return chr(ord("A") + owner - 1) if owner else "?"


def render_text(state: GameState) -> str:
    """Convenience function to render one state."""
    return TextRenderer().render(state)
