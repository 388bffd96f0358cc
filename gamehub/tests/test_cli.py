"""
Tests for the command-line interface.
"""

import io
import json

import pytest

from ..cli import main, parse_options, run_command
from ..session import GameLoop


class TestParseOptions:
    def test_ints_and_strings(self):
        assert parse_options(["grid_size=6", "players=3", "name=bob"]) == {
            "grid_size": 6,
            "players": 3,
            "name": "bob",
        }

    def test_bad_pair(self):
        with pytest.raises(ValueError):
            parse_options(["grid_size"])
        with pytest.raises(ValueError):
            parse_options(["=4"])


class TestCatalogCommand:
    def test_lists_featured_first(self, capsys):
        main(["catalog"])

        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 9
        assert lines[0].startswith("*   1  Tetris")
        assert lines[0].endswith("tetris/classic")

    def test_search(self, capsys):
        main(["catalog", "--search", "chain"])

        out = capsys.readouterr().out
        assert "Chain Reaction" in out
        assert "chain_reaction/classic" in out
        assert len(out.splitlines()) == 1

    def test_no_results(self, capsys):
        main(["catalog", "--category", "Racing"])
        assert capsys.readouterr().out.strip() == "No games found."


class TestScoresCommand:
    def test_empty(self, tmp_path, capsys):
        main(["--data-dir", str(tmp_path), "scores"])
        assert capsys.readouterr().out.strip() == "No high scores yet."

    def test_listing(self, tmp_path, capsys):
        (tmp_path / "highscores.json").write_text(
            json.dumps({"snake-highscore": 12, "2048-bestScore": 2048})
        )

        main(["--data-dir", str(tmp_path), "scores"])

        lines = capsys.readouterr().out.splitlines()
        assert lines[0].split() == ["2048-bestScore", "2048"]
        assert lines[1].split() == ["snake-highscore", "12"]


class TestPlayCommand:
    """Tests for the interactive loop."""

    def test_play_2048(self, tmp_path, capsys, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO("a\nw\nbogus\nq\n"))

        main(["--data-dir", str(tmp_path), "play", "2048", "--seed", "3"])

        out = capsys.readouterr().out
        assert out.startswith("2048 (classic) - seed 3")
        assert "Error: Unknown command 'bogus'" in out
        assert "New best: 0" not in out

    def test_play_with_options(self, tmp_path, capsys, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO("select 0 0\nquit\n"))

        main([
            "--data-dir", str(tmp_path),
            "play", "chain_reaction", "-o", "players=3", "-o", "grid_size=5",
        ])

        out = capsys.readouterr().out
        assert "Player 2 to move" in out
        assert "P1: 1  P2: 0  P3: 0" in out

    def test_unknown_game(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--data-dir", str(tmp_path), "play", "pong"])

        assert exc.value.code == 1
        assert "Error: Unknown game type 'pong'" in capsys.readouterr().out

    def test_no_command(self, capsys):
        with pytest.raises(SystemExit):
            main([])


class TestRunCommand:
    def test_commands(self, manager):
        session = manager.create_session("jigsaw", variant="slots", seed=4)
        loop = GameLoop(session)
        piece = session.state.tray[0]

        placed = run_command(loop, f"place {piece + 1} 0 0")
        ticked = run_command(loop, "tick 2500")

        assert placed.success
        assert session.state.slots[0] == piece
        assert ticked.ticks_applied == 2

    def test_bad_arguments(self, manager):
        loop = GameLoop(manager.create_session("schulte"))

        with pytest.raises(ValueError):
            run_command(loop, "select 1")
        with pytest.raises(ValueError):
            run_command(loop, "tick soon")
