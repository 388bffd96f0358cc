"""
Tests for the high-score store.
"""

import json
import logging

from ..storage import HighScoreStore, MemoryHighScoreStore


class TestHighScoreStore:
    """Tests for the JSON file store."""

    def test_missing_file_is_empty(self, tmp_path):
        store = HighScoreStore(tmp_path / "scores.json")

        assert store.get("snake-highscore") is None
        assert store.all() == {}

    def test_zero_is_not_recorded(self, tmp_path):
        store = HighScoreStore(tmp_path / "scores.json")

        assert not store.submit("tetris-highscore", 0)
        assert store.get("tetris-highscore") is None
        assert store.submit("schulte-3-best-ms", 0, higher_is_better=False)

    def test_submit_and_reload(self, tmp_path):
        path = tmp_path / "nested" / "scores.json"
        store = HighScoreStore(path)

        assert store.submit("snake-highscore", 7)
        assert HighScoreStore(path).get("snake-highscore") == 7
        assert json.loads(path.read_text()) == {"snake-highscore": 7}

    def test_only_better_values_replace(self, tmp_path):
        store = HighScoreStore(tmp_path / "scores.json")
        store.submit("tetris-highscore", 50)

        assert not store.submit("tetris-highscore", 50)
        assert not store.submit("tetris-highscore", 20)
        assert store.submit("tetris-highscore", 60)
        assert store.get("tetris-highscore") == 60

    def test_lower_is_better(self, tmp_path):
        store = HighScoreStore(tmp_path / "scores.json")
        store.submit("schulte-5-best-ms", 9000, higher_is_better=False)

        assert not store.submit("schulte-5-best-ms", 9500, higher_is_better=False)
        assert store.submit("schulte-5-best-ms", 8000, higher_is_better=False)
        assert store.get("schulte-5-best-ms") == 8000

    def test_keys_are_independent(self, tmp_path):
        store = HighScoreStore(tmp_path / "scores.json")
        store.submit("snake-highscore", 3)
        store.submit("2048-bestScore", 256)

        assert store.all() == {"snake-highscore": 3, "2048-bestScore": 256}

    def test_corrupt_file_is_ignored(self, tmp_path, caplog):
        path = tmp_path / "scores.json"
        path.write_text("{not json")
        store = HighScoreStore(path)

        with caplog.at_level(logging.WARNING):
            assert store.get("snake-highscore") is None

        assert "unreadable" in caplog.text
        assert store.submit("snake-highscore", 1)
        assert store.get("snake-highscore") == 1

    def test_non_object_file_is_ignored(self, tmp_path, caplog):
        path = tmp_path / "scores.json"
        path.write_text("[1, 2, 3]")

        with caplog.at_level(logging.WARNING):
            assert HighScoreStore(path).all() == {}

        assert "expected an object" in caplog.text

    def test_bad_values_are_skipped(self, tmp_path):
        path = tmp_path / "scores.json"
        path.write_text(json.dumps({"a": 5, "b": "high", "c": True}))

        assert HighScoreStore(path).all() == {"a": 5}

    def test_clear(self, tmp_path):
        path = tmp_path / "scores.json"
        store = HighScoreStore(path)
        store.submit("snake-highscore", 4)

        store.clear()

        assert not path.exists()
        store.clear()


class TestMemoryHighScoreStore:
    def test_initial_values(self):
        store = MemoryHighScoreStore({"2048-bestScore": 512})

        assert store.get("2048-bestScore") == 512
        assert not store.submit("2048-bestScore", 256)

    def test_clear(self):
        store = MemoryHighScoreStore()
        store.submit("snake-highscore", 2)

        store.clear()

        assert store.all() == {}
