"""
High Score Store - one persisted best value per game key.

The store:
- Keeps a single JSON object of key -> int on local disk
- Writes only when a submitted value beats the stored one
- Treats a missing or unreadable file as empty
- Is the ONLY persistence in the system

Keys are fixed strings such as "2048-bestScore" or "snake-highscore".
"""

from __future__ import annotations
import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class HighScoreStore:
    """
    File-based high-score storage.

    Usage:
        store = HighScoreStore(path="~/.gamehub/highscores.json")

        best = store.get("snake-highscore")
        if store.submit("snake-highscore", 42):
            print("New high score!")
    """

    def __init__(self, path: str | Path | None = None):
        if path is None:
            path = Path.home() / ".gamehub" / "highscores.json"
        self.path = Path(path).expanduser()

    def get(self, key: str) -> int | None:
        """Stored value for key, or None if nothing was recorded."""
        return self._load().get(key)

    def submit(self, key: str, value: int, higher_is_better: bool = True) -> bool:
        """
        Record value if it beats the stored one.

        A missing entry counts as 0 for higher-is-better keys, so a zero
        score is never recorded. Returns True if the stored value changed.
        """
        scores = self._load()
        current = scores.get(key)
        if current is None and higher_is_better:
            current = 0
        if current is not None:
            improved = value > current if higher_is_better else value < current
            if not improved:
                return False
        scores[key] = int(value)
        self._save(scores)
        return True

    def all(self) -> dict[str, int]:
        return dict(self._load())

    def clear(self):
        self.path.unlink(missing_ok=True)

    def _load(self) -> dict[str, int]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable high score file %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring high score file %s: expected an object", self.path)
            return {}
        return {
            str(k): int(v) for k, v in data.items()
            if isinstance(v, (int, float)) and not isinstance(v, bool)
        }

    def _save(self, scores: dict[str, int]):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(scores, f, indent=2, sort_keys=True)


class MemoryHighScoreStore(HighScoreStore):
    """In-memory store for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, int] | None = None):
        self._scores: dict[str, int] = dict(initial or {})

    def clear(self):
        self._scores.clear()

    def _load(self) -> dict[str, int]:
        return dict(self._scores)

    def _save(self, scores: dict[str, int]):
        self._scores = dict(scores)
