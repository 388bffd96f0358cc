"""
GameHub - Headless minigame engines with a catalog portal.

Each game is a pure state machine driven by actions:
- Explicit state dataclasses
- Pure transition functions (state, action, rng) -> new state
- Seedable randomness for deterministic replays
- Text rendering kept apart from the rules

Sessions, high scores and the game catalog are exposed
through a REST API and a small CLI.
"""

__version__ = "0.1.0"
