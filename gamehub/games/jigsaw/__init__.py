"""
Jigsaw - sliding and drag-and-drop picture puzzles.
"""

from .rules import JigsawState, JigsawRules, is_adjacent, is_solved, scramble

__all__ = [
    "JigsawState",
    "JigsawRules",
    "is_adjacent",
    "is_solved",
    "scramble",
]
