"""Minesweeper rules package exports."""

from .minesweeper_board import build_board, count_adjacent_mines, generate_board, place_mines
from .minesweeper_reveal import is_cleared, reveal_from
from .minesweeper_state import (
    DEFAULT_DIFFICULTY,
    DIFFICULTY_PROFILES,
    NEIGHBOR_DELTAS,
    Board,
    Cell,
    DifficultyProfile,
    RevealedCell,
    resolve_profile,
)

__all__ = [
    "Board",
    "Cell",
    "DEFAULT_DIFFICULTY",
    "DIFFICULTY_PROFILES",
    "DifficultyProfile",
    "NEIGHBOR_DELTAS",
    "RevealedCell",
    "build_board",
    "count_adjacent_mines",
    "generate_board",
    "is_cleared",
    "place_mines",
    "resolve_profile",
    "reveal_from",
]
