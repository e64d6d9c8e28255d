"""Board generation: random mine placement plus adjacency counts."""

from __future__ import annotations

import random
from typing import Iterable

from .minesweeper_state import Board, Cell, DifficultyProfile, resolve_profile


def count_adjacent_mines(board: Board, row: int, col: int) -> int:
    """Count mines in the edge-clipped 8-neighborhood of (row, col)."""
    return sum(1 for nr, nc in board.neighbors(row, col) if board.grid[nr][nc].mine)


def build_board(rows: int, cols: int, mine_positions: Iterable[tuple[int, int]]) -> Board:
    """Build a board with mines at `mine_positions` and computed adjacency counts."""
    if rows <= 0 or cols <= 0:
        raise ValueError(f"Board dimensions must be positive; received {rows}x{cols}.")

    grid = [[Cell() for _ in range(cols)] for _ in range(rows)]
    mines = set(mine_positions)
    for row, col in mines:
        if not (0 <= row < rows and 0 <= col < cols):
            raise ValueError(f"Mine position ({row}, {col}) is outside a {rows}x{cols} board.")
        grid[row][col].mine = True

    board = Board(rows=rows, cols=cols, mine_count=len(mines), grid=grid)
    for row, col, cell in board.cells():
        if not cell.mine:
            cell.adjacent_mines = count_adjacent_mines(board, row, col)
    return board


def place_mines(profile: DifficultyProfile, rng: random.Random | None = None) -> set[tuple[int, int]]:
    """Pick `profile.mines` distinct coordinates by rejection sampling."""
    if profile.mines >= profile.rows * profile.cols:
        raise ValueError(f"Profile {profile.name!r} has too many mines for its board size.")

    source = rng or random
    mines: set[tuple[int, int]] = set()
    while len(mines) < profile.mines:
        mines.add((source.randrange(profile.rows), source.randrange(profile.cols)))
    return mines


def generate_board(difficulty: str | DifficultyProfile | None, rng: random.Random | None = None) -> Board:
    """Generate a fresh board for a difficulty profile or profile name.

    Unknown profile names fall back to intermediate. Mine placement uses the
    process-wide random source unless `rng` is given.
    """
    profile = difficulty if isinstance(difficulty, DifficultyProfile) else resolve_profile(difficulty)
    return build_board(profile.rows, profile.cols, place_mines(profile, rng))
