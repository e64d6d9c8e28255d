"""Structural invariants for generated boards."""

from __future__ import annotations

import random

import pytest

from minesweeper.minesweeper_board import build_board, generate_board, place_mines
from minesweeper.minesweeper_state import DIFFICULTY_PROFILES, Board, DifficultyProfile, resolve_profile


def _brute_force_count(board: Board, row: int, col: int) -> int:
    count = 0
    for dr in (-1, 0, 1):
        for dc in (-1, 0, 1):
            if dr == 0 and dc == 0:
                continue
            r, c = row + dr, col + dc
            if 0 <= r < board.rows and 0 <= c < board.cols and board.grid[r][c].mine:
                count += 1
    return count


@pytest.mark.parametrize("name", sorted(DIFFICULTY_PROFILES))
def test_generated_board_matches_profile(name: str) -> None:
    profile = DIFFICULTY_PROFILES[name]
    board = generate_board(name)

    assert (board.rows, board.cols, board.mine_count) == (profile.rows, profile.cols, profile.mines)
    assert len(board.grid) == profile.rows
    assert all(len(row) == profile.cols for row in board.grid)
    assert sum(1 for _, _, cell in board.cells() if cell.mine) == profile.mines


@pytest.mark.parametrize("name", sorted(DIFFICULTY_PROFILES))
def test_adjacency_counts_match_brute_force(name: str) -> None:
    board = generate_board(name)

    expected_total = 0
    for row, col, cell in board.cells():
        assert not cell.revealed
        assert not cell.flagged
        if cell.mine:
            continue
        expected = _brute_force_count(board, row, col)
        assert cell.adjacent_mines == expected
        expected_total += expected

    assert sum(cell.adjacent_mines for _, _, cell in board.cells() if not cell.mine) == expected_total


def test_unknown_profile_falls_back_to_intermediate() -> None:
    assert resolve_profile("nightmare") is DIFFICULTY_PROFILES["intermediate"]
    assert resolve_profile(None) is DIFFICULTY_PROFILES["intermediate"]
    assert resolve_profile(" Beginner ") is DIFFICULTY_PROFILES["beginner"]

    board = generate_board("nightmare")
    assert (board.rows, board.cols, board.mine_count) == (16, 16, 40)


def test_place_mines_uses_supplied_random_source() -> None:
    profile = DifficultyProfile(name="tiny", rows=4, cols=4, mines=5)

    first = place_mines(profile, random.Random(7))
    second = place_mines(profile, random.Random(7))

    assert first == second
    assert len(first) == 5


def test_place_mines_rejects_profiles_without_safe_cells() -> None:
    with pytest.raises(ValueError):
        place_mines(DifficultyProfile(name="full", rows=2, cols=2, mines=4))


def test_build_board_computes_counts_for_fixed_layout() -> None:
    board = build_board(3, 3, [(0, 0), (2, 2)])

    assert board.mine_count == 2
    assert board.grid[1][1].adjacent_mines == 2
    assert board.grid[0][1].adjacent_mines == 1
    assert board.grid[0][2].adjacent_mines == 0
    assert board.safe_cell_count == 7


def test_build_board_rejects_out_of_bounds_mines() -> None:
    with pytest.raises(ValueError):
        build_board(2, 2, [(2, 0)])


def test_board_payload_uses_wire_field_names() -> None:
    payload = build_board(1, 2, [(0, 1)]).to_dict()

    assert payload["rows"] == 1
    assert payload["cols"] == 2
    assert payload["mineCount"] == 1
    assert payload["grid"][0][0] == {"mine": False, "revealed": False, "flagged": False, "adjacentMines": 1}
    assert payload["grid"][0][1]["mine"] is True
