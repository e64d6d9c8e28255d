"""Cascade reveal behaviour and win detection."""

from __future__ import annotations

from minesweeper.minesweeper_board import build_board
from minesweeper.minesweeper_reveal import is_cleared, reveal_from


def _coords(cells) -> list[tuple[int, int]]:
    return [(cell.row, cell.col) for cell in cells]


def test_mine_free_board_reveals_everything_from_any_seed() -> None:
    for seed_row in range(3):
        for seed_col in range(3):
            board = build_board(3, 3, [])
            revealed = reveal_from(board, seed_row, seed_col)

            assert len(revealed) == 9
            assert len(set(_coords(revealed))) == 9
            assert is_cleared(board)


def test_cascade_order_is_depth_first_in_neighbor_order() -> None:
    board = build_board(3, 3, [])

    assert _coords(reveal_from(board, 0, 0)) == [
        (0, 0),
        (0, 1),
        (0, 2),
        (1, 1),
        (1, 0),
        (2, 0),
        (2, 1),
        (1, 2),
        (2, 2),
    ]


def test_second_reveal_from_same_seed_is_empty() -> None:
    board = build_board(4, 4, [(3, 3)])

    first = reveal_from(board, 0, 0)
    assert first
    assert reveal_from(board, 0, 0) == []


def test_cascade_stops_at_numbered_boundary() -> None:
    board = build_board(1, 5, [(0, 4)])

    revealed = reveal_from(board, 0, 0)

    assert _coords(revealed) == [(0, 0), (0, 1), (0, 2), (0, 3)]
    assert revealed[-1].adjacent_mines == 1
    assert not board.grid[0][4].revealed
    assert is_cleared(board)


def test_numbered_seed_reveals_only_itself() -> None:
    board = build_board(1, 5, [(0, 2)])

    revealed = reveal_from(board, 0, 1)

    assert _coords(revealed) == [(0, 1)]
    assert not is_cleared(board)


def test_reveal_never_touches_mines() -> None:
    board = build_board(5, 5, [(0, 4), (2, 2), (4, 0)])

    revealed = reveal_from(board, 0, 0)

    assert all(not board.grid[row][col].mine for row, col in _coords(revealed))
    assert sum(1 for _, _, cell in board.cells() if cell.mine and cell.revealed) == 0


def test_short_circuits_return_empty() -> None:
    board = build_board(2, 2, [(1, 1)])
    board.grid[0][1].flagged = True

    assert reveal_from(board, -1, 0) == []
    assert reveal_from(board, 0, 2) == []
    assert reveal_from(board, 1, 1) == []
    assert reveal_from(board, 0, 1) == []
    assert not board.grid[1][1].revealed
    assert not board.grid[0][1].revealed


def test_flagged_cells_block_the_cascade() -> None:
    board = build_board(1, 3, [])
    board.grid[0][2].flagged = True

    assert _coords(reveal_from(board, 0, 0)) == [(0, 0), (0, 1)]
    assert not board.grid[0][2].revealed
    assert not is_cleared(board)


def test_large_zero_board_does_not_hit_recursion_limit() -> None:
    board = build_board(300, 300, [])

    revealed = reveal_from(board, 150, 150)

    assert len(revealed) == 300 * 300
    assert is_cleared(board)


def test_revealed_cell_payload() -> None:
    board = build_board(1, 2, [(0, 1)])

    (cell,) = reveal_from(board, 0, 0)

    assert cell.to_dict() == {"row": 0, "col": 0, "adjacentMines": 1}
