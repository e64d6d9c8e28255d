"""Cascade reveal and win detection."""

from __future__ import annotations

from .minesweeper_state import NEIGHBOR_DELTAS, Board, RevealedCell


def reveal_from(board: Board, row: int, col: int) -> list[RevealedCell]:
    """Reveal a safe cell and flood-fill across zero-count regions.

    Out-of-bounds, revealed, flagged and mine cells yield an empty list. The
    traversal is depth-first with neighbors visited in `NEIGHBOR_DELTAS`
    order, using an explicit stack so large all-zero boards cannot exhaust
    the interpreter's recursion limit.
    """
    revealed: list[RevealedCell] = []
    stack: list[tuple[int, int]] = [(row, col)]
    while stack:
        r, c = stack.pop()
        if not board.in_bounds(r, c):
            continue
        cell = board.grid[r][c]
        if cell.revealed or cell.flagged or cell.mine:
            continue

        cell.revealed = True
        revealed.append(RevealedCell(row=r, col=c, adjacent_mines=cell.adjacent_mines))
        if cell.adjacent_mines == 0:
            # Reversed so the first delta is popped first.
            stack.extend((r + dr, c + dc) for dr, dc in reversed(NEIGHBOR_DELTAS))
    return revealed


def is_cleared(board: Board) -> bool:
    """Return whether every non-mine cell has been revealed."""
    return board.revealed_safe_count() == board.safe_cell_count
