"""Board data model and difficulty profiles for cooperative Minesweeper."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator

# Fixed neighbor order; cascade reveal depends on it for deterministic output.
NEIGHBOR_DELTAS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)


@dataclass(frozen=True)
class DifficultyProfile:
    """Named board size and mine count."""

    name: str
    rows: int
    cols: int
    mines: int


DIFFICULTY_PROFILES: dict[str, DifficultyProfile] = {
    "beginner": DifficultyProfile(name="beginner", rows=10, cols=10, mines=12),
    "intermediate": DifficultyProfile(name="intermediate", rows=16, cols=16, mines=40),
    "expert": DifficultyProfile(name="expert", rows=22, cols=22, mines=99),
}
DEFAULT_DIFFICULTY = "intermediate"


def resolve_profile(name: str | None) -> DifficultyProfile:
    """Return the profile for `name`, falling back to intermediate."""
    normalized = (name or "").strip().lower()
    return DIFFICULTY_PROFILES.get(normalized, DIFFICULTY_PROFILES[DEFAULT_DIFFICULTY])


@dataclass
class Cell:
    """Single grid cell. Only `revealed` and `flagged` change after generation."""

    mine: bool = False
    revealed: bool = False
    flagged: bool = False
    adjacent_mines: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "mine": self.mine,
            "revealed": self.revealed,
            "flagged": self.flagged,
            "adjacentMines": self.adjacent_mines,
        }


@dataclass(frozen=True)
class RevealedCell:
    """Cell coordinates plus the count shown to players once revealed."""

    row: int
    col: int
    adjacent_mines: int

    def to_dict(self) -> dict[str, Any]:
        return {"row": self.row, "col": self.col, "adjacentMines": self.adjacent_mines}


@dataclass
class Board:
    """Rectangular grid of cells owned by one session."""

    rows: int
    cols: int
    mine_count: int
    grid: list[list[Cell]] = field(repr=False)

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def neighbors(self, row: int, col: int) -> Iterator[tuple[int, int]]:
        """Yield in-bounds neighbor coordinates in `NEIGHBOR_DELTAS` order."""
        for dr, dc in NEIGHBOR_DELTAS:
            nr, nc = row + dr, col + dc
            if self.in_bounds(nr, nc):
                yield nr, nc

    def cells(self) -> Iterator[tuple[int, int, Cell]]:
        for r, row_cells in enumerate(self.grid):
            for c, cell in enumerate(row_cells):
                yield r, c, cell

    @property
    def safe_cell_count(self) -> int:
        return self.rows * self.cols - self.mine_count

    def revealed_safe_count(self) -> int:
        return sum(1 for _, _, cell in self.cells() if cell.revealed and not cell.mine)

    def center(self) -> tuple[int, int]:
        return self.rows // 2, self.cols // 2

    def to_dict(self) -> dict[str, Any]:
        """Return the `gridData` payload sent when a game starts."""
        return {
            "grid": [[cell.to_dict() for cell in row_cells] for row_cells in self.grid],
            "rows": self.rows,
            "cols": self.cols,
            "mineCount": self.mine_count,
        }
