"""Character grid for word search puzzles, with an empty-cell sentinel."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from ..core.constants import EMPTY_CELL, Bounds, Direction
from ..core.exceptions import GridBoundsError
from ..core.models import Cell
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


@dataclass
class GridSnapshot:
    cells: List[List[str]]
    filled_count: int = 0


class WordSearchGrid:
    """Fixed-size character store with empty-slot semantics."""

    def __init__(self, rows: int, cols: int) -> None:
        if rows <= 0 or cols <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {rows}x{cols}")
        self.bounds = Bounds(rows=rows, cols=cols)
        self.cells: List[List[str]] = [[EMPTY_CELL] * cols for _ in range(rows)]
        self._filled_count = 0

    @classmethod
    def create(cls, rows: int, cols: int) -> "WordSearchGrid":
        return cls(rows, cols)

    @classmethod
    def from_rows(cls, rows: Sequence[str]) -> "WordSearchGrid":
        """Rebuild a grid from its row strings (see :meth:`rows`)."""

        if not rows:
            raise ValueError("Cannot build a grid from zero rows")
        width = len(rows[0])
        grid = cls(len(rows), width)
        for r, line in enumerate(rows):
            if len(line) != width:
                raise ValueError(f"Row {r} has width {len(line)}, expected {width}")
            for c, char in enumerate(line):
                if char != EMPTY_CELL:
                    grid.write(r, c, char)
        return grid

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------
    def _check(self, row: int, col: int) -> None:
        if not self.bounds.contains(row, col):
            raise GridBoundsError(
                f"Cell {(row, col)} outside {self.bounds.rows}x{self.bounds.cols} grid"
            )

    def at(self, row: int, col: int) -> str:
        self._check(row, col)
        return self.cells[row][col]

    def is_empty(self, row: int, col: int) -> bool:
        return self.at(row, col) == EMPTY_CELL

    def can_write(self, row: int, col: int, char: str) -> bool:
        existing = self.at(row, col)
        return existing == EMPTY_CELL or existing == char

    def write(self, row: int, col: int, char: str) -> None:
        """Set a cell. Callers validate with :meth:`can_write` first."""

        self._check(row, col)
        if self.cells[row][col] == EMPTY_CELL and char != EMPTY_CELL:
            self._filled_count += 1
        elif self.cells[row][col] != EMPTY_CELL and char == EMPTY_CELL:
            self._filled_count -= 1
        self.cells[row][col] = char

    def fill_remaining(self, alphabet: str, rng: Optional[random.Random] = None) -> int:
        """Replace every empty cell with a random alphabet character.

        Returns the number of cells filled with noise.
        """

        if not alphabet:
            raise ValueError("Alphabet must not be empty")
        rng = rng or random.Random()
        filled = 0
        for r in range(self.bounds.rows):
            for c in range(self.bounds.cols):
                if self.cells[r][c] == EMPTY_CELL:
                    self.write(r, c, rng.choice(alphabet))
                    filled += 1
        LOGGER.debug("Filled %d empty cells with noise", filled)
        return filled

    def reset(self) -> None:
        for row in self.cells:
            for c in range(len(row)):
                row[c] = EMPTY_CELL
        self._filled_count = 0

    # ------------------------------------------------------------------
    # Runs
    # ------------------------------------------------------------------
    def run_cells(self, row: int, col: int, direction: Direction, length: int) -> List[Cell]:
        """Cells of a straight run; may include out-of-bounds coordinates."""

        dr, dc = direction.step
        return [(row + i * dr, col + i * dc) for i in range(length)]

    def run_in_bounds(self, cells: Iterable[Cell]) -> bool:
        return all(self.bounds.contains(r, c) for r, c in cells)

    def read(self, cells: Iterable[Cell]) -> str:
        return "".join(self.at(r, c) for r, c in cells)

    def fits(self, length: int) -> bool:
        """Whether a word of ``length`` fits in at least one direction."""

        return 0 < length <= max(self.bounds.rows, self.bounds.cols)

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------
    def snapshot(self) -> GridSnapshot:
        return GridSnapshot(cells=[list(row) for row in self.cells], filled_count=self._filled_count)

    def restore(self, snapshot: GridSnapshot) -> None:
        self.cells = [list(row) for row in snapshot.cells]
        self._filled_count = snapshot.filled_count

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def rows_count(self) -> int:
        return self.bounds.rows

    @property
    def cols_count(self) -> int:
        return self.bounds.cols

    @property
    def empty_count(self) -> int:
        return self.bounds.area - self._filled_count

    @property
    def is_filled(self) -> bool:
        return self._filled_count == self.bounds.area

    @property
    def filled_ratio(self) -> float:
        return self._filled_count / self.bounds.area

    def rows(self) -> List[str]:
        return ["".join(row) for row in self.cells]

    def to_jsonable(self) -> List[List[str]]:
        return [list(row) for row in self.cells]
