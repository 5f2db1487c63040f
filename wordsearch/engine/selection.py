"""Turn pointer drags over the grid into straight cell runs and strings.

The decoder works on cell coordinates only. Whatever draws the grid converts
pointer positions into ``(row, col)`` before calling in.
"""

from __future__ import annotations

from typing import Optional

from ..core.models import Cell, Selection
from .grid import WordSearchGrid


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def snap_end(start: Cell, current: Cell) -> Cell:
    """Snap a free-form drag onto one of the 8 legal directions.

    A drag mostly along one axis (more than twice the other delta) becomes
    horizontal or vertical; anything else becomes a true 45° diagonal using
    the shorter of the two deltas.
    """

    start_row, start_col = start
    delta_row = current[0] - start_row
    delta_col = current[1] - start_col
    if abs(delta_col) > 2 * abs(delta_row):
        return start_row, start_col + delta_col
    if abs(delta_row) > 2 * abs(delta_col):
        return start_row + delta_row, start_col
    span = min(abs(delta_row), abs(delta_col))
    return start_row + _sign(delta_row) * span, start_col + _sign(delta_col) * span


def snap(start: Cell, current: Cell) -> Selection:
    return Selection(start=start, end=snap_end(start, current))


def marked_word(grid: WordSearchGrid, start: Cell, end: Cell) -> str:
    """Letters from ``start`` to ``end`` inclusive, stepping toward ``end``."""

    row, col = start
    word = []
    while True:
        word.append(grid.at(row, col))
        if (row, col) == end:
            break
        row += _sign(end[0] - row)
        col += _sign(end[1] - col)
    return "".join(word)


def decode(grid: WordSearchGrid, start: Cell, current: Cell) -> str:
    selection = snap(start, current)
    return marked_word(grid, selection.start, selection.end)


class DragTracker:
    """Transient state of the drag in progress."""

    def __init__(self, grid: WordSearchGrid) -> None:
        self.grid = grid
        self.start: Optional[Cell] = None
        self.current: Optional[Cell] = None

    @property
    def active(self) -> bool:
        return self.start is not None

    def begin(self, cell: Cell) -> None:
        # Validates the cell; a new drag replaces any unfinished one.
        self.grid.at(*cell)
        self.start = cell
        self.current = cell

    def move(self, cell: Cell) -> Optional[Selection]:
        """Update the live end; returns the snapped run, or None when empty."""

        if self.start is None:
            return None
        self.current = cell
        selection = snap(self.start, cell)
        return None if selection.is_empty else selection

    def release(self, cell: Optional[Cell] = None) -> Optional[Selection]:
        """Finish the drag. Returns None for no drag or a zero-length drag."""

        if self.start is None:
            return None
        end = cell if cell is not None else self.current
        selection = snap(self.start, end if end is not None else self.start)
        self.cancel()
        if selection.is_empty:
            return None
        return selection

    def cancel(self) -> None:
        self.start = None
        self.current = None
