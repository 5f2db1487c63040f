"""Pretty-print helpers for word search grids."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Set

from ..core.constants import Direction

if TYPE_CHECKING:
    from ..engine.grid import WordSearchGrid
    from ..engine.session import PuzzleSession


def format_grid(grid: WordSearchGrid, highlight: Set[tuple] | None = None) -> str:
    """Render the grid with row/column headers; highlighted cells in uppercase."""

    highlight = highlight or set()
    width = grid.bounds.cols
    header_cells = [f"{c:>2}" for c in range(width)]
    lines = ["    " + " ".join(header_cells)]
    lines.append("    " + "-" * (3 * width - 1))
    for r in range(grid.bounds.rows):
        row_cells = []
        for c in range(width):
            char = grid.at(r, c)
            row_cells.append(char.upper() if (r, c) in highlight else char)
        row_render = " ".join(f"{symbol:>2}" for symbol in row_cells)
        lines.append(f"{r:>2} | {row_render}")
    return "\n".join(lines)


def format_word_list(session: PuzzleSession, *, hard_mode: bool = False) -> str:
    lines = [session.word_set.title, "-" * len(session.word_set.title)]
    for token in session.word_list:
        if hard_mode and not token.found:
            lines.append(f"[ ] {'?' * token.length}")
            continue
        mark = "x" if token.found else " "
        lines.append(f"[{mark}] {token.display_text}")
    lines.append(f"{session.found_count}/{len(session.word_list)} found")
    return "\n".join(lines)


def found_cells(session: PuzzleSession) -> Set[tuple]:
    cells: Set[tuple] = set()
    for token in session.word_list:
        if token.found:
            cells.update(token.cells())
    return cells


def pretty_print_session(session: PuzzleSession, *, hard_mode: bool = False, stream=None) -> None:
    """Print the grid followed by the word list."""

    stream = stream or sys.stdout
    print(format_grid(session.grid, found_cells(session)), file=stream)
    print(file=stream)
    print(format_word_list(session, hard_mode=hard_mode), file=stream)


def print_session_stats(session: PuzzleSession, *, stream=None) -> None:
    """Print placement statistics for a prepared session."""

    stream = stream or sys.stdout
    stats = session.stats
    grid = session.grid
    total = len(session.tokens)
    placed = len(session.word_list)
    letter_cells = sum(token.length for token in session.word_list)

    print(file=stream)
    print("--- Placement ---", file=stream)
    print(f"  Size:          {grid.bounds.rows} x {grid.bounds.cols} ({grid.bounds.area} cells)", file=stream)
    print(f"  Strategy:      {session.config.strategy.value}", file=stream)
    print(f"  Passes:        {stats.passes} ({stats.attempts} attempts)", file=stream)
    if total:
        print(f"  Words placed:  {placed}/{total} ({placed / total * 100:.0f}%)", file=stream)
    print(f"  Cells covered: {stats.cells_covered} ({stats.cells_covered / grid.bounds.area * 100:.0f}%)", file=stream)
    print(f"  Overlaps:      {stats.overlaps} ({letter_cells} letters)", file=stream)
    print(f"  Reversed:      {stats.reversed_count}", file=stream)
    dist_parts = [f"{d.name.lower()}:{stats.direction_counts.get(d, 0)}" for d in Direction]
    print(f"  Directions:    {' '.join(dist_parts)}", file=stream)

    unplaced = [token.display_text for token in session.tokens if not token.placed]
    if unplaced:
        print(f"  Left out:      {', '.join(unplaced)}", file=stream)
    if session.config.seed is not None:
        print(file=stream)
        print(f"Seed: {session.config.seed}", file=stream)
