"""Shared constants and enumerations for the word search generator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


EMPTY_CELL = "."
DEFAULT_ALPHABET = "abcdefghijklmnñopqrstuvwxyz"
DEFAULT_ROWS = 16
DEFAULT_COLS = 16


class Direction(str, Enum):
    """Word directions supported by the grid."""

    HORIZONTAL = "h"
    VERTICAL = "v"
    DIAGONAL_UP = "u"
    DIAGONAL_DOWN = "d"

    @property
    def step(self) -> Tuple[int, int]:
        return DIRECTION_STEPS[self]


DIRECTION_STEPS = {
    Direction.HORIZONTAL: (0, 1),
    Direction.VERTICAL: (1, 0),
    Direction.DIAGONAL_UP: (-1, 1),
    Direction.DIAGONAL_DOWN: (1, 1),
}


class SessionStatus(str, Enum):
    """Lifecycle states of a puzzle session."""

    NEW = "NEW"
    PLACING = "PLACING"
    READY = "READY"
    IN_PROGRESS = "IN_PROGRESS"
    SOLVED = "SOLVED"


class PlacementStrategy(str, Enum):
    """Candidate generation strategies of the placement engine."""

    RANDOM = "random"
    EXHAUSTIVE = "exhaustive"


@dataclass(frozen=True)
class Bounds:
    """Simple rectangle bounds helper."""

    rows: int
    cols: int

    def contains(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    @property
    def area(self) -> int:
        return self.rows * self.cols
