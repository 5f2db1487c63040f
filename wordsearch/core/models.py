"""Data models supporting the word search generator."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Tuple

from .constants import Direction, PlacementStrategy

Cell = Tuple[int, int]


@dataclass(frozen=True)
class Placement:
    """A candidate (or committed) position for a word in the grid."""

    row: int
    col: int
    direction: Direction
    reversed: bool = False

    def cells(self, length: int) -> List[Cell]:
        dr, dc = self.direction.step
        return [(self.row + i * dr, self.col + i * dc) for i in range(length)]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "row": self.row,
            "col": self.col,
            "direction": self.direction.value,
            "reversed": self.reversed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Placement":
        return cls(
            row=int(data["row"]),
            col=int(data["col"]),
            direction=Direction(data["direction"]),
            reversed=bool(data.get("reversed", False)),
        )


@dataclass
class Token:
    """A word to search for: what the player sees and what the grid holds."""

    original_index: int
    display_text: str
    normalized_text: str
    placed: bool = False
    found: bool = False
    placement: Optional[Placement] = None

    @property
    def length(self) -> int:
        return len(self.normalized_text)

    def laid_text(self) -> str:
        """Characters in the order they were written along the placement run."""
        if self.placement is not None and self.placement.reversed:
            return self.normalized_text[::-1]
        return self.normalized_text

    def cells(self) -> List[Cell]:
        if self.placement is None:
            return []
        return self.placement.cells(self.length)

    def reset_placement(self) -> None:
        self.placed = False
        self.placement = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "original_index": self.original_index,
            "display_text": self.display_text,
            "normalized_text": self.normalized_text,
            "placed": self.placed,
            "found": self.found,
            "placement": self.placement.to_dict() if self.placement else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Token":
        placement = data.get("placement")
        return cls(
            original_index=int(data["original_index"]),
            display_text=data["display_text"],
            normalized_text=data["normalized_text"],
            placed=bool(data.get("placed", False)),
            found=bool(data.get("found", False)),
            placement=Placement.from_dict(placement) if placement else None,
        )


@dataclass(frozen=True)
class Selection:
    """A straight run of cells chosen by a drag gesture (both ends inclusive)."""

    start: Cell
    end: Cell

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    @property
    def cells(self) -> List[Cell]:
        (row, col), (end_row, end_col) = self.start, self.end
        step_r = (end_row > row) - (end_row < row)
        step_c = (end_col > col) - (end_col < col)
        run = [(row, col)]
        while (row, col) != (end_row, end_col):
            row += step_r
            col += step_c
            run.append((row, col))
        return run

    @property
    def length(self) -> int:
        (row, col), (end_row, end_col) = self.start, self.end
        return max(abs(end_row - row), abs(end_col - col)) + 1


@dataclass
class MatchResult:
    """Outcome of submitting a selection against the word list."""

    word: str
    token: Optional[Token] = None
    already_found: bool = False
    solved: bool = False

    @property
    def matched(self) -> bool:
        return self.token is not None


@dataclass
class Settings:
    """Player preferences persisted between sessions."""

    dark_theme: bool = False
    word_set: str = "random"
    hard_mode: bool = False
    strategy: PlacementStrategy = PlacementStrategy.EXHAUSTIVE

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["strategy"] = self.strategy.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        defaults = cls()
        return cls(
            dark_theme=bool(data.get("dark_theme", defaults.dark_theme)),
            word_set=str(data.get("word_set", defaults.word_set)),
            hard_mode=bool(data.get("hard_mode", defaults.hard_mode)),
            strategy=PlacementStrategy(data.get("strategy", defaults.strategy.value)),
        )


@dataclass
class Statistics:
    """Lifetime game counters."""

    games_played: int = 0
    games_won: int = 0
    words_found: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Statistics":
        return cls(
            games_played=int(data.get("games_played", 0)),
            games_won=int(data.get("games_won", 0)),
            words_found=int(data.get("words_found", 0)),
        )
