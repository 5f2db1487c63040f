"""Word placement: candidate strategies and the whole-puzzle packing loop.

Each word is attempted through a single contract, :meth:`PlacementEngine.try_place`,
which lays the characters along a straight run and only commits when every
touched cell is empty or already holds the same character. Two strategies
generate candidates for it:

- ``RANDOM``: random direction, reversal and in-bounds start, retried a
  bounded number of times.
- ``EXHAUSTIVE``: a full sweep of every cell and the 8 direction/reversal
  combinations, starting from a random offset. Finds a placement whenever one
  exists.

The packing loop places words longest first and repeats whole passes from an
empty grid until enough words fit or passes stop improving.
"""

from __future__ import annotations

import random
from collections import Counter
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

from ..core.constants import Direction, PlacementStrategy
from ..core.models import Placement, Token
from ..utils.logger import get_logger
from .grid import GridSnapshot, WordSearchGrid


LOGGER = get_logger(__name__)

ORIENTATIONS: Tuple[Tuple[Direction, bool], ...] = tuple(
    (direction, reverse) for direction in Direction for reverse in (False, True)
)


@dataclass
class PackingConfig:
    """Quality thresholds and candidate strategy for the packing loop."""

    strategy: PlacementStrategy = PlacementStrategy.EXHAUSTIVE
    target_ratio: float = 0.9
    max_stale_passes: int = 3
    min_passes: int = 5
    max_passes: int = 50
    attempts_per_word: Optional[int] = None

    def __post_init__(self) -> None:
        if not 0.0 < self.target_ratio <= 1.0:
            raise ValueError(f"target_ratio must be in (0, 1], got {self.target_ratio}")
        if self.max_passes < 1:
            raise ValueError("max_passes must be at least 1")
        if self.min_passes > self.max_passes:
            raise ValueError("min_passes cannot exceed max_passes")


@dataclass
class PlacementStats:
    """Counters for the current pass plus loop-wide totals."""

    passes: int = 0
    attempts: int = 0
    placed: int = 0
    cells_covered: int = 0
    overlaps: int = 0
    reversed_count: int = 0
    direction_counts: Counter = field(default_factory=Counter)
    best_placed: int = 0
    stale_passes: int = 0

    def start_pass(self) -> None:
        self.passes += 1
        self.placed = 0
        self.cells_covered = 0
        self.overlaps = 0
        self.reversed_count = 0
        self.direction_counts = Counter()

    def record(self, placement: Placement, length: int, overlaps: int) -> None:
        self.placed += 1
        self.cells_covered += length - overlaps
        self.overlaps += overlaps
        self.direction_counts[placement.direction] += 1
        if placement.reversed:
            self.reversed_count += 1

    def copy(self) -> "PlacementStats":
        return replace(self, direction_counts=Counter(self.direction_counts))

    def to_dict(self) -> Dict[str, object]:
        return {
            "passes": self.passes,
            "attempts": self.attempts,
            "placed": self.placed,
            "cells_covered": self.cells_covered,
            "overlaps": self.overlaps,
            "reversed": self.reversed_count,
            "directions": {d.name: self.direction_counts.get(d, 0) for d in Direction},
            "best_placed": self.best_placed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, object]) -> "PlacementStats":
        directions = data.get("directions") or {}
        return cls(
            passes=int(data.get("passes", 0)),
            attempts=int(data.get("attempts", 0)),
            placed=int(data.get("placed", 0)),
            cells_covered=int(data.get("cells_covered", 0)),
            overlaps=int(data.get("overlaps", 0)),
            reversed_count=int(data.get("reversed", 0)),
            direction_counts=Counter(
                {Direction[name]: int(count) for name, count in directions.items() if count}
            ),
            best_placed=int(data.get("best_placed", 0)),
        )


@dataclass
class PackingResult:
    placed: List[Token]
    unplaced: List[Token]
    stats: PlacementStats
    stop_reason: str

    @property
    def ratio(self) -> float:
        total = len(self.placed) + len(self.unplaced)
        return len(self.placed) / total if total else 1.0


class CandidateStrategy(Protocol):
    """Generates placement candidates for one token until one commits."""

    def place(self, engine: "PlacementEngine", token: Token) -> bool:
        ...


def start_range(extent: int, step: int, length: int) -> Tuple[int, int]:
    """Inclusive range of start coordinates keeping a run inside ``extent``."""

    if step == 0:
        return 0, extent - 1
    if step > 0:
        return 0, extent - length
    return length - 1, extent - 1


class RandomRetryStrategy:
    """Random direction, reversal and start, retried up to ``attempts`` times."""

    def __init__(self, attempts: Optional[int] = None) -> None:
        self.attempts = attempts

    def place(self, engine: "PlacementEngine", token: Token) -> bool:
        grid = engine.grid
        rng = engine.rng
        attempts = self.attempts or grid.bounds.area
        length = token.length
        for _ in range(attempts):
            direction = rng.choice(list(Direction))
            reverse = rng.random() > 0.5
            dr, dc = direction.step
            min_row, max_row = start_range(grid.bounds.rows, dr, length)
            min_col, max_col = start_range(grid.bounds.cols, dc, length)
            if min_row > max_row or min_col > max_col:
                engine.stats.attempts += 1
                continue
            row = rng.randint(min_row, max_row)
            col = rng.randint(min_col, max_col)
            if engine.try_place(token, row, col, direction, reverse):
                return True
        return False


class ExhaustiveScanStrategy:
    """Sweep every cell and orientation, starting from a random offset."""

    def place(self, engine: "PlacementEngine", token: Token) -> bool:
        grid = engine.grid
        area = grid.bounds.area
        cols = grid.bounds.cols
        offset = engine.rng.randrange(area)
        turn = engine.rng.randrange(len(ORIENTATIONS))
        for k in range(area):
            row, col = divmod((offset + k) % area, cols)
            for j in range(len(ORIENTATIONS)):
                direction, reverse = ORIENTATIONS[(turn + j) % len(ORIENTATIONS)]
                if engine.try_place(token, row, col, direction, reverse):
                    return True
        return False


def build_strategy(config: PackingConfig) -> CandidateStrategy:
    if config.strategy == PlacementStrategy.RANDOM:
        return RandomRetryStrategy(config.attempts_per_word)
    return ExhaustiveScanStrategy()


class PlacementEngine:
    """Places tokens into a :class:`WordSearchGrid`."""

    def __init__(
        self,
        grid: WordSearchGrid,
        config: Optional[PackingConfig] = None,
        rng: Optional[random.Random] = None,
        strategy: Optional[CandidateStrategy] = None,
    ) -> None:
        self.grid = grid
        self.config = config or PackingConfig()
        self.rng = rng or random.Random()
        self.strategy = strategy or build_strategy(self.config)
        self.stats = PlacementStats()

    # ------------------------------------------------------------------
    # Single attempt
    # ------------------------------------------------------------------
    def try_place(
        self,
        token: Token,
        row: int,
        col: int,
        direction: Direction,
        reverse: bool = False,
    ) -> bool:
        """Attempt one placement; commits only if every cell agrees."""

        self.stats.attempts += 1
        word = token.normalized_text[::-1] if reverse else token.normalized_text
        cells = self.grid.run_cells(row, col, direction, len(word))
        if not self.grid.run_in_bounds(cells):
            return False

        overlaps = 0
        for (r, c), char in zip(cells, word):
            if not self.grid.can_write(r, c, char):
                return False
            if not self.grid.is_empty(r, c):
                overlaps += 1

        for (r, c), char in zip(cells, word):
            self.grid.write(r, c, char)
        placement = Placement(row=row, col=col, direction=direction, reversed=reverse)
        token.placed = True
        token.placement = placement
        self.stats.record(placement, len(word), overlaps)
        LOGGER.debug(
            "Placed '%s' at (%d,%d) %s%s with %d overlaps",
            token.normalized_text,
            row,
            col,
            direction.name,
            " reversed" if reverse else "",
            overlaps,
        )
        return True

    def place_token(self, token: Token) -> bool:
        if not self.grid.fits(token.length):
            LOGGER.debug("'%s' is longer than both grid dimensions", token.normalized_text)
            return False
        return self.strategy.place(self, token)

    # ------------------------------------------------------------------
    # Packing loop
    # ------------------------------------------------------------------
    def run_pass(self, ordered: Sequence[Token]) -> int:
        self.grid.reset()
        for token in ordered:
            token.reset_placement()
        self.stats.start_pass()
        for token in ordered:
            if not self.place_token(token):
                LOGGER.debug("Could not place '%s' this pass", token.normalized_text)
        return self.stats.placed

    def pack(self, tokens: Sequence[Token]) -> PackingResult:
        """Place ``tokens`` longest first, repeating passes per the thresholds."""

        total = len(tokens)
        if not total:
            return PackingResult(placed=[], unplaced=[], stats=self.stats, stop_reason="empty")

        ordered = sorted(tokens, key=lambda token: token.length, reverse=True)
        config = self.config
        best_count = -1
        best_grid: Optional[GridSnapshot] = None
        best_placements: Dict[int, Optional[Placement]] = {}
        best_stats = self.stats.copy()

        while True:
            count = self.run_pass(ordered)
            ratio = count / total
            if count > best_count:
                best_count = count
                best_grid = self.grid.snapshot()
                best_placements = {id(token): token.placement for token in ordered}
                best_stats = self.stats.copy()
                self.stats.stale_passes = 0
            else:
                self.stats.stale_passes += 1
            self.stats.best_placed = best_count
            LOGGER.info(
                "Pass %d placed %d/%d words (%.0f%%, best %d)",
                self.stats.passes,
                count,
                total,
                ratio * 100,
                best_count,
            )

            if ratio >= config.target_ratio:
                stop_reason = "target"
                break
            if (
                self.stats.stale_passes > config.max_stale_passes
                and self.stats.passes >= config.min_passes
            ):
                stop_reason = "stalled"
                break
            if self.stats.passes >= config.max_passes:
                stop_reason = "max_passes"
                break

        if count < best_count and best_grid is not None:
            self._restore_best(ordered, best_grid, best_placements, best_stats)

        placed = [token for token in tokens if token.placed]
        unplaced = [token for token in tokens if not token.placed]
        LOGGER.info(
            "Packing stopped (%s) after %d passes: %d/%d words placed",
            stop_reason,
            self.stats.passes,
            len(placed),
            total,
        )
        return PackingResult(placed=placed, unplaced=unplaced, stats=self.stats, stop_reason=stop_reason)

    def _restore_best(
        self,
        ordered: Sequence[Token],
        snapshot: GridSnapshot,
        placements: Dict[int, Optional[Placement]],
        best_stats: PlacementStats,
    ) -> None:
        self.grid.restore(snapshot)
        for token in ordered:
            placement = placements.get(id(token))
            token.placement = placement
            token.placed = placement is not None
        self.stats.placed = best_stats.placed
        self.stats.cells_covered = best_stats.cells_covered
        self.stats.overlaps = best_stats.overlaps
        self.stats.reversed_count = best_stats.reversed_count
        self.stats.direction_counts = Counter(best_stats.direction_counts)
