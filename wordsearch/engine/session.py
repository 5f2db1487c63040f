"""Puzzle session orchestration.

A session owns one grid and its tokens and walks them through
``NEW -> PLACING -> READY -> IN_PROGRESS -> SOLVED``. Restarting discards
everything and re-enters ``NEW`` with fresh objects.
"""

from __future__ import annotations

import random
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, List, Optional

from ..core.constants import (DEFAULT_ALPHABET, DEFAULT_COLS, DEFAULT_ROWS,
                              PlacementStrategy, SessionStatus)
from ..core.exceptions import SessionStateError, ValidationError
from ..core.models import Cell, MatchResult, Selection, Token
from ..data.catalog import WordSet, build_tokens
from ..data.normalization import clean_word
from ..utils.logger import get_logger
from .grid import WordSearchGrid
from .placement import PackingConfig, PackingResult, PlacementEngine, PlacementStats
from .selection import DragTracker, decode
from .validator import PuzzleValidator


LOGGER = get_logger(__name__)

SolvedListener = Callable[["PuzzleSession"], None]


@dataclass
class SessionConfig:
    rows: int = DEFAULT_ROWS
    cols: int = DEFAULT_COLS
    alphabet: str = DEFAULT_ALPHABET
    strategy: PlacementStrategy = PlacementStrategy.EXHAUSTIVE
    seed: Optional[int] = None
    target_ratio: float = 0.9
    max_stale_passes: int = 3
    min_passes: int = 5
    max_passes: int = 50
    attempts_per_word: Optional[int] = None

    def to_packing_config(self) -> PackingConfig:
        return PackingConfig(
            strategy=self.strategy,
            target_ratio=self.target_ratio,
            max_stale_passes=self.max_stale_passes,
            min_passes=self.min_passes,
            max_passes=self.max_passes,
            attempts_per_word=self.attempts_per_word,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["strategy"] = self.strategy.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SessionConfig":
        values = dict(data)
        if "strategy" in values:
            values["strategy"] = PlacementStrategy(values["strategy"])
        return cls(**values)


class PuzzleSession:
    """A single word search game from placement to completion."""

    def __init__(
        self,
        word_set: WordSet,
        config: Optional[SessionConfig] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config or SessionConfig()
        self.rng = rng or random.Random(self.config.seed)
        self._listeners: List[SolvedListener] = []
        self._reset(word_set)

    def _reset(self, word_set: WordSet) -> None:
        self.word_set = word_set
        self.grid = WordSearchGrid(self.config.rows, self.config.cols)
        self.tokens: List[Token] = build_tokens(word_set.words, self.config.alphabet)
        self.status = SessionStatus.NEW
        self.stats = PlacementStats()
        self.packing: Optional[PackingResult] = None
        self.drag = DragTracker(self.grid)

    def _transition(self, status: SessionStatus) -> None:
        LOGGER.info("Session '%s': %s -> %s", self.word_set.name, self.status.value, status.value)
        self.status = status

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def prepare(self) -> List[Token]:
        """Place the words, fill the noise and expose the playable word list."""

        if self.status != SessionStatus.NEW:
            raise SessionStateError(f"Cannot prepare a session in state {self.status.value}")
        self._transition(SessionStatus.PLACING)

        engine = PlacementEngine(self.grid, self.config.to_packing_config(), rng=self.rng)
        self.packing = engine.pack(self.tokens)
        self.stats = self.packing.stats
        for token in self.packing.unplaced:
            LOGGER.info("'%s' did not fit and is left out", token.display_text)
        self.grid.fill_remaining(self.config.alphabet, self.rng)

        validation = PuzzleValidator(self.config.alphabet).validate(self.grid, self.tokens)
        if not validation.ok:
            raise ValidationError(f"Puzzle validation failed: {validation.messages}")
        self._transition(SessionStatus.READY)
        if not self.word_list:
            LOGGER.warning("No word of '%s' fits the grid; nothing to find", self.word_set.name)
            self._transition(SessionStatus.SOLVED)
        return self.word_list

    def restart(self, word_set: Optional[WordSet] = None) -> None:
        """Discard all state and return to ``NEW``."""

        self.drag.cancel()
        LOGGER.info("Restarting session '%s'", self.word_set.name)
        self._reset(word_set or self.word_set)

    def on_solved(self, listener: SolvedListener) -> None:
        self._listeners.append(listener)

    def _ensure_playing(self) -> None:
        if self.status in (SessionStatus.NEW, SessionStatus.PLACING):
            raise SessionStateError(f"Session is not ready to play ({self.status.value})")
        if self.status == SessionStatus.READY:
            self._transition(SessionStatus.IN_PROGRESS)

    # ------------------------------------------------------------------
    # Play
    # ------------------------------------------------------------------
    def begin_drag(self, cell: Cell) -> None:
        self._ensure_playing()
        self.drag.begin(cell)

    def move_drag(self, cell: Cell) -> Optional[Selection]:
        return self.drag.move(cell)

    def cancel_drag(self) -> None:
        self.drag.cancel()

    def release_drag(self, cell: Optional[Cell] = None) -> Optional[MatchResult]:
        """Finish the drag and check it; None when nothing was selected."""

        selection = self.drag.release(cell)
        if selection is None:
            return None
        return self.submit_selection(selection)

    def submit_selection(self, selection: Selection) -> MatchResult:
        self._ensure_playing()
        if selection.is_empty:
            return MatchResult(word="")
        return self.submit_word(decode(self.grid, selection.start, selection.end))

    def submit_word(self, word: str) -> MatchResult:
        self._ensure_playing()
        candidate = clean_word(word)
        for token in self.word_list:
            if not token.found and token.normalized_text == candidate:
                token.found = True
                LOGGER.info("Found '%s' (%d/%d)", token.display_text, self.found_count, len(self.word_list))
                return MatchResult(word=candidate, token=token, solved=self._check_solved())
        already = any(token.found and token.normalized_text == candidate for token in self.word_list)
        return MatchResult(word=candidate, already_found=already)

    def _check_solved(self) -> bool:
        if self.status == SessionStatus.SOLVED:
            return True
        if self.remaining:
            return False
        self._transition(SessionStatus.SOLVED)
        for listener in self._listeners:
            listener(self)
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def word_list(self) -> List[Token]:
        """Placed tokens in catalog order."""
        return sorted((t for t in self.tokens if t.placed), key=lambda t: t.original_index)

    @property
    def found_count(self) -> int:
        return sum(1 for token in self.word_list if token.found)

    @property
    def remaining(self) -> List[Token]:
        return [token for token in self.word_list if not token.found]

    @property
    def is_solved(self) -> bool:
        return self.status == SessionStatus.SOLVED

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def to_state(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "config": self.config.to_dict(),
            "word_set": self.word_set.to_dict(),
            "grid": self.grid.rows(),
            "tokens": [token.to_dict() for token in self.tokens],
            "stats": self.stats.to_dict(),
        }

    @classmethod
    def from_state(cls, state: Dict[str, Any], rng: Optional[random.Random] = None) -> "PuzzleSession":
        """Rebuild a prepared session from :meth:`to_state` output."""

        status = SessionStatus(state["status"])
        if status in (SessionStatus.NEW, SessionStatus.PLACING):
            raise SessionStateError(f"Cannot restore a session saved in state {status.value}")
        config = SessionConfig.from_dict(state["config"])
        session = cls(WordSet.from_dict(state["word_set"]), config=config, rng=rng)
        grid = WordSearchGrid.from_rows(state["grid"])
        if (grid.bounds.rows, grid.bounds.cols) != (config.rows, config.cols):
            raise SessionStateError("Saved grid does not match the saved dimensions")
        session.grid = grid
        session.drag = DragTracker(grid)
        session.tokens = [Token.from_dict(item) for item in state["tokens"]]
        session.stats = PlacementStats.from_dict(state.get("stats") or {})
        session.status = status
        validation = PuzzleValidator(config.alphabet).validate(grid, session.tokens)
        if not validation.ok:
            raise ValidationError(f"Saved puzzle is inconsistent: {validation.messages}")
        return session
