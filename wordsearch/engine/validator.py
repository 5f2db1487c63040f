"""Deterministic rule validation for generated puzzles."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence

from ..core.constants import EMPTY_CELL
from ..core.exceptions import ValidationError
from ..core.models import Cell, Token
from ..utils.logger import get_logger
from .grid import WordSearchGrid


LOGGER = get_logger(__name__)


@dataclass
class ValidationResult:
    ok: bool
    messages: List[str]


class PuzzleValidator:
    """Runs integrity checks over a finished grid and its tokens."""

    def __init__(self, alphabet: str) -> None:
        self.alphabet = alphabet

    def validate(self, grid: WordSearchGrid, tokens: Sequence[Token]) -> ValidationResult:
        try:
            self._check_filled(grid)
            self._check_tokens(tokens)
            self._check_placements(grid, tokens)
            self._check_shared_cells(tokens)
        except ValidationError as exc:
            LOGGER.error("Validation failed: %s", exc)
            return ValidationResult(ok=False, messages=[str(exc)])
        return ValidationResult(ok=True, messages=[])

    def _check_filled(self, grid: WordSearchGrid) -> None:
        for r in range(grid.bounds.rows):
            for c in range(grid.bounds.cols):
                char = grid.at(r, c)
                if char == EMPTY_CELL:
                    raise ValidationError(f"Empty cell left at ({r},{c})")
                if char not in self.alphabet:
                    raise ValidationError(f"Invalid letter '{char}' at ({r},{c})")

    def _check_tokens(self, tokens: Sequence[Token]) -> None:
        for token in tokens:
            if token.placed != (token.placement is not None):
                raise ValidationError(f"Token '{token.display_text}' has inconsistent placement")
            if token.found and not token.placed:
                raise ValidationError(f"Token '{token.display_text}' found but never placed")

    @staticmethod
    def _check_placements(grid: WordSearchGrid, tokens: Sequence[Token]) -> None:
        for token in tokens:
            if not token.placed:
                continue
            cells = token.cells()
            if not grid.run_in_bounds(cells):
                raise ValidationError(f"'{token.normalized_text}' extends outside the grid")
            laid = grid.read(cells)
            if laid != token.laid_text():
                raise ValidationError(
                    f"'{token.normalized_text}' reads '{laid}' at {token.placement}"
                )

    @staticmethod
    def _check_shared_cells(tokens: Sequence[Token]) -> None:
        claimed: Dict[Cell, str] = {}
        for token in tokens:
            if not token.placed:
                continue
            for cell, char in zip(token.cells(), token.laid_text()):
                existing = claimed.setdefault(cell, char)
                if existing != char:
                    raise ValidationError(
                        f"Conflicting letters at {cell}: '{existing}' vs '{char}'"
                    )
