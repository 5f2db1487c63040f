"""Word search puzzle generator and player.

This package exposes the public API surface via:

- ``wordsearch.engine.session.PuzzleSession``: places words, fills the grid and
  checks player selections.
- ``wordsearch.engine.placement.PlacementEngine``: the word packing loop.
- ``wordsearch.engine.selection``: drag snapping and decoding.
- ``wordsearch.data.catalog.WordCatalog``: word set loading with fallback.
"""

from .core.constants import Direction, PlacementStrategy, SessionStatus
from .data.catalog import WordCatalog, WordSet, build_tokens
from .engine.grid import WordSearchGrid
from .engine.placement import PackingConfig, PlacementEngine
from .engine.session import PuzzleSession, SessionConfig

__all__ = [
    "Direction",
    "PlacementStrategy",
    "SessionStatus",
    "WordCatalog",
    "WordSet",
    "build_tokens",
    "WordSearchGrid",
    "PackingConfig",
    "PlacementEngine",
    "PuzzleSession",
    "SessionConfig",
]

__version__ = "0.1.0"
