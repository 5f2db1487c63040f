"""Logging utilities tailored for word search generation."""

from __future__ import annotations

import logging
from typing import Optional, TextIO, Union

LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"


def resolve_level(level: Union[int, str], default: int = logging.WARNING) -> int:
    """Accept ``logging`` constants or names like ``"debug"``."""

    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else default


def configure_logging(level: Union[int, str] = logging.INFO, stream: Optional[TextIO] = None) -> None:
    """Configure root logging for the word search modules.

    The packing loop runs many discarded passes, so per-word attempts are
    logged at DEBUG and pass outcomes at INFO. Output goes to stderr unless a
    ``stream`` is given, keeping stdout free for the rendered puzzle.
    """

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%H:%M:%S"))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(resolve_level(level))


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a namespaced logger, configuring defaults if needed."""

    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name or "wordsearch")
