"""Key/value persistence for game state, settings and statistics.

Each key is stored as one JSON document under ``local_db/collections/wordsearch/``.
Nothing in the core depends on a write succeeding: read failures fall back to
the caller's default and write failures are logged.
"""

from __future__ import annotations

import copy
import json
import random
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from ..core.constants import SessionStatus
from ..core.exceptions import StoreError, WordSearchError
from ..core.models import Settings, Statistics
from ..engine.session import PuzzleSession
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

DEFAULT_STORE_DIR = Path("local_db/collections/wordsearch")

STATE_KEY = "wordsearch-state"
SETTINGS_KEY = "wordsearch-settings"
STATISTICS_KEY = "wordsearch-statistics"

RESUMABLE = (SessionStatus.READY.value, SessionStatus.IN_PROGRESS.value)


class StateStore(Protocol):
    def load_state(self, key: str, default: Any = None) -> Any:
        ...

    def save_state(self, key: str, value: Any) -> None:
        ...


class MemoryStore:
    """In-process store; values are deep-copied in and out."""

    def __init__(self) -> None:
        self._data: Dict[str, Any] = {}

    def load_state(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def save_state(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)


class JsonFileStore:
    """Save each key as a JSON document in ``store_dir``."""

    def __init__(self, store_dir: Path | str = DEFAULT_STORE_DIR) -> None:
        self.store_dir = Path(store_dir)
        self.store_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.store_dir / f"{key}.json"

    def load_state(self, key: str, default: Any = None) -> Any:
        path = self._path(key)
        if not path.exists():
            return default
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            LOGGER.warning("Store read error (%s): %s", path.name, exc)
            return default

    def save_state(self, key: str, value: Any) -> None:
        path = self._path(key)
        try:
            text = json.dumps(value, ensure_ascii=False, indent=2)
        except (TypeError, ValueError) as exc:
            raise StoreError(f"Value for '{key}' is not JSON serializable: {exc}") from exc
        try:
            path.write_text(text, encoding="utf-8")
        except OSError as exc:
            LOGGER.warning("Store write error (%s): %s", path.name, exc)
            return
        LOGGER.debug("Stored %s", path.name)


# ----------------------------------------------------------------------
# Typed helpers
# ----------------------------------------------------------------------
def save_session(store: StateStore, session: PuzzleSession) -> None:
    store.save_state(STATE_KEY, session.to_state())


def load_session(store: StateStore, rng: Optional[random.Random] = None) -> Optional[PuzzleSession]:
    """Return the saved session if it can be resumed, otherwise None."""

    state = store.load_state(STATE_KEY)
    if not isinstance(state, dict) or state.get("status") not in RESUMABLE:
        return None
    try:
        return PuzzleSession.from_state(state, rng=rng)
    except (KeyError, TypeError, ValueError, WordSearchError) as exc:
        LOGGER.warning("Discarding unreadable saved game: %s", exc)
        return None


def clear_session(store: StateStore) -> None:
    store.save_state(STATE_KEY, None)


def load_settings(store: StateStore) -> Settings:
    data = store.load_state(SETTINGS_KEY)
    if not isinstance(data, dict):
        return Settings()
    try:
        return Settings.from_dict(data)
    except (TypeError, ValueError) as exc:
        LOGGER.warning("Ignoring invalid settings: %s", exc)
        return Settings()


def save_settings(store: StateStore, settings: Settings) -> None:
    store.save_state(SETTINGS_KEY, settings.to_dict())


def load_statistics(store: StateStore) -> Statistics:
    data = store.load_state(STATISTICS_KEY)
    if not isinstance(data, dict):
        return Statistics()
    try:
        return Statistics.from_dict(data)
    except (TypeError, ValueError) as exc:
        LOGGER.warning("Ignoring invalid statistics: %s", exc)
        return Statistics()


def record_game_started(store: StateStore) -> Statistics:
    stats = load_statistics(store)
    stats.games_played += 1
    store.save_state(STATISTICS_KEY, stats.to_dict())
    return stats


def record_game_solved(store: StateStore, session: PuzzleSession) -> Statistics:
    stats = load_statistics(store)
    stats.games_won += 1
    stats.words_found += session.found_count
    store.save_state(STATISTICS_KEY, stats.to_dict())
    return stats
