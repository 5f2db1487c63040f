"""Word catalog sources and the adapter turning catalog words into tokens."""

from __future__ import annotations

import json
import random
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, List, Optional, Protocol

import requests

from ..core.constants import DEFAULT_ALPHABET
from ..core.exceptions import CatalogLoadError, InvalidTokenError
from ..core.models import Token
from ..utils.logger import get_logger
from .normalization import clean_word, is_placeable


LOGGER = get_logger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).with_name("words.json")
RANDOM_SET = "random"


@dataclass
class WordSet:
    """A named, titled list of words to hide in one puzzle."""

    name: str
    title: str
    words: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "WordSet":
        if not isinstance(data, dict):
            raise CatalogLoadError(f"Word set entry must be an object, got {type(data).__name__}")
        try:
            name = str(data["name"])
            words = data["words"]
        except KeyError as exc:
            raise CatalogLoadError(f"Word set missing field {exc}") from exc
        if not isinstance(words, list):
            raise CatalogLoadError(f"Word set '{name}' words must be a list")
        return cls(name=name, title=str(data.get("title") or name), words=[str(w) for w in words])

    def to_dict(self) -> dict:
        return {"name": self.name, "title": self.title, "words": list(self.words)}


FALLBACK_WORD_SET = WordSet(
    name="fallback",
    title="Animales",
    words=[
        "gato", "perro", "caballo", "oveja", "vaca", "cerdo", "conejo", "ratón",
        "león", "tigre", "elefante", "jirafa", "cebra", "mono", "oso", "lobo",
    ],
)


def parse_catalog(payload: Any) -> List[WordSet]:
    if not isinstance(payload, list):
        raise CatalogLoadError("Catalog must be a JSON list of word sets")
    return [WordSet.from_dict(item) for item in payload]


class CatalogSource(Protocol):
    """Anything that can produce the list of available word sets."""

    def load_catalog(self) -> List[WordSet]:
        ...


class JsonFileCatalogSource:
    """Reads the catalog from a local JSON file."""

    def __init__(self, path: Path | str = DEFAULT_CATALOG_PATH) -> None:
        self.path = Path(path)

    def load_catalog(self) -> List[WordSet]:
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise CatalogLoadError(f"Cannot read catalog {self.path}: {exc}") from exc
        return parse_catalog(payload)


class HttpCatalogSource:
    """Fetches the catalog JSON over HTTP."""

    def __init__(self, url: str, timeout_seconds: float = 10.0) -> None:
        self.url = url
        self.timeout_seconds = timeout_seconds

    def load_catalog(self) -> List[WordSet]:
        try:
            response = requests.get(self.url, timeout=self.timeout_seconds)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as exc:
            raise CatalogLoadError(f"Catalog request failed: {exc}") from exc
        except ValueError as exc:
            raise CatalogLoadError(f"Catalog response is not JSON: {exc}") from exc
        return parse_catalog(payload)


class WordCatalog:
    """Loads the catalog once and picks word sets from it.

    Any load failure, an empty catalog, or an unknown set name falls back to
    :data:`FALLBACK_WORD_SET`, so callers always get a word list.
    """

    def __init__(
        self,
        source: Optional[CatalogSource] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.source = source or JsonFileCatalogSource()
        self.rng = rng or random.Random()
        self._sets: Optional[List[WordSet]] = None

    @property
    def sets(self) -> List[WordSet]:
        if self._sets is None:
            try:
                loaded = self.source.load_catalog()
            except CatalogLoadError as exc:
                LOGGER.warning("Catalog unavailable, using fallback word set: %s", exc)
                loaded = []
            if not loaded:
                loaded = [FALLBACK_WORD_SET]
            self._sets = loaded
            LOGGER.info("Loaded %d word sets", len(loaded))
        return self._sets

    def names(self) -> List[str]:
        return [word_set.name for word_set in self.sets]

    def get(self, name: str) -> Optional[WordSet]:
        return next((word_set for word_set in self.sets if word_set.name == name), None)

    def pick(self, name: str = RANDOM_SET) -> WordSet:
        if not name or name == RANDOM_SET:
            return self.rng.choice(self.sets)
        word_set = self.get(name)
        if word_set is None:
            LOGGER.warning("Unknown word set '%s', using fallback", name)
            return FALLBACK_WORD_SET
        return word_set


def make_token(index: int, text: str, alphabet: str = DEFAULT_ALPHABET) -> Token:
    normalized = clean_word(text)
    if not is_placeable(normalized, alphabet):
        raise InvalidTokenError(f"'{text}' does not normalize to letters of the alphabet")
    return Token(original_index=index, display_text=text.strip(), normalized_text=normalized)


def build_tokens(words: Iterable[str], alphabet: str = DEFAULT_ALPHABET) -> List[Token]:
    """Normalize catalog words into tokens, skipping unusable entries."""

    tokens: List[Token] = []
    for index, text in enumerate(words):
        try:
            tokens.append(make_token(index, text, alphabet))
        except InvalidTokenError as exc:
            LOGGER.warning("Skipping catalog word: %s", exc)
    return tokens
