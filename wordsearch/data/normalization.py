"""Shared helpers for word normalization.

Catalog words are shown to the player as written, but the grid only holds
lowercase letters of the game alphabet: accented vowels fold to their base
vowel, and whitespace and apostrophes disappear. Other characters, including
``ñ``, pass through unchanged.
"""

from __future__ import annotations

import re

VOWEL_DIACRITICS = {
    "á": "a", "â": "a", "à": "a", "ä": "a",
    "é": "e", "ê": "e", "è": "e", "ë": "e",
    "í": "i", "î": "i", "ì": "i", "ï": "i",
    "ó": "o", "ô": "o", "ò": "o", "ö": "o",
    "ú": "u", "û": "u", "ù": "u", "ü": "u",
}

STRIP_RE = re.compile(r"[\s'’]")


def fold_diacritics(text: str) -> str:
    """Replace accented vowels with their base vowel."""

    return "".join(VOWEL_DIACRITICS.get(char, char) for char in text)


def clean_word(text: str) -> str:
    """Return the lowercase, folded, whitespace-free form packed into the grid."""

    if not text:
        return ""
    return STRIP_RE.sub("", fold_diacritics(text.lower()))


def is_placeable(word: str, alphabet: str) -> bool:
    """True when ``word`` is non-empty and uses only ``alphabet`` characters."""

    return bool(word) and all(char in alphabet for char in word)


__all__ = ["clean_word", "fold_diacritics", "is_placeable", "VOWEL_DIACRITICS"]
