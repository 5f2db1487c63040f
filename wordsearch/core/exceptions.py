"""Custom exception hierarchy for word search generation and play."""


class WordSearchError(Exception):
    """Base exception for word search failures."""


class GridBoundsError(WordSearchError, IndexError):
    """Raised when a grid coordinate falls outside the grid."""


class InvalidTokenError(WordSearchError):
    """Raised when a catalog word cannot be turned into a placeable token."""


class CatalogLoadError(WordSearchError):
    """Raised when a word catalog cannot be fetched or parsed."""


class SessionStateError(WordSearchError):
    """Raised when a session operation is invoked in the wrong state."""


class StoreError(WordSearchError):
    """Raised when persisted state cannot be read or written."""


class ValidationError(WordSearchError):
    """Raised when the generated puzzle fails its integrity checks."""
