"""
Exception hierarchy for draftlab.

Only configuration problems are raised to callers. Statistical edge cases
(short game logs, exhausted position pools, ties) are handled where they occur.
"""


class DraftLabError(Exception):
    """Base exception for all draftlab errors."""
    pass


class ConfigurationError(DraftLabError, ValueError):
    """Raised when league, roster or simulation configuration is unusable."""
    pass


class CatalogError(DraftLabError):
    """Raised when a player catalog cannot be read or is missing columns."""
    pass
