"""
draftlab: fantasy football draft, lineup and season simulation engine.
"""

from .config import EngineSettings, load_settings
from .exceptions import CatalogError, ConfigurationError, DraftLabError

__version__ = "0.1.0"

__all__ = [
    "EngineSettings",
    "load_settings",
    "DraftLabError",
    "ConfigurationError",
    "CatalogError"
]
