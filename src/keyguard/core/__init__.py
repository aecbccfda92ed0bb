"""Core module - configuration, logging, and interfaces."""

from keyguard.core.config import Settings, get_settings
from keyguard.core.exceptions import (
    KeyGuardError,
    FetchError,
    ParseError,
    UrlError,
    RecommendationError,
    PersistenceError,
    ConfigurationError,
)

__all__ = [
    "Settings",
    "get_settings",
    "KeyGuardError",
    "FetchError",
    "ParseError",
    "UrlError",
    "RecommendationError",
    "PersistenceError",
    "ConfigurationError",
]
