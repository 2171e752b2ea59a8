"""
Configuration for the enrichment pipeline.

Settings come from environment variables (or a .env file) and fail fast
when a value is out of range.

Usage:
    from enrichment.config import get_settings

    settings = get_settings()
    delay = settings.debounce_seconds
"""

from __future__ import annotations

from .errors import ConfigError, PatternError, ValidationError
from .settings import EnrichmentSettings, get_settings, load_settings

__all__ = [
    "EnrichmentSettings",
    "get_settings",
    "load_settings",
    # Error classes
    "ConfigError",
    "PatternError",
    "ValidationError",
]
