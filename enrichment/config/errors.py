"""Configuration error classes.

All config-related exceptions for fast-fail behavior.
"""

from __future__ import annotations


class ConfigError(Exception):
    """Base exception for configuration errors."""

    pass


class ValidationError(ConfigError):
    """Raised when a setting fails validation."""

    pass


class PatternError(ConfigError):
    """Raised when the acceptance pattern cannot be built from the configured parts."""

    pass
