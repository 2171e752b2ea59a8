"""
Pipeline settings using pydantic-settings for type-safe configuration.

All environment variables are centralized here with proper typing, validation,
and sensible defaults. Settings are loaded once and cached.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from pydantic import Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ValidationError


class EnrichmentSettings(BaseSettings):
    """
    Enrichment settings loaded from environment variables.

    All settings have defaults for local development against the collection
    API on localhost. Production values are set via environment or .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra env vars not defined here
        case_sensitive=False,  # Allow API_URL or api_url
    )

    # === Collection API ===
    api_url: str = Field(
        default="http://localhost:5000/api",
        description="Base URL of the collection API",
    )
    enrichment_path: str = Field(
        default="/figures/scrape-mfc",
        description="Path of the enrichment endpoint, relative to api_url",
    )
    api_token: str | None = Field(
        default=None,
        description="Bearer token forwarded on enrichment requests",
    )

    # === Pipeline timing ===
    debounce_ms: int = Field(
        default=1000,
        description="Quiet period after the last edit before a dispatch fires",
    )
    request_timeout_seconds: float | None = Field(
        default=None,
        description="Per-request timeout; unset means the request waits until settled or cancelled",
    )

    # === Acceptance pattern ===
    recognized_domain: str = Field(
        default="myfigurecollection.net",
        description="Host whose item links trigger enrichment",
    )
    resource_segment: str = Field(
        default="item",
        description="First path segment of an accepted link, followed by a numeric id",
    )

    @field_validator("api_url", mode="after")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        """Require an http(s) base URL and drop the trailing slash."""
        v = v.strip()
        if not v.lower().startswith(("http://", "https://")):
            raise ValueError(f"Invalid API_URL: {v!r}. Must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("enrichment_path", mode="after")
    @classmethod
    def validate_enrichment_path(cls, v: str) -> str:
        """Normalize the endpoint path to a single leading slash."""
        v = v.strip()
        if not v:
            raise ValueError("ENRICHMENT_PATH must not be empty")
        return "/" + v.lstrip("/")

    @field_validator("api_token", mode="before")
    @classmethod
    def parse_api_token(cls, v: Any) -> str | None:
        """Treat an empty API_TOKEN as unset."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("debounce_ms", mode="after")
    @classmethod
    def validate_debounce_ms(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"Invalid DEBOUNCE_MS: {v}. Must be positive")
        return v

    @field_validator("request_timeout_seconds", mode="after")
    @classmethod
    def validate_request_timeout(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            raise ValueError(f"Invalid REQUEST_TIMEOUT_SECONDS: {v}. Must be positive or unset")
        return v

    @field_validator("recognized_domain", "resource_segment", mode="after")
    @classmethod
    def validate_pattern_part(cls, v: str) -> str:
        """Pattern parts are plain host/segment names, no slashes."""
        v = v.strip().strip("/")
        if not v or "/" in v:
            raise ValueError(f"Invalid acceptance pattern part: {v!r}")
        return v.lower()

    @property
    def debounce_seconds(self) -> float:
        """Debounce delay in seconds, as asyncio timers expect."""
        return self.debounce_ms / 1000

    @property
    def enrichment_url(self) -> str:
        """Absolute URL of the enrichment endpoint."""
        return f"{self.api_url}{self.enrichment_path}"


def load_settings(**overrides: Any) -> EnrichmentSettings:
    """Build settings from the environment plus explicit overrides.

    Raises:
        ValidationError: if any value fails validation
    """
    try:
        return EnrichmentSettings(**overrides)
    except PydanticValidationError as e:
        raise ValidationError(str(e)) from e


@lru_cache
def get_settings() -> EnrichmentSettings:
    """
    Get cached settings instance.

    Settings are loaded once and cached for the lifetime of the process.
    """
    return load_settings()
