"""
Pydantic schemas for the enrichment endpoint wire format.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)


class EnrichmentRequestBody(BaseModel):
    """Request body posted to the enrichment endpoint."""

    trigger_value: str = Field(..., alias="triggerValue", min_length=1)

    model_config = ConfigDict(populate_by_name=True)


class EnrichmentData(BaseModel):
    """Fields the source extracted. Any of them may be missing."""

    manufacturer: str | None = None
    name: str | None = None
    scale: str | None = None
    image_url: str | None = Field(None, alias="imageUrl")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("manufacturer", "name", "scale", "image_url", mode="before")
    @classmethod
    def drop_non_string(cls, v: Any) -> str | None:
        """A malformed field is dropped on its own; the rest of the record stays usable."""
        if v is None or isinstance(v, str):
            return v
        logger.debug(f"Dropping non-string enrichment field value: {v!r}")
        return None

    def present_fields(self) -> dict[str, str]:
        """Return wire-named fields that were sent with a value."""
        dumped = self.model_dump(by_alias=True, exclude_none=True)
        return {key: value for key, value in dumped.items() if isinstance(value, str)}


class EnrichmentResponseBody(BaseModel):
    """Response body of the enrichment endpoint."""

    success: bool = False
    data: EnrichmentData | None = None
    message: str | None = None

    model_config = ConfigDict(extra="ignore")
