"""In-memory figure form - the record the pipeline enriches.

Field names match the collection API's figure payload (camelCase).
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass, fields
from typing import Any
from urllib.parse import urlparse

from .merge import is_blank
from .models import MANUAL_EXTRACT_PREFIX, ImageReference, parse_image_reference

logger = logging.getLogger(__name__)

INVALID_URL_MESSAGE = "Please enter a valid URL"

REQUIRED_FIELDS: dict[str, str] = {
    "manufacturer": "Manufacturer is required",
    "name": "Figure name is required",
    "mfcLink": "MFC link is required",
}


def format_scale(text: str) -> str:
    """Turn a decimal scale into a fraction: "0.125" -> "1/8".

    Values that already contain "/", are not numbers, or fall outside
    (0, 1] are returned unchanged ("Nendoroid", "1/7", "2").
    """
    if "/" in text:
        return text
    try:
        number = float(text)
    except ValueError:
        return text
    if 0 < number <= 1:
        # Round half up, so 0.4 -> 1/3
        return f"1/{math.floor(1 / number + 0.5)}"
    return text


def validate_url(value: str | None) -> str | None:
    """Return an error message for a malformed URL, None when valid or empty."""
    if not value:
        return None
    try:
        parsed = urlparse(value)
    except ValueError:
        return INVALID_URL_MESSAGE
    if not parsed.scheme or not (parsed.netloc or parsed.path):
        return INVALID_URL_MESSAGE
    return None


@dataclass
class FigureForm:
    """Mutable field set of the add/edit figure form."""

    manufacturer: str = ""
    name: str = ""
    scale: str = ""
    mfcLink: str = ""  # noqa: N815 - wire name
    location: str = ""
    boxNumber: str = ""  # noqa: N815 - wire name
    imageUrl: str = ""  # noqa: N815 - wire name

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FigureForm:
        """Build a form from a figure payload, ignoring unknown keys."""
        known = set(cls.field_names())
        return cls(**{key: value or "" for key, value in data.items() if key in known})

    def get_field(self, name: str) -> Any:
        if name not in self.field_names():
            raise KeyError(f"Unknown form field: {name}")
        return getattr(self, name)

    def set_field(self, name: str, value: Any) -> None:
        if name not in self.field_names():
            raise KeyError(f"Unknown form field: {name}")
        setattr(self, name, "" if value is None else value)

    def to_dict(self) -> dict[str, str]:
        return asdict(self)

    def on_scale_blur(self) -> None:
        """Normalize the scale field the way the form does when it loses focus."""
        self.scale = format_scale(self.scale)

    def image_reference(self) -> ImageReference | None:
        """Interpret imageUrl, or None when it is empty."""
        if is_blank(self.imageUrl):
            return None
        return parse_image_reference(self.imageUrl)

    def validate(self) -> dict[str, str]:
        """Return field -> error message for every invalid field."""
        errors: dict[str, str] = {}
        for name, message in REQUIRED_FIELDS.items():
            if is_blank(self.get_field(name)):
                errors[name] = message

        if "mfcLink" not in errors:
            link_error = validate_url(self.mfcLink)
            if link_error:
                errors["mfcLink"] = link_error

        if not self.imageUrl.startswith(MANUAL_EXTRACT_PREFIX):
            image_error = validate_url(self.imageUrl)
            if image_error:
                errors["imageUrl"] = image_error

        if errors:
            logger.debug(f"Form validation failed: {sorted(errors)}")
        return errors
