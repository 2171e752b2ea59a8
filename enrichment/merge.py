"""Merge policy: fill empty form fields from an enrichment result.

Fields the user already filled in are never overwritten. imageUrl values
carrying the MANUAL_EXTRACT: sentinel are written through verbatim; the
form decides how to present them.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from .models import ENRICHABLE_FIELDS, EnrichmentResult, MergeOutcome

logger = logging.getLogger(__name__)


class FormAccessor(Protocol):
    """Read/write access to the target record's fields."""

    def get_field(self, name: str) -> Any: ...

    def set_field(self, name: str, value: Any) -> None: ...


def is_blank(value: Any) -> bool:
    """True for None, empty and whitespace-only values."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return not value


def merge(result: EnrichmentResult, target: FormAccessor) -> MergeOutcome:
    """Write fetched fields into ``target`` where the target field is blank.

    Returns:
        MergeOutcome naming the fields that were written
    """
    if not result.success:
        return MergeOutcome()

    populated: list[str] = []
    for name in ENRICHABLE_FIELDS:
        if name not in result.fields:
            continue
        value = result.fields[name]
        if is_blank(value):
            continue
        if not is_blank(target.get_field(name)):
            logger.debug(f"Keeping existing value for {name}")
            continue
        target.set_field(name, value)
        populated.append(name)

    return MergeOutcome(populated_fields=tuple(populated))
