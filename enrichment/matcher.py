"""Acceptance matcher for links that trigger enrichment.

A link qualifies when it is an http(s) URL on the recognized host (with or
without ``www.``) whose path is ``/<segment>/<numeric id>``, optionally
followed by more path or a query string. Matching is case-insensitive.
"""

from __future__ import annotations

import re

from .config.errors import PatternError


def build_acceptance_pattern(domain: str, segment: str) -> re.Pattern[str]:
    """Compile the acceptance regex for a host and resource segment.

    Raises:
        PatternError: if either part is empty
    """
    if not domain or not segment:
        raise PatternError(f"Cannot build acceptance pattern from domain={domain!r} segment={segment!r}")
    return re.compile(
        rf"^https?://(www\.)?{re.escape(domain)}/{re.escape(segment)}/\d+(/.*)?$",
        re.IGNORECASE,
    )


class AcceptanceMatcher:
    """Pure predicate deciding whether a field value is a trigger link."""

    def __init__(self, domain: str = "myfigurecollection.net", segment: str = "item"):
        self.domain = domain
        self.segment = segment
        self._pattern = build_acceptance_pattern(domain, segment)

    def matches(self, value: object) -> bool:
        """Return True only for well-formed trigger links. Never raises."""
        if not isinstance(value, str) or not value:
            return False
        # A query string may follow the id directly ("/item/123?ref=x")
        candidate, _, _ = value.partition("?")
        return self._pattern.fullmatch(candidate) is not None

    def __repr__(self) -> str:
        return f"AcceptanceMatcher(domain={self.domain!r}, segment={self.segment!r})"
