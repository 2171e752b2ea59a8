"""Exceptions raised inside the enrichment pipeline.

None of these reach the caller of the pipeline: the coordinator resolves
each of them into an outcome (or into silence, for cancellation).
"""

from __future__ import annotations


class EnrichmentError(Exception):
    """Base exception for enrichment failures."""

    pass


class EnrichmentCancelled(EnrichmentError):
    """Raised when a request is aborted by its own cancellation token."""

    pass


class EnrichmentTransportError(EnrichmentError):
    """Raised on network failure, timeout or an unparseable response body."""

    pass


class EnrichmentTimeoutError(EnrichmentTransportError):
    """Raised when the configured request timeout elapses."""

    pass
