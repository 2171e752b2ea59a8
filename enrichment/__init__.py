"""
Auto-enrichment of figure forms from MyFigureCollection item links.

Typical use for one form:

    pipeline = EnrichmentPipeline(form, notifier, HttpEnrichmentClient.from_settings(settings))
    scope = pipeline.bind()
    pipeline.on_edit()      # on every change of the link field
    ...
    scope.teardown()        # when the form goes away
"""

from __future__ import annotations

from .cancellation import CancellationToken
from .client import EnrichmentClient, HttpEnrichmentClient
from .coordinator import SingleFlightCoordinator
from .debounce import DebounceScheduler
from .errors import (
    EnrichmentCancelled,
    EnrichmentError,
    EnrichmentTimeoutError,
    EnrichmentTransportError,
)
from .form import FigureForm
from .lifecycle import LifecycleGuard, Scope
from .matcher import AcceptanceMatcher
from .merge import merge
from .models import (
    ENRICHABLE_FIELDS,
    MANUAL_EXTRACT_PREFIX,
    EnrichmentResult,
    Notification,
    NotificationKind,
    OutcomeKind,
)
from .pipeline import EnrichmentPipeline

__all__ = [
    "AcceptanceMatcher",
    "CancellationToken",
    "DebounceScheduler",
    "EnrichmentCancelled",
    "EnrichmentClient",
    "EnrichmentError",
    "EnrichmentPipeline",
    "EnrichmentResult",
    "EnrichmentTimeoutError",
    "EnrichmentTransportError",
    "ENRICHABLE_FIELDS",
    "FigureForm",
    "HttpEnrichmentClient",
    "LifecycleGuard",
    "MANUAL_EXTRACT_PREFIX",
    "Notification",
    "NotificationKind",
    "OutcomeKind",
    "Scope",
    "SingleFlightCoordinator",
    "merge",
]
