"""Enrichment pipeline - wires the components for one form.

    edit -> AcceptanceMatcher -> DebounceScheduler -> SingleFlightCoordinator
         -> EnrichmentClient -> merge -> NotificationSink

The LifecycleGuard wraps the chain: nothing fires, merges or notifies once
the bound scope has been torn down.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from .client import EnrichmentClient
from .config.settings import EnrichmentSettings, get_settings
from .coordinator import SingleFlightCoordinator
from .debounce import DebounceScheduler
from .lifecycle import LifecycleGuard, Scope
from .matcher import AcceptanceMatcher
from .merge import FormAccessor, merge
from .models import MergeOutcome, Outcome, OutcomeKind
from .notifications import NotificationSink, build_notification, classify_outcome

logger = logging.getLogger(__name__)

DEFAULT_TRIGGER_FIELD = "mfcLink"


class EnrichmentPipeline:
    """Auto-enrichment for a single form instance."""

    def __init__(
        self,
        form: FormAccessor,
        notifier: NotificationSink,
        client: EnrichmentClient,
        settings: EnrichmentSettings | None = None,
        trigger_field: str = DEFAULT_TRIGGER_FIELD,
        source_label: str = "MyFigureCollection",
        on_in_flight_change: Callable[[bool], None] | None = None,
    ):
        settings = settings or get_settings()
        self.form = form
        self.notifier = notifier
        self.trigger_field = trigger_field
        self.source_label = source_label
        self.last_outcome: OutcomeKind | None = None

        self.matcher = AcceptanceMatcher(settings.recognized_domain, settings.resource_segment)
        self.guard = LifecycleGuard()
        self.coordinator = SingleFlightCoordinator(
            client,
            on_settled=self._handle_settled,
            is_live=self.guard.is_live,
            on_in_flight_change=on_in_flight_change,
        )
        self.scheduler = DebounceScheduler(
            self.matcher,
            current_value=self._current_value,
            dispatch=self.coordinator.dispatch,
            delay=settings.debounce_seconds,
        )
        self.guard.register(self.scheduler.cancel)
        self.guard.register(self.coordinator.cancel)

    @property
    def in_flight(self) -> bool:
        return self.coordinator.in_flight

    def bind(self) -> Scope:
        """Start a scope for the owning form; call ``teardown()`` when it goes away."""
        return self.guard.bind_scope()

    def on_edit(self, value: str | None = None) -> None:
        """Feed a trigger-field edit. Reads the form when ``value`` is omitted."""
        if not self.guard.is_live():
            logger.debug("Ignoring edit outside a live scope")
            return
        if value is None:
            value = self._current_value()
        self.scheduler.on_edit(value)

    async def wait_idle(self) -> None:
        """Wait for the active request, if any, to settle."""
        await self.coordinator.wait_idle()

    def _current_value(self) -> str | None:
        value = self.form.get_field(self.trigger_field)
        return value if isinstance(value, str) else None

    def _handle_settled(self, outcome: Outcome) -> None:
        if not self.guard.is_live():
            return

        merged: MergeOutcome | None = None
        if outcome.result is not None and outcome.result.has_fields and not outcome.result.server_error:
            merged = merge(outcome.result, self.form)

        kind = classify_outcome(outcome, merged)
        self.last_outcome = kind
        if merged is not None:
            logger.info(
                f"Merged generation {outcome.generation}: populated {merged.populated_count} "
                f"field(s) {list(merged.populated_fields)}"
            )
        else:
            logger.info(f"Generation {outcome.generation} settled as {kind.value}")

        self.notifier.notify(build_notification(kind, outcome, merged, source=self.source_label))
