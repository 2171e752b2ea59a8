"""User-facing notifications for settled enrichment requests."""

from __future__ import annotations

from typing import Protocol

from .errors import EnrichmentTimeoutError
from .models import MergeOutcome, Notification, NotificationKind, Outcome, OutcomeKind

TRANSPORT_ERROR_TEXT = "Could not fetch details from {source}. Please fill in the fields manually."
EMPTY_RESULT_TEXT = "No details found on {source} for this link."
NO_OP_MERGE_TEXT = "All fields are already filled in; nothing was changed (0 fields populated)."


class NotificationSink(Protocol):
    """Receives at most one notification per settled request."""

    def notify(self, notification: Notification) -> None: ...


def classify_outcome(outcome: Outcome, merged: MergeOutcome | None) -> OutcomeKind:
    """Map a settlement and its merge onto the outcome taxonomy."""
    result = outcome.result
    if result is None:
        return OutcomeKind.TRANSPORT_ERROR
    if result.server_error:
        return OutcomeKind.SERVER_ERROR
    if not result.has_fields:
        return OutcomeKind.EMPTY_RESULT
    if merged is None or merged.populated_count == 0:
        return OutcomeKind.NO_OP_MERGE
    return OutcomeKind.PARTIAL_MERGE


def build_notification(
    kind: OutcomeKind,
    outcome: Outcome,
    merged: MergeOutcome | None,
    source: str = "MyFigureCollection",
) -> Notification:
    """Render the notification for an outcome kind."""
    message = outcome.result.message if outcome.result is not None else None

    if kind is OutcomeKind.TRANSPORT_ERROR:
        text = TRANSPORT_ERROR_TEXT.format(source=source)
        if isinstance(outcome.error, EnrichmentTimeoutError):
            text = f"{source} did not respond in time. Please fill in the fields manually."
        return Notification(NotificationKind.ERROR, text)

    if kind is OutcomeKind.SERVER_ERROR:
        return Notification(NotificationKind.ERROR, message or TRANSPORT_ERROR_TEXT.format(source=source))

    if kind is OutcomeKind.EMPTY_RESULT:
        return Notification(NotificationKind.INFO, message or EMPTY_RESULT_TEXT.format(source=source))

    if kind is OutcomeKind.NO_OP_MERGE:
        return Notification(NotificationKind.INFO, NO_OP_MERGE_TEXT)

    count = merged.populated_count if merged is not None else 0
    noun = "field" if count == 1 else "fields"
    return Notification(NotificationKind.SUCCESS, f"Populated {count} {noun} from {source}.")
