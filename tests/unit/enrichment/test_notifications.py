"""Tests for outcome classification and notification text."""

from __future__ import annotations

import pytest

from enrichment.errors import EnrichmentTimeoutError, EnrichmentTransportError
from enrichment.models import EnrichmentResult, MergeOutcome, NotificationKind, Outcome, OutcomeKind
from enrichment.notifications import NO_OP_MERGE_TEXT, build_notification, classify_outcome
from tests.fakes import MFC_LINK


def outcome(result=None, error=None) -> Outcome:
    return Outcome(generation=1, trigger_value=MFC_LINK, result=result, error=error)


class TestClassifyOutcome:
    @pytest.mark.parametrize(
        "settled, merged, expected",
        [
            (outcome(error=EnrichmentTransportError("boom")), None, OutcomeKind.TRANSPORT_ERROR),
            (outcome(EnrichmentResult(False, message="x", server_error=True)), None, OutcomeKind.SERVER_ERROR),
            (outcome(EnrichmentResult(False, message="Item not found")), None, OutcomeKind.EMPTY_RESULT),
            (outcome(EnrichmentResult(True, fields={})), None, OutcomeKind.EMPTY_RESULT),
            (outcome(EnrichmentResult(True, fields={"name": "", "scale": "  "})), None, OutcomeKind.EMPTY_RESULT),
            (outcome(EnrichmentResult(True, fields={"location": "Shelf 2"})), None, OutcomeKind.EMPTY_RESULT),
            (outcome(EnrichmentResult(True, fields={"name": "Miku"})), MergeOutcome(()), OutcomeKind.NO_OP_MERGE),
            (
                outcome(EnrichmentResult(True, fields={"name": "Miku"})),
                MergeOutcome(("name",)),
                OutcomeKind.PARTIAL_MERGE,
            ),
        ],
    )
    def test_classification(self, settled, merged, expected):
        assert classify_outcome(settled, merged) is expected


class TestBuildNotification:
    def test_transport_error(self):
        note = build_notification(OutcomeKind.TRANSPORT_ERROR, outcome(error=EnrichmentTransportError("x")), None)
        assert note.kind is NotificationKind.ERROR
        assert "MyFigureCollection" in note.text

    def test_timeout(self):
        note = build_notification(OutcomeKind.TRANSPORT_ERROR, outcome(error=EnrichmentTimeoutError("x")), None)
        assert note.text.startswith("MyFigureCollection did not respond in time")

    def test_server_error_without_message(self):
        settled = outcome(EnrichmentResult(False, server_error=True))
        note = build_notification(OutcomeKind.SERVER_ERROR, settled, None)
        assert note.kind is NotificationKind.ERROR
        assert note.text

    def test_empty_result_default_text(self):
        note = build_notification(OutcomeKind.EMPTY_RESULT, outcome(EnrichmentResult(True)), None, source="Example")
        assert note.kind is NotificationKind.INFO
        assert note.text == "No details found on Example for this link."

    def test_no_op(self):
        settled = outcome(EnrichmentResult(True, fields={"name": "Miku"}))
        note = build_notification(OutcomeKind.NO_OP_MERGE, settled, MergeOutcome(()))
        assert note.kind is NotificationKind.INFO
        assert note.text == NO_OP_MERGE_TEXT

    @pytest.mark.parametrize(
        "fields, text",
        [
            (("name",), "Populated 1 field from MyFigureCollection."),
            (("manufacturer", "name", "scale"), "Populated 3 fields from MyFigureCollection."),
        ],
    )
    def test_partial_merge_counts(self, fields, text):
        settled = outcome(EnrichmentResult(True, fields={"name": "Miku"}))
        note = build_notification(OutcomeKind.PARTIAL_MERGE, settled, MergeOutcome(fields))
        assert note.kind is NotificationKind.SUCCESS
        assert note.text == text
