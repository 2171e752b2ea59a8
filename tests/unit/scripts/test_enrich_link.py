"""Tests for the enrich_link command-line script."""

from __future__ import annotations

import importlib.util
from pathlib import Path
from unittest.mock import patch

import pytest

from enrichment.form import FigureForm
from enrichment.models import EnrichmentResult, OutcomeKind
from tests.fakes import MFC_LINK, TEST_DEBOUNCE_MS, ImmediateClient

SCRIPT_PATH = Path(__file__).parents[3] / "scripts" / "enrich_link.py"


def load_script():
    module_spec = importlib.util.spec_from_file_location("enrich_link", SCRIPT_PATH)
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    return module


class FakeHttpClient:
    """Stands in for HttpEnrichmentClient; from_settings yields a canned client."""

    instance: ImmediateClient

    @classmethod
    def from_settings(cls, settings):
        return cls()

    async def __aenter__(self):
        return self.instance

    async def __aexit__(self, *exc):
        return None


@pytest.fixture
def script(monkeypatch):
    monkeypatch.setenv("DEBOUNCE_MS", str(TEST_DEBOUNCE_MS))
    return load_script()


class TestEnrichOnce:
    @pytest.mark.asyncio
    async def test_populates_form(self, script, capsys):
        FakeHttpClient.instance = ImmediateClient(
            EnrichmentResult(success=True, fields={"manufacturer": "Good Smile", "name": "Miku"})
        )
        form = FigureForm()

        with patch.object(script, "HttpEnrichmentClient", FakeHttpClient):
            outcome = await script.enrich_once(MFC_LINK, form)

        assert outcome is OutcomeKind.PARTIAL_MERGE
        assert form.mfcLink == MFC_LINK
        assert form.manufacturer == "Good Smile"
        assert "[success] Populated 2 fields" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_unrecognized_link_makes_no_request(self, script, capsys):
        FakeHttpClient.instance = ImmediateClient()

        with patch.object(script, "HttpEnrichmentClient", FakeHttpClient):
            outcome = await script.enrich_once("https://example.com/item/1", FigureForm())

        assert outcome is None
        assert FakeHttpClient.instance.calls == []
        assert "Not a recognized" in capsys.readouterr().out
