"""
Root test configuration and fixtures for the enrichment pipeline.

This conftest.py provides common fixtures for all tests:
- isolation from the developer's environment and .env file
- fast settings (short debounce period)
- a controllable enrichment client and a recording notifier

Note: sys.path manipulation is handled here to ensure imports work correctly.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Add project root to path to allow imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from enrichment.config.settings import EnrichmentSettings, get_settings  # noqa: E402
from tests.fakes import TEST_DEBOUNCE_MS, ControlledClient, RecordingNotifier  # noqa: E402

SETTINGS_ENV_VARS = (
    "API_URL",
    "ENRICHMENT_PATH",
    "API_TOKEN",
    "DEBOUNCE_MS",
    "REQUEST_TIMEOUT_SECONDS",
    "RECOGNIZED_DOMAIN",
    "RESOURCE_SEGMENT",
)


@pytest.fixture(autouse=True)
def isolate_settings_env(monkeypatch):
    """Keep real environment variables and the settings cache out of tests."""
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> EnrichmentSettings:
    """Settings with a short debounce period and no .env file."""
    return EnrichmentSettings(_env_file=None, debounce_ms=TEST_DEBOUNCE_MS)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def controlled_client() -> ControlledClient:
    return ControlledClient()


@pytest.fixture
def unabortable_client():
    """Client that ignores aborts; every call must be settled by the test."""
    client = ControlledClient(abortable=False)
    yield client
    assert client.outstanding() == 0, f"{client.outstanding()} unabortable call(s) left unsettled"
