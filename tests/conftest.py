"""
Pytest configuration for travel explorer tests.

This file is automatically loaded by pytest and sets up the test environment.
"""
import pytest

from travel_explorer.config import Config, reset_config

PROVIDER_ENV = [
    "OPENTRIPMAP_API_KEY", "OPENTRIPMAP_KEY",
    "OWM_KEY", "OPENWEATHER_API_KEY",
    "UNSPLASH_KEY", "UNSPLASH_ACCESS_KEY",
    "GUIDE_SECTIONS", "GUIDE_CACHE_FAILURES", "GUIDE_HOME",
    "GUIDE_MAX_IMAGES", "GUIDE_MAX_LIST_ITEMS", "LOG_FILE",
]


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch):
    """Isolate every test from the developer's .env and shell."""
    for key in PROVIDER_ENV:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("ENVIRONMENT", "testing")
    reset_config()
    yield
    reset_config()


@pytest.fixture
def keyed_config(monkeypatch):
    """Configuration with every provider credential present."""
    monkeypatch.setenv("OPENTRIPMAP_API_KEY", "otm-key")
    monkeypatch.setenv("OWM_KEY", "owm-key")
    monkeypatch.setenv("UNSPLASH_KEY", "unsplash-key")
    return Config()
