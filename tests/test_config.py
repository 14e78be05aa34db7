import logging

import pytest

from travel_explorer.config import Config, Environment, get_config, reset_config, setup_logging


def test_defaults():
    config = Config()
    assert config.environment is Environment.TESTING
    assert config.is_testing()
    assert config.api_keys.opentripmap is None
    assert config.get_timeout("guide") == 10.0
    assert config.guide_config.cache_failures is True
    assert config.guide_config.max_images == 6


def test_key_aliases_and_blank_values(monkeypatch):
    monkeypatch.setenv("OPENTRIPMAP_KEY", "alias")
    monkeypatch.setenv("OWM_KEY", "   ")
    monkeypatch.setenv("OPENWEATHER_API_KEY", "fallback")
    config = Config()
    assert config.api_keys.opentripmap == "alias"
    assert config.api_keys.openweathermap == "fallback"


def test_guide_settings_from_env(monkeypatch):
    monkeypatch.setenv("GUIDE_SECTIONS", "See, Eat ,")
    monkeypatch.setenv("GUIDE_CACHE_FAILURES", "false")
    monkeypatch.setenv("GUIDE_HOME", "https://de.wikivoyage.org/")
    config = Config()
    assert config.guide_config.wanted_sections == ["See", "Eat"]
    assert config.guide_config.cache_failures is False
    assert config.guide_config.home == "https://de.wikivoyage.org"


@pytest.mark.parametrize("key,value", [
    ("TIMEOUT_GUIDE", "0"),
    ("TIMEOUT_PLACES", "soon"),
    ("GUIDE_MAX_IMAGES", "-1"),
    ("GUIDE_HOME", "wikivoyage.org"),
    ("ENVIRONMENT", "moon"),
])
def test_invalid_values_raise(monkeypatch, key, value):
    monkeypatch.setenv(key, value)
    with pytest.raises(ValueError):
        Config()


def test_get_config_is_cached_until_reset(monkeypatch):
    first = get_config()
    assert get_config() is first
    reset_config()
    assert get_config() is not first


def test_setup_logging_quiets_aiohttp():
    setup_logging()
    assert logging.getLogger("aiohttp").level == logging.WARNING
