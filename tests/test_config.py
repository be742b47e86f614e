# tests/test_config.py
import pytest

from config import load_settings


def test_environment_overrides_defaults(monkeypatch):
    monkeypatch.setenv("API_URL", "http://example.test/")
    monkeypatch.setenv("PAGE_SIZE", "25")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    settings = load_settings()
    assert settings.api_url == "http://example.test"
    assert settings.page_size == 25
    assert settings.log_level == "DEBUG"
    assert settings.relation_fetch_limit == 1000


def test_bad_number_is_reported(monkeypatch):
    monkeypatch.setenv("HTTP_TIMEOUT", "soon")
    with pytest.raises(ValueError):
        load_settings()
