import pytest
from pydantic import ValidationError

from support_assistant.config import Settings, get_settings


def test_log_level_is_normalized():
    assert Settings(LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"


def test_store_type_is_normalized():
    assert Settings(INTENT_STORE_TYPE="HTTP").INTENT_STORE_TYPE == "http"


@pytest.mark.parametrize("overrides", [
    {"LOG_LEVEL": "verbose"},
    {"INTENT_STORE_TYPE": "redis"},
    {"SEARCH_THRESHOLD": 1.5},
    {"SEARCH_THRESHOLD": -0.1},
])
def test_invalid_settings_are_rejected(overrides):
    with pytest.raises(ValidationError):
        Settings(**overrides)


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("SEARCH_MIN_MATCH_LENGTH", "4")
    monkeypatch.setenv("CORS_ORIGINS", '["http://localhost:3000"]')

    settings = Settings()

    assert settings.SEARCH_MIN_MATCH_LENGTH == 4
    assert settings.CORS_ORIGINS == ["http://localhost:3000"]


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
    assert get_settings().ENVIRONMENT == "test"
