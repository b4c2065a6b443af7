import pydantic
import pytest

from config.settings import LOG_LEVELS, Settings


def test_log_level_is_normalized_to_upper_case():
    assert Settings(LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"


def test_unknown_log_level_is_rejected():
    with pytest.raises(pydantic.ValidationError):
        Settings(LOG_LEVEL="LOUD")


def test_log_level_env_value_is_validated(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "verbose")

    with pytest.raises(pydantic.ValidationError):
        Settings()


def test_known_levels():
    assert LOG_LEVELS == ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
