import pytest

import config
from config import get_settings


@pytest.fixture
def fresh_settings():
    get_settings.cache_clear()
    yield get_settings
    get_settings.cache_clear()


def test_defaults(fresh_settings, monkeypatch):
    monkeypatch.delenv("SESSION_EXPIRE_HOURS", raising=False)
    monkeypatch.delenv("ALLOWED_ORIGINS", raising=False)

    settings = fresh_settings()

    assert settings.compare_mode == "loose"
    assert settings.db_prefix == ""
    assert settings.session_algorithm == "HS256"
    assert settings.session_expire_hours == 12
    assert settings.allowed_origins == ["*"]


def test_prefix_and_compare_mode_from_env(fresh_settings, monkeypatch):
    monkeypatch.setenv("DB_PREFIX", "tsugi_")
    monkeypatch.setenv("SETTINGS_COMPARE_MODE", "STRICT")
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://lms.example.edu, https://canvas.example.edu")

    settings = fresh_settings()

    assert settings.db_prefix == "tsugi_"
    assert settings.compare_mode == "strict"
    assert settings.allowed_origins == ["https://lms.example.edu", "https://canvas.example.edu"]


def test_invalid_prefix_is_rejected(fresh_settings, monkeypatch):
    monkeypatch.setenv("DB_PREFIX", "x; DROP TABLE")

    with pytest.raises(RuntimeError):
        fresh_settings()


def test_unknown_compare_mode_is_rejected(fresh_settings, monkeypatch):
    monkeypatch.setenv("SETTINGS_COMPARE_MODE", "php")

    with pytest.raises(RuntimeError):
        fresh_settings()


def test_env_helpers():
    assert config._split_csv(" a, ,b ") == ["a", "b"]
    assert config._as_int("x", 3) == 3
    assert config._as_bool("Yes") is True
    assert config._as_bool(None, True) is True
    assert config._normalize_env("devlopment") == "development"
