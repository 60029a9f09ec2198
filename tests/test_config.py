"""
Tests for environment-driven settings.
"""

from __future__ import annotations

import pytest

from backend_lobbyrisk.config import Settings, get_settings

_VARS = (
    "HOST",
    "PORT",
    "REDIS_URL",
    "CACHE_DB_URL",
    "CACHE_TTL_SEC",
    "POOL_CAPACITY",
    "RENDER_TIMEOUT_SEC",
    "BATCH_DEADLINE_SEC",
    "PROFILE_BASE_URL",
    "SUSPICIOUS_TERMS",
    "VAC_BAN_MARKERS",
    "CORS_ORIGINS",
    "CACHE_TIMEOUT_SEC",
    "LOG_LEVEL",
    "LOG_FORMAT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    s = get_settings()
    assert s.port == 3000
    assert s.cache_ttl_sec == 604800
    assert s.pool_capacity == 5
    assert s.render_timeout_sec == 60.0
    assert s.batch_deadline_sec is None
    assert s.cache_backend == "sql"
    assert "xitado" in s.suspicious_terms
    assert s.cors_origins == ("*",)
    assert s.cache_timeout_sec == 2.0
    assert s.log_level == "INFO"
    assert s.log_format == "json"


def test_overrides(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("REDIS_URL", "redis://localhost:6379/0")
    monkeypatch.setenv("POOL_CAPACITY", "2")
    monkeypatch.setenv("BATCH_DEADLINE_SEC", "12.5")
    monkeypatch.setenv("PROFILE_BASE_URL", "https://example.test/profiles/")
    monkeypatch.setenv("SUSPICIOUS_TERMS", "smurf, , aimbot")
    s = get_settings()
    assert s.port == 8080
    assert s.cache_backend == "redis"
    assert s.pool_capacity == 2
    assert s.batch_deadline_sec == 12.5
    assert s.profile_base_url == "https://example.test/profiles"
    assert s.suspicious_terms == ("smurf", "aimbot")


def test_blank_value_counts_as_unset(monkeypatch):
    monkeypatch.setenv("POOL_CAPACITY", "   ")
    assert get_settings().pool_capacity == 5


@pytest.mark.parametrize(
    "name,value",
    [
        ("PORT", "http"),
        ("POOL_CAPACITY", "0"),
        ("RENDER_TIMEOUT_SEC", "-1"),
        ("CACHE_TTL_SEC", "soon"),
        ("BATCH_DEADLINE_SEC", "0"),
        ("CACHE_TIMEOUT_SEC", "0"),
        ("LOG_LEVEL", "chatty"),
        ("LOG_FORMAT", "xml"),
    ],
)
def test_invalid_values_raise(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError):
        get_settings()


def test_settings_frozen():
    s = Settings()
    with pytest.raises(Exception):
        s.port = 1  # type: ignore[misc]


def test_log_settings_from_env(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "error")
    monkeypatch.setenv("LOG_FORMAT", "Console")
    monkeypatch.setenv("CACHE_TIMEOUT_SEC", "0.5")
    s = get_settings()
    assert s.log_level == "ERROR"
    assert s.log_format == "console"
    assert s.cache_timeout_sec == 0.5
