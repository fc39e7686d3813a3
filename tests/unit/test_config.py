"""Unit tests for environment configuration."""

import pytest

from authapi.config import Settings
from authapi.errors import ConfigError


@pytest.fixture
def base_env(monkeypatch):
    for name in ("PORT", "GLOBAL_RATE_LIMIT_MINUTES", "GLOBAL_RATE_LIMIT_MAX",
                 "CORS_ORIGINS", "APP_ENV", "TRUST_PROXY_HOPS", "DB_FAIL_FAST"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("REDIS_URL", "redis://localhost:6379/0")
    monkeypatch.setenv("JWT_SECRET", "secret")
    return monkeypatch


def test_defaults(base_env):
    settings = Settings.from_env()

    assert settings.port == 5000
    assert settings.rate_limit == "100 per 15 minute"
    assert settings.cors_origins == []
    assert settings.is_production is False
    assert settings.db_fail_fast is False


def test_overrides(base_env):
    base_env.setenv("PORT", "8080")
    base_env.setenv("GLOBAL_RATE_LIMIT_MINUTES", "5")
    base_env.setenv("GLOBAL_RATE_LIMIT_MAX", "20")
    base_env.setenv("CORS_ORIGINS", "https://app.com, https://admin.app.com")
    base_env.setenv("APP_ENV", "production")
    base_env.setenv("DB_FAIL_FAST", "true")

    settings = Settings.from_env()

    assert settings.port == 8080
    assert settings.rate_limit == "20 per 5 minute"
    assert settings.cors_origins == ["https://app.com", "https://admin.app.com"]
    assert settings.is_production is True
    assert settings.db_fail_fast is True


def test_invalid_rate_limit_falls_back(base_env):
    base_env.setenv("GLOBAL_RATE_LIMIT_MINUTES", "soon")
    base_env.setenv("GLOBAL_RATE_LIMIT_MAX", "0")

    assert Settings.from_env().rate_limit == "100 per 15 minute"


@pytest.mark.parametrize("name", ["REDIS_URL", "JWT_SECRET"])
def test_required_values(base_env, name):
    base_env.delenv(name)

    with pytest.raises(ConfigError):
        Settings.from_env()


def test_invalid_proxy_hops(base_env):
    base_env.setenv("TRUST_PROXY_HOPS", "many")

    with pytest.raises(ConfigError):
        Settings.from_env()
