"""Centralized configuration for the authentication API."""

import os
from dataclasses import dataclass, field
from typing import List
from dotenv import load_dotenv

from .errors import ConfigError

# Load environment variables from .env file
load_dotenv()

# ==================== Defaults ====================
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 5000
DEFAULT_RATE_LIMIT_MINUTES = 15
DEFAULT_RATE_LIMIT_MAX = 100
DEFAULT_RATE_LIMIT_STORAGE = "memory://"
DEFAULT_PASSWORD_HASH_METHOD = "pbkdf2:sha256"

# Connections idle longer than this are dropped by the server (seconds).
SERVER_TIMEOUT = 300


def _env_int(name: str, default: int) -> int:
    """Read a positive integer, falling back to ``default`` when unset or invalid."""
    raw = os.getenv(name)
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def _env_hops(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}")
    if value < 0:
        raise ConfigError(f"{name} must not be negative")
    return value


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str) -> List[str]:
    raw = os.getenv(name, "")
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    """Runtime settings, built once and handed to every component."""
    redis_url: str
    jwt_secret: str
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    rate_limit_minutes: int = DEFAULT_RATE_LIMIT_MINUTES
    rate_limit_max: int = DEFAULT_RATE_LIMIT_MAX
    rate_limit_storage_uri: str = DEFAULT_RATE_LIMIT_STORAGE
    cors_origins: List[str] = field(default_factory=list)
    app_env: str = "development"
    trust_proxy_hops: int = 1
    password_hash_method: str = DEFAULT_PASSWORD_HASH_METHOD
    db_fail_fast: bool = False
    log_level: str = "INFO"

    def __post_init__(self):
        if not self.redis_url:
            raise ConfigError("REDIS_URL not set. Please set it.")
        if not self.jwt_secret or not self.jwt_secret.strip():
            raise ConfigError("JWT_SECRET not set. Please set it.")

    @property
    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

    @property
    def rate_limit(self) -> str:
        """Limit string in Flask-Limiter notation, e.g. ``100 per 15 minute``."""
        return f"{self.rate_limit_max} per {self.rate_limit_minutes} minute"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        return cls(
            redis_url=os.getenv("REDIS_URL", ""),
            jwt_secret=os.getenv("JWT_SECRET", ""),
            host=os.getenv("HOST", DEFAULT_HOST),
            port=_env_int("PORT", DEFAULT_PORT),
            rate_limit_minutes=_env_int("GLOBAL_RATE_LIMIT_MINUTES", DEFAULT_RATE_LIMIT_MINUTES),
            rate_limit_max=_env_int("GLOBAL_RATE_LIMIT_MAX", DEFAULT_RATE_LIMIT_MAX),
            rate_limit_storage_uri=os.getenv("RATE_LIMIT_STORAGE_URI", DEFAULT_RATE_LIMIT_STORAGE),
            cors_origins=_env_list("CORS_ORIGINS"),
            app_env=os.getenv("APP_ENV", "development"),
            trust_proxy_hops=_env_hops("TRUST_PROXY_HOPS", 1),
            password_hash_method=os.getenv("PASSWORD_HASH_METHOD", DEFAULT_PASSWORD_HASH_METHOD),
            db_fail_fast=_env_bool("DB_FAIL_FAST"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


__all__ = ["Settings", "SERVER_TIMEOUT"]
