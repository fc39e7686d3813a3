"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path
import pytest
import fakeredis

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from authapi.config import Settings
from authapi.database import AccountStore
from authapi.interface.web_app import create_app
from authapi.security import PasswordHasher

# Few iterations keep the suite fast; the format is still salted PBKDF2.
FAST_HASH_METHOD = "pbkdf2:sha256:1000"


@pytest.fixture
def settings():
    """Development-mode settings with a generous rate limit."""
    return Settings(
        redis_url="redis://localhost:6379/15",
        jwt_secret="test-secret-key-with-enough-length-for-hs256",
        rate_limit_max=1000,
        password_hash_method=FAST_HASH_METHOD,
    )


@pytest.fixture
def redis_client():
    """In-memory Redis stand-in, fresh for every test."""
    client = fakeredis.FakeRedis(decode_responses=True)
    yield client
    client.flushall()


@pytest.fixture
def store(redis_client):
    return AccountStore(redis_client)


@pytest.fixture
def hasher():
    return PasswordHasher(FAST_HASH_METHOD)


@pytest.fixture
def app(settings, redis_client):
    app = create_app(settings, redis_client)
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


# Test payloads for different scenarios
@pytest.fixture
def test_accounts():
    """Standard account payloads for consistency."""
    return {
        "basic": {"name": "A", "email": "a@x.com", "password": "p"},
        "juan": {"name": "Juan Dela Cruz", "email": "juan@email.com", "password": "Password123!"},
    }
