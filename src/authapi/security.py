"""Password hashing and cookie-based session tokens."""

import logging
from datetime import timedelta

from flask import Flask, Response
from flask_jwt_extended import (
    JWTManager, create_access_token, decode_token,
    set_access_cookies, unset_access_cookies
)
from werkzeug.security import generate_password_hash, check_password_hash

from .config import Settings, DEFAULT_PASSWORD_HASH_METHOD
from .errors import ConfigError

logger = logging.getLogger(__name__)

SESSION_COOKIE_NAME = "token"
SESSION_LIFETIME = timedelta(days=15)


class PasswordHasher:
    """Salted one-way password hashing."""

    def __init__(self, method: str = DEFAULT_PASSWORD_HASH_METHOD):
        self.method = method

    def hash(self, password: str) -> str:
        """Hash a password for storing. Each call uses a fresh salt."""
        if not password:
            raise ValueError("Password must not be blank")
        return generate_password_hash(password, method=self.method)

    def verify(self, password: str, password_hash: str) -> bool:
        """Check a password against a stored hash. Malformed hashes never match."""
        if not password or not password_hash:
            return False
        try:
            return check_password_hash(password_hash, password)
        except (ValueError, TypeError):
            logger.warning("Stored password hash could not be parsed")
            return False


def configure_tokens(app: Flask, settings: Settings) -> JWTManager:
    """Install JWT signing with the session token carried in a cookie."""
    if not settings.jwt_secret:
        raise ConfigError("JWT_SECRET not set. Please set it.")

    app.config['JWT_SECRET_KEY'] = settings.jwt_secret
    app.config['JWT_ACCESS_TOKEN_EXPIRES'] = SESSION_LIFETIME
    app.config['JWT_TOKEN_LOCATION'] = ["cookies"]
    app.config['JWT_ACCESS_COOKIE_NAME'] = SESSION_COOKIE_NAME
    app.config['JWT_COOKIE_SAMESITE'] = "Lax"
    app.config['JWT_COOKIE_SECURE'] = settings.is_production
    app.config['JWT_COOKIE_CSRF_PROTECT'] = False
    app.config['JWT_SESSION_COOKIE'] = False
    app.config['JWT_ENCODE_NBF'] = False
    return JWTManager(app)


def issue_session(response: Response, account_id: str) -> str:
    """Sign a token for ``account_id`` and attach it to ``response`` as the session cookie."""
    token = create_access_token(identity=str(account_id))
    set_access_cookies(response, token, max_age=int(SESSION_LIFETIME.total_seconds()))
    return token


def clear_session(response: Response) -> None:
    """Overwrite the session cookie with an empty, already-expired value."""
    unset_access_cookies(response)


def read_session_identity(token: str) -> str:
    """Return the account id embedded in a session token. Needs an app context."""
    return decode_token(token)['sub']
