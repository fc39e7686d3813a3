"""Redis document store for accounts."""

import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Optional

import redis

from .errors import ConflictError, ValidationError
from .models import Account

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "email", "password")
FILTER_FIELDS = ("id", "name", "email", "created_at", "updated_at")


def get_client(url: str) -> redis.Redis:
    """
    Create a Redis client for the given connection string.

    The client owns its connection pool; connections are opened lazily.
    """
    return redis.from_url(url, decode_responses=True)


def init_db(client: redis.Redis) -> bool:
    """
    Check that the store is reachable.

    Failures are logged and reported through the return value rather than
    raised, so the server keeps running without a working store.
    """
    try:
        client.ping()
    except redis.RedisError as e:
        logger.error(f"Redis connection error: {e}")
        return False
    logger.info("Connected to Redis")
    return True


class AccountStore:
    """Create and look up account documents."""

    ACCOUNT_PREFIX = "account:"
    EMAIL_INDEX = "account_email:"

    def __init__(self, client: redis.Redis):
        self.client = client

    def _account_key(self, account_id: str) -> str:
        return f"{self.ACCOUNT_PREFIX}{account_id}"

    def _email_key(self, email: str) -> str:
        return f"{self.EMAIL_INDEX}{email}"

    def _load(self, account_id: str) -> Optional[Account]:
        raw = self.client.get(self._account_key(account_id))
        if not raw:
            return None
        return Account.from_document(json.loads(raw))

    def _iter_accounts(self) -> Iterator[Account]:
        for key in self.client.scan_iter(match=f"{self.ACCOUNT_PREFIX}*"):
            raw = self.client.get(key)
            if raw:
                yield Account.from_document(json.loads(raw))

    @staticmethod
    def _matches(account: Account, query: Dict[str, Any]) -> bool:
        document = account.to_document()
        return all(document.get(k) == v for k, v in query.items())

    def find_one(self, query: Dict[str, Any]) -> Optional[Account]:
        """
        Return the account matching every field in ``query``, or None.

        Lookups by ``id`` or ``email`` hit a single key; any other filter
        scans the stored documents.
        """
        unknown = set(query) - set(FILTER_FIELDS)
        if unknown:
            raise ValueError(f"Unsupported query fields: {', '.join(sorted(unknown))}")

        if "id" in query:
            candidates = [self._load(str(query["id"]))]
        elif "email" in query:
            account_id = self.client.get(self._email_key(query["email"]))
            candidates = [self._load(account_id)] if account_id else []
        else:
            candidates = self._iter_accounts()

        for account in candidates:
            if account is not None and self._matches(account, query):
                return account
        return None

    def create(self, fields: Dict[str, Any]) -> Account:
        """
        Persist a new account.

        The email index is claimed atomically, so concurrent creates with the
        same email let exactly one through; the rest raise ConflictError.
        """
        missing = [name for name in REQUIRED_FIELDS if not fields.get(name)]
        if missing:
            raise ValidationError(f"Missing required account fields: {', '.join(missing)}")

        now = datetime.now(timezone.utc)
        account = Account(
            id=uuid.uuid4().hex,
            name=fields["name"],
            email=fields["email"],
            password=fields["password"],
            created_at=now,
            updated_at=now,
        )

        email_key = self._email_key(account.email)
        if not self.client.set(email_key, account.id, nx=True):
            raise ConflictError("Email already exists.")

        try:
            self.client.set(self._account_key(account.id), json.dumps(account.to_document()))
        except redis.RedisError:
            # Release the claim so the email can be registered again.
            self.client.delete(email_key)
            raise

        return account

    def count(self) -> int:
        return sum(1 for _ in self.client.scan_iter(match=f"{self.ACCOUNT_PREFIX}*"))
