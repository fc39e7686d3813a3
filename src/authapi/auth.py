"""Authentication use-cases: register and login."""

import logging
from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError as PydanticValidationError

from .database import AccountStore
from .errors import ConflictError, NotFoundError, ValidationError
from .models import Account
from .schemas import LoginRequest, RegisterRequest
from .security import PasswordHasher

logger = logging.getLogger(__name__)

RequestT = TypeVar("RequestT", bound=BaseModel)


def parse_request(model: Type[RequestT], payload: Optional[Dict[str, Any]]) -> RequestT:
    """
    Validate a request body against ``model``.

    Any absent or empty required field reports "All fields are required.";
    a field that is present but malformed names that field instead.
    """
    if not isinstance(payload, dict):
        payload = {}
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        if any(not payload.get(name) for name in model.model_fields):
            raise ValidationError("All fields are required.") from None
        field = e.errors()[0]['loc'][0]
        raise ValidationError(f"Invalid {field}.") from None


class AuthService:
    """Register and authenticate accounts."""

    def __init__(self, store: AccountStore, hasher: PasswordHasher):
        self.store = store
        self.hasher = hasher

    def register(self, payload: Optional[Dict[str, Any]]) -> Account:
        """Create a new account. Raises ConflictError when the email is taken."""
        data = parse_request(RegisterRequest, payload)

        if self.store.find_one({"email": data.email}):
            raise ConflictError("Email already exists.")

        account = self.store.create({
            "name": data.name,
            "email": data.email,
            "password": self.hasher.hash(data.password),
        })

        logger.info(f"New account registered: {account.id}")
        return account

    def login(self, payload: Optional[Dict[str, Any]]) -> Account:
        """Check credentials and return the matching account."""
        data = parse_request(LoginRequest, payload)

        account = self.store.find_one({"email": data.email})
        if not account:
            raise NotFoundError("Account not found.")

        if not self.hasher.verify(data.password, account.password):
            raise ValidationError("Incorrect password.")

        logger.info(f"Account logged in: {account.id}")
        return account
