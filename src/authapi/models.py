"""Data models for accounts."""

from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Any, Dict


@dataclass
class Account:
    """Registered account. ``password`` always holds the hash, never plaintext."""
    id: str
    name: str
    email: str
    password: str
    created_at: datetime
    updated_at: datetime

    def to_document(self) -> Dict[str, Any]:
        """Serialize for storage."""
        data = asdict(self)
        data['created_at'] = self.created_at.isoformat()
        data['updated_at'] = self.updated_at.isoformat()
        return data

    @classmethod
    def from_document(cls, data: Dict[str, Any]) -> "Account":
        return cls(
            id=data['id'],
            name=data['name'],
            email=data['email'],
            password=data['password'],
            created_at=datetime.fromisoformat(data['created_at']),
            updated_at=datetime.fromisoformat(data['updated_at']),
        )
