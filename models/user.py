"""User model."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class User:
    """A registered user.

    The password hash is never part of this model; it only exists in the
    users table and inside UserService.

    Attributes:
        id: Unique identifier (auto-generated).
        username: Unique login name, 3-20 characters of [A-Za-z0-9_].
        email: Unique email address.
        created_at: Registration timestamp.
    """

    id: int
    username: str
    email: str
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
