"""User domain model for the agenda accounts."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class User:
    """
    Account able to authenticate against the API.

    Attributes:
        id: Unique identifier, never reused after deletion
        name: Display name
        email: Lower-cased email address (unique)
        password_hash: bcrypt hash of the password
        avatar: Avatar URL, None when the user has no avatar
        is_admin: Whether the account administers other users
        is_active: Whether the account may log in
        created_at: Account creation timestamp
        updated_at: Last update timestamp
    """

    id: int
    name: str
    email: str
    password_hash: str
    avatar: Optional[str]
    is_admin: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email} admin={self.is_admin} active={self.is_active}>"
