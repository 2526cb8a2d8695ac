from __future__ import annotations

from typing import List, Optional, Protocol

from ..models import User


class UserRepository(Protocol):
    """Persistence functions related to user accounts."""

    def get_user_by_email(self, email: str) -> Optional[User]:
        ...

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        ...

    def list_users(self) -> List[User]:
        ...

    def create_user(
        self,
        name: str,
        email: str,
        password_hash: str,
        avatar: Optional[str] = None,
        is_admin: bool = False,
        is_active: bool = True,
    ) -> User:
        ...

    def update_user(
        self,
        user_id: int,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
        password_hash: Optional[str] = None,
        is_active: Optional[bool] = None,
        update_avatar: bool = False,
        avatar: Optional[str] = None,
    ) -> User:
        ...

    def delete_user(self, user_id: int) -> bool:
        ...


class PersistenceGateway(UserRepository, Protocol):
    """Composite gateway combining every persistence concern used by the app."""

    def close(self) -> None:
        ...
