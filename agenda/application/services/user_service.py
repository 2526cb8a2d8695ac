"""Service for user administration."""

import logging
from typing import Any, List, Mapping

from ...core.security import PasswordHasher
from ...domain.authorization import UserOperation, authorize
from ...domain.exceptions import NotFound
from ...domain.models import User
from ...domain.ports.persistence import UserRepository
from ..validation import (
    Invalid,
    ValidationResult,
    validate_new_user,
    validate_profile_changes,
    validate_user_changes,
)

logger = logging.getLogger(__name__)


class UserService:
    """
    Orchestrates user operations on behalf of an authenticated principal.

    Every operation authorizes the principal first, then validates the
    payload, then persists. Errors are raised as domain exceptions.
    """

    def __init__(self, users: UserRepository, hasher: PasswordHasher):
        self.users = users
        self.hasher = hasher

    def list_users(self, principal: User) -> List[User]:
        """List every user in creation order."""
        authorize(principal, UserOperation.LIST_ALL_USERS)
        return self.users.list_users()

    def get_user(self, principal: User, user_id: int) -> User:
        """
        Fetch a single user.

        Raises:
            Unauthorized: If the principal is not an admin
            NotFound: If no user has ``user_id``
        """
        authorize(principal, UserOperation.GET_USER, user_id)
        return self._require(user_id)

    def create_user(self, principal: User, data: Mapping[str, Any]) -> User:
        """
        Create a regular (non-admin) user.

        Args:
            principal: Acting user
            data: Raw request fields

        Returns:
            The persisted user

        Raises:
            Unauthorized: If the principal is not an admin
            ValidationFailed: On the first invalid field
        """
        authorize(principal, UserOperation.CREATE_USER)
        payload = _unwrap(validate_new_user(data, self.users.get_user_by_email))

        user = self.users.create_user(
            name=payload["name"],
            email=payload["email"],
            password_hash=self.hasher.hash(payload["password"]),
            avatar=payload.get("avatar"),
            is_admin=False,
            is_active=payload.get("is_active", True),
        )
        logger.info("User %s created by %s", user.id, principal.id)
        return user

    def update_user(self, principal: User, user_id: int, data: Mapping[str, Any]) -> User:
        """
        Apply a partial update to a user.

        Only the fields present in ``data`` change. The avatar is replaced
        only when ``update_avatar`` is true and ``is_admin`` never changes.

        Raises:
            Unauthorized: If the principal is neither an admin nor the target
            NotFound: If no user has ``user_id``
            ValidationFailed: On the first invalid field
        """
        authorize(principal, UserOperation.UPDATE_USER, user_id)
        target = self._require(user_id)
        payload = _unwrap(validate_user_changes(data, self.users.get_user_by_email, target))

        password = payload.get("password")
        user = self.users.update_user(
            target.id,
            name=payload.get("name"),
            email=payload.get("email"),
            password_hash=self.hasher.hash(password) if password else None,
            is_active=payload.get("is_active"),
            update_avatar=payload.get("update_avatar", False),
            avatar=payload.get("avatar"),
        )
        logger.info("User %s updated by %s", user.id, principal.id)
        return user

    def update_profile(self, principal: User, data: Mapping[str, Any]) -> User:
        """Update the principal's own name and email."""
        payload = _unwrap(validate_profile_changes(data, self.users.get_user_by_email, principal))
        return self.users.update_user(
            principal.id,
            name=payload.get("name"),
            email=payload.get("email"),
        )

    def delete_user(self, principal: User, user_id: int) -> None:
        """
        Permanently delete a user.

        Raises:
            Unauthorized: If the principal is not an admin
            NotFound: If no user has ``user_id``
        """
        authorize(principal, UserOperation.DELETE_USER, user_id)
        if not self.users.delete_user(user_id):
            raise NotFound()
        logger.info("User %s deleted by %s", user_id, principal.id)

    def _require(self, user_id: int) -> User:
        user = self.users.get_user_by_id(user_id)
        if not user:
            raise NotFound()
        return user


def _unwrap(result: ValidationResult) -> dict:
    if isinstance(result, Invalid):
        raise result.error
    return result.payload
