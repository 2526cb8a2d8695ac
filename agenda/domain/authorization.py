"""Authorization decisions for user operations.

The acting principal is always passed in explicitly; nothing here reads
request state.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from .exceptions import Unauthorized
from .models import User


class UserOperation(str, Enum):
    LIST_ALL_USERS = "list_all_users"
    GET_USER = "get_user"
    CREATE_USER = "create_user"
    UPDATE_USER = "update_user"
    DELETE_USER = "delete_user"
    RANDOM_AVATAR = "random_avatar"


def is_allowed(principal: User, operation: UserOperation, target_user_id: Optional[int] = None) -> bool:
    if principal.is_admin:
        return True
    if operation is UserOperation.UPDATE_USER:
        return target_user_id is not None and principal.id == target_user_id
    return False


def authorize(principal: User, operation: UserOperation, target_user_id: Optional[int] = None) -> None:
    """Raise :class:`Unauthorized` unless ``principal`` may run ``operation``."""
    if not is_allowed(principal, operation, target_user_id):
        raise Unauthorized()
