"""Pydantic schemas for user API endpoints.

Request fields are typed ``Any`` on purpose: type and format checks happen
in :mod:`agenda.application.validation` so that the first failing field is
reported with its own message.
"""

from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field

from ....domain.models import User


class UserCreateRequest(BaseModel):
    """Request schema for creating a user."""

    model_config = ConfigDict(extra="ignore")

    name: Any = Field(default=None, description="Display name, at most 255 characters")
    email: Any = Field(default=None, description="Unique email address")
    password: Any = Field(default=None, description="At least 8 characters")
    password_confirmation: Any = Field(default=None, description="Must equal password")
    avatar: Any = Field(default=None, description="Avatar URL or false")
    is_active: Any = Field(default=None, description="Whether the account may log in")


class UserUpdateRequest(UserCreateRequest):
    """Request schema for a partial user update."""

    update_avatar: Any = Field(default=None, description="Replace the avatar with the given value")


class ProfileUpdateRequest(BaseModel):
    """Request schema for updating the authenticated user's profile."""

    model_config = ConfigDict(extra="ignore")

    name: Any = Field(default=None, description="Display name, at most 255 characters")
    email: Any = Field(default=None, description="Unique email address")


class UserResponse(BaseModel):
    """Response schema for user data; ``avatar`` is false when unset."""

    id: int
    name: str
    email: str
    avatar: Union[str, bool]
    is_admin: bool
    is_active: bool

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            avatar=user.avatar or False,
            is_admin=user.is_admin,
            is_active=user.is_active,
        )


class RandomAvatarResponse(BaseModel):
    avatar: str
