"""Field validation for user payloads.

Rules run in a fixed order and stop at the first failure, so callers only
ever see one message. Unknown keys are dropped from the validated payload.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Union
from urllib.parse import urlparse

from email_validator import EmailNotValidError, validate_email

from ..domain.exceptions import EmailAlreadyInUse, PasswordsDoNotMatch, ValidationFailed
from ..domain.models import User

MAX_STRING_LENGTH = 255
MAX_URL_LENGTH = 2048
MIN_PASSWORD_LENGTH = 8

EmailLookup = Callable[[str], Optional[User]]


@dataclass(frozen=True, slots=True)
class Valid:
    payload: Dict[str, Any]


@dataclass(frozen=True, slots=True)
class Invalid:
    error: ValidationFailed

    @property
    def message(self) -> str:
        return self.error.message


ValidationResult = Union[Valid, Invalid]


def validate_new_user(data: Mapping[str, Any], find_by_email: EmailLookup) -> ValidationResult:
    """Validate a creation payload; name, email and password are required."""
    payload: Dict[str, Any] = {}
    error = (
        _check_name(data, payload, required=True)
        or _check_email(data, payload, find_by_email, required=True)
        or _check_password(data, payload, required=True)
        or _check_avatar(data, payload)
        or _check_flag(data, payload, "is_active")
    )
    return Invalid(error) if error else Valid(payload)


def validate_user_changes(
    data: Mapping[str, Any],
    find_by_email: EmailLookup,
    target: User,
) -> ValidationResult:
    """Validate a partial update of ``target``; every field is optional."""
    payload: Dict[str, Any] = {}
    error = (
        _check_name(data, payload)
        or _check_email(data, payload, find_by_email, ignore_user_id=target.id)
        or _check_password(data, payload)
        or _check_avatar(data, payload)
        or _check_flag(data, payload, "is_active")
        or _check_flag(data, payload, "update_avatar")
    )
    return Invalid(error) if error else Valid(payload)


def validate_profile_changes(
    data: Mapping[str, Any],
    find_by_email: EmailLookup,
    target: User,
) -> ValidationResult:
    """Validate a profile update, which only touches name and email."""
    payload: Dict[str, Any] = {}
    error = _check_name(data, payload) or _check_email(
        data, payload, find_by_email, ignore_user_id=target.id
    )
    return Invalid(error) if error else Valid(payload)


def _check_name(data: Mapping[str, Any], payload: Dict[str, Any], *, required: bool = False) -> Optional[ValidationFailed]:
    if "name" not in data:
        return ValidationFailed("The name field is required") if required else None
    name = data["name"]
    if not isinstance(name, str):
        return ValidationFailed("The name must be a string")
    name = name.strip()
    if not name:
        return ValidationFailed("The name field is required")
    if len(name) > MAX_STRING_LENGTH:
        return ValidationFailed(f"The name may not be greater than {MAX_STRING_LENGTH} characters")
    payload["name"] = name
    return None


def _check_email(
    data: Mapping[str, Any],
    payload: Dict[str, Any],
    find_by_email: EmailLookup,
    *,
    required: bool = False,
    ignore_user_id: Optional[int] = None,
) -> Optional[ValidationFailed]:
    if "email" not in data:
        return ValidationFailed("The email field is required") if required else None
    email = data["email"]
    if not isinstance(email, str):
        return ValidationFailed("Must be a valid email")
    email = email.strip().lower()
    if len(email) > MAX_STRING_LENGTH:
        return ValidationFailed(f"The email may not be greater than {MAX_STRING_LENGTH} characters")
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return ValidationFailed("Must be a valid email")
    existing = find_by_email(email)
    if existing and existing.id != ignore_user_id:
        return EmailAlreadyInUse()
    payload["email"] = email
    return None


def _check_password(data: Mapping[str, Any], payload: Dict[str, Any], *, required: bool = False) -> Optional[ValidationFailed]:
    if "password" not in data or data["password"] is None:
        return ValidationFailed("The password field is required") if required else None
    password = data["password"]
    if not isinstance(password, str):
        return ValidationFailed("The password must be a string")
    if len(password) < MIN_PASSWORD_LENGTH:
        return ValidationFailed(
            f"The password needs to be at least {MIN_PASSWORD_LENGTH} characters long"
        )
    # Confirmation is only compared once the password itself is acceptable.
    if data.get("password_confirmation") != password:
        return PasswordsDoNotMatch()
    payload["password"] = password
    return None


def _check_avatar(data: Mapping[str, Any], payload: Dict[str, Any]) -> Optional[ValidationFailed]:
    if "avatar" not in data:
        return None
    avatar = data["avatar"]
    if avatar is None or avatar is False:
        payload["avatar"] = None
        return None
    if not isinstance(avatar, str) or not _is_url(avatar):
        return ValidationFailed("The avatar must be a valid URL or false")
    payload["avatar"] = avatar
    return None


def _check_flag(data: Mapping[str, Any], payload: Dict[str, Any], field: str) -> Optional[ValidationFailed]:
    if field not in data:
        return None
    value = data[field]
    if not isinstance(value, bool):
        return ValidationFailed(f"The {field} field must be true or false")
    payload[field] = value
    return None


def _is_url(value: str) -> bool:
    if len(value) > MAX_URL_LENGTH:
        return False
    parsed = urlparse(value)
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)
