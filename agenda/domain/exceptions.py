"""Errors raised by the user and authentication services.

Every error carries the HTTP status it maps to; the application factory
renders them as ``{"error": <message>}``.
"""

from http import HTTPStatus


class AgendaError(Exception):
    status_code = HTTPStatus.BAD_REQUEST
    default_message = "Bad request"

    def __init__(self, message: str = "") -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(AgendaError):
    status_code = HTTPStatus.UNAUTHORIZED
    default_message = "The user is not authorized to access this resource"


class InvalidCredentials(Unauthorized):
    default_message = "Invalid credentials"


class ValidationFailed(AgendaError):
    status_code = HTTPStatus.UNPROCESSABLE_ENTITY
    default_message = "The given data was invalid"


class PasswordsDoNotMatch(ValidationFailed):
    default_message = "Passwords do not match"


class EmailAlreadyInUse(ValidationFailed):
    default_message = "El email ya está en uso"


class NotFound(AgendaError):
    status_code = HTTPStatus.NOT_FOUND
    default_message = "User not found"


class AvatarUnavailable(AgendaError):
    status_code = HTTPStatus.BAD_GATEWAY
    default_message = "Could not fetch a random avatar"
