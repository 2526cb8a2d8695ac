"""Domain models for the Agenda application."""

from .user import User

__all__ = [
    "User",
]
