from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from ...core.security import PasswordHasher
from ...domain.exceptions import InvalidCredentials, Unauthorized
from ...domain.models import User
from ...domain.ports.persistence import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Verifies credentials and issues the bearer tokens identifying a principal."""

    def __init__(
        self,
        users: UserRepository,
        hasher: PasswordHasher,
        secret_key: str,
        token_exp_minutes: int = 1440,
        algorithm: str = "HS256",
    ) -> None:
        if not secret_key:
            raise RuntimeError("AUTH_TOKEN_SECRET is not configured.")
        if secret_key == "change-me":
            logger.warning(
                "AUTH_TOKEN_SECRET is using the default value. Configure a strong secret in production."
            )
        self._users = users
        self._hasher = hasher
        self._secret_key = secret_key
        self._token_exp_minutes = token_exp_minutes
        self._algorithm = algorithm

    # ------------------------------------------------------------------
    def ensure_default_admin(
        self,
        name: str,
        email: Optional[str],
        password: Optional[str],
    ) -> Optional[User]:
        if not email or not password:
            return None
        existing = self._users.get_user_by_email(email)
        if existing:
            return existing
        logger.info("Creating default administrator account for %s", email)
        return self._users.create_user(
            name=name,
            email=email,
            password_hash=self._hasher.hash(password),
            is_admin=True,
        )

    def authenticate(self, email: str, password: str) -> str:
        user = self._users.get_user_by_email(email)
        if not user or not user.is_active:
            logger.info("Rejected login for %s", email)
            raise InvalidCredentials()
        if not self._hasher.verify(password, user.password_hash):
            logger.info("Rejected login for %s", email)
            raise InvalidCredentials()
        return self.create_token(user)

    def get_principal(self, token: str) -> User:
        """Resolve the active user a bearer token was issued to."""
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except JWTError as exc:
            raise Unauthorized("Invalid token") from exc
        user_id = payload.get("sub")
        try:
            user_id_int = int(user_id)
        except (TypeError, ValueError) as exc:
            raise Unauthorized("Invalid token") from exc
        user = self._users.get_user_by_id(user_id_int)
        if not user or not user.is_active:
            raise Unauthorized("Invalid token")
        return user

    def create_token(self, user: User) -> str:
        now = datetime.now(tz=timezone.utc)
        expire = now + timedelta(minutes=self._token_exp_minutes)
        payload = {"sub": str(user.id), "email": user.email, "exp": expire}
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
