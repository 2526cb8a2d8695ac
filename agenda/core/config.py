import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_AVATAR_SERVICE_URL = "https://doodleipsum.com/300/avatar-2?shape=circle"


class Settings:
    """Centralised application configuration sourced from environment variables."""

    def __init__(self) -> None:
        load_dotenv()
        self.database_path = Path(os.getenv("DATABASE_PATH", "data/agenda.db")).resolve()
        self.auth_token_secret = os.getenv("AUTH_TOKEN_SECRET", "change-me")
        self.auth_token_exp_minutes = self._get_int("AUTH_TOKEN_EXP_MINUTES", default=60 * 24)
        self.password_hash_rounds = self._get_int("PASSWORD_HASH_ROUNDS", default=12)
        self.admin_default_name = os.getenv("ADMIN_NAME", "Administrator")
        self.admin_default_email = os.getenv("ADMIN_EMAIL")
        self.admin_default_password = os.getenv("ADMIN_PASSWORD")
        self.avatar_service_url = os.getenv("AVATAR_SERVICE_URL", DEFAULT_AVATAR_SERVICE_URL)
        self.avatar_timeout_seconds = self._get_int("AVATAR_TIMEOUT_SECONDS", default=10)
        origins = os.getenv("CORS_ALLOW_ORIGINS")
        if origins:
            self.cors_allow_origins = [item.strip() for item in origins.split(",") if item.strip()]
        else:
            self.cors_allow_origins = ["*"]

    @staticmethod
    def _get_int(key: str, default: Optional[int] = None) -> int:
        value = os.getenv(key)
        if value is None:
            if default is None:
                raise RuntimeError(f"Missing required environment variable: {key}")
            return default
        try:
            return int(value)
        except ValueError as exc:
            raise RuntimeError(f"Environment variable {key} must be an integer") from exc
