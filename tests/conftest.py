import itertools
from http import HTTPStatus
from typing import Dict, Optional

import pytest
from fastapi.testclient import TestClient

from agenda.core.app_factory import create_application
from agenda.core.config import Settings
from agenda.core.container import ApplicationContainer
from agenda.domain.models import User

ADMIN_NAME = "Agenda Admin"
ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin-secret-1"
USER_PASSWORD = "member-secret-1"
AVATAR_SOURCE_URL = "https://avatars.example.com/random"


@pytest.fixture()
def settings(tmp_path, monkeypatch) -> Settings:
    """Settings pointing at a throwaway database with cheap password hashing."""
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "agenda.db"))
    monkeypatch.setenv("AUTH_TOKEN_SECRET", "test-secret")
    monkeypatch.setenv("AUTH_TOKEN_EXP_MINUTES", "30")
    monkeypatch.setenv("PASSWORD_HASH_ROUNDS", "4")
    monkeypatch.setenv("ADMIN_NAME", ADMIN_NAME)
    monkeypatch.setenv("ADMIN_EMAIL", ADMIN_EMAIL)
    monkeypatch.setenv("ADMIN_PASSWORD", ADMIN_PASSWORD)
    monkeypatch.setenv("AVATAR_SERVICE_URL", AVATAR_SOURCE_URL)
    monkeypatch.delenv("CORS_ALLOW_ORIGINS", raising=False)
    return Settings()


@pytest.fixture()
def client(settings):
    """TestClient running the full lifespan, so the default admin (id 1) exists."""
    app = create_application(settings)
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def container(client) -> ApplicationContainer:
    return client.app.state.container


@pytest.fixture()
def user_factory(container):
    """Factory fixture that creates users directly through the persistence gateway."""
    counter = itertools.count(1)

    def _create_user(
        name: Optional[str] = None,
        email: Optional[str] = None,
        password: str = USER_PASSWORD,
        avatar: Optional[str] = None,
        is_admin: bool = False,
        is_active: bool = True,
    ) -> User:
        n = next(counter)
        return container.persistence.create_user(
            name=name or f"User {n}",
            email=email or f"user{n}@example.com",
            password_hash=container.password_hasher.hash(password),
            avatar=avatar,
            is_admin=is_admin,
            is_active=is_active,
        )

    return _create_user


@pytest.fixture()
def login_headers(client):
    """Log in through the API and return the matching Authorization header."""

    def _login(email: str, password: str = USER_PASSWORD) -> Dict[str, str]:
        response = client.post("/auth/login", json={"email": email, "password": password})
        assert response.status_code == HTTPStatus.OK, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return _login


@pytest.fixture()
def admin_headers(login_headers) -> Dict[str, str]:
    return login_headers(ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture()
def member(user_factory) -> User:
    """Regular user created right after the admin, so it gets id 2."""
    return user_factory(name="Regular Member", email="member@example.com")


@pytest.fixture()
def member_headers(login_headers, member) -> Dict[str, str]:
    return login_headers(member.email)
