from datetime import datetime, timezone

import httpx
import pytest

from agenda.application.services.avatar_service import AvatarService
from agenda.domain.exceptions import AvatarUnavailable, Unauthorized
from agenda.domain.models import User

SOURCE_URL = "https://avatars.example.com/random"
RESOLVED_URL = "https://cdn.example.com/avatars/42.png"


def _principal(is_admin: bool) -> User:
    now = datetime.now(timezone.utc)
    return User(
        id=1,
        name="Admin",
        email="admin@example.com",
        password_hash="hash",
        avatar=None,
        is_admin=is_admin,
        is_active=True,
        created_at=now,
        updated_at=now,
    )


def _redirecting_handler(request: httpx.Request) -> httpx.Response:
    if str(request.url) == SOURCE_URL:
        return httpx.Response(302, headers={"Location": RESOLVED_URL})
    return httpx.Response(200, content=b"\x89PNG", headers={"Content-Type": "image/png"})


@pytest.mark.asyncio
async def test_returns_resolved_avatar_url():
    service = AvatarService(SOURCE_URL, transport=httpx.MockTransport(_redirecting_handler))

    url = await service.fetch_random_avatar(_principal(is_admin=True))

    assert url == RESOLVED_URL


@pytest.mark.asyncio
async def test_upstream_error_status_is_unavailable():
    service = AvatarService(
        SOURCE_URL,
        transport=httpx.MockTransport(lambda request: httpx.Response(503)),
    )

    with pytest.raises(AvatarUnavailable):
        await service.fetch_random_avatar(_principal(is_admin=True))


@pytest.mark.asyncio
async def test_transport_failure_is_unavailable():
    def _fail(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    service = AvatarService(SOURCE_URL, transport=httpx.MockTransport(_fail))

    with pytest.raises(AvatarUnavailable) as exc_info:
        await service.fetch_random_avatar(_principal(is_admin=True))
    assert exc_info.value.message == "Could not fetch a random avatar"


@pytest.mark.asyncio
async def test_regular_user_is_rejected_before_any_request():
    calls = []

    def _record(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200)

    service = AvatarService(SOURCE_URL, transport=httpx.MockTransport(_record))

    with pytest.raises(Unauthorized):
        await service.fetch_random_avatar(_principal(is_admin=False))
    assert calls == []
