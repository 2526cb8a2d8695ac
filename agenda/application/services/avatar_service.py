from __future__ import annotations

import logging
from typing import Optional

import httpx

from ...domain.authorization import UserOperation, authorize
from ...domain.exceptions import AvatarUnavailable
from ...domain.models import User

logger = logging.getLogger(__name__)


class AvatarService:
    """Proxies the external placeholder service that generates random avatars."""

    def __init__(
        self,
        source_url: str,
        timeout_seconds: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._source_url = source_url
        self._timeout = httpx.Timeout(timeout_seconds)
        self._transport = transport

    async def fetch_random_avatar(self, principal: User) -> str:
        """Return the URL the placeholder service resolved to."""
        authorize(principal, UserOperation.RANDOM_AVATAR)
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = await client.get(self._source_url)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Avatar service request to %s failed: %s", self._source_url, exc)
            raise AvatarUnavailable() from exc
        return str(response.url)
