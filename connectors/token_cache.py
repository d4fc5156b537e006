"""
OAuth token cache — client-credentials bearer tokens for outbound calls.

One instance per provider.  The cached token is reused until shortly
before the provider-reported expiry; after that the next caller fetches a
new one.  Clock and HTTP transport are injectable for tests.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

import httpx

from connectors.errors import UpstreamAuthError

logger = logging.getLogger(__name__)

_DEFAULT_EXPIRES_IN = 3600


@dataclass(frozen=True)
class CachedToken:
    token: str
    expires_at: float


class OAuthTokenCache:
    """Caches a client-credentials access token for a single token endpoint."""

    def __init__(
        self,
        token_url: str,
        client_id: str,
        client_secret: str,
        *,
        timeout: float = 15.0,
        margin_seconds: int = 60,
        clock: Callable[[], float] = time.time,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.token_url = token_url
        self._client_id = client_id
        self._client_secret = client_secret
        self._timeout = timeout
        self._margin = margin_seconds
        self._clock = clock
        self._transport = transport
        self._cached: Optional[CachedToken] = None
        self._refresh_lock = asyncio.Lock()

    @property
    def cached(self) -> Optional[CachedToken]:
        return self._cached

    def is_configured(self) -> bool:
        return bool(self.token_url and self._client_id and self._client_secret)

    def _fresh(self) -> Optional[str]:
        cached = self._cached
        if cached is not None and cached.expires_at > self._clock():
            return cached.token
        return None

    async def get_token(self) -> str:
        """
        Return a valid bearer token, fetching a new one when the cached
        token is missing or stale.

        Raises ``UpstreamAuthError`` when no token can be obtained.
        """
        token = self._fresh()
        if token is not None:
            return token

        # Concurrent callers wait for the refresh in flight instead of
        # each hitting the token endpoint.
        async with self._refresh_lock:
            token = self._fresh()
            if token is not None:
                return token
            self._cached = await self._fetch()
            return self._cached.token

    async def _fetch(self) -> CachedToken:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                resp = await client.post(
                    self.token_url,
                    auth=(self._client_id, self._client_secret),
                    data={
                        "client_id": self._client_id,
                        "client_secret": self._client_secret,
                        "grant_type": "client_credentials",
                    },
                    headers={"Accept": "application/json"},
                )
        except httpx.TimeoutException as exc:
            logger.error("Token request to %s timed out", self.token_url)
            raise UpstreamAuthError("token endpoint timed out") from exc
        except httpx.HTTPError as exc:
            logger.error("Token request to %s failed: %s", self.token_url, exc)
            raise UpstreamAuthError("token endpoint unreachable") from exc

        if resp.status_code >= 400:
            logger.error("Token endpoint returned HTTP %d", resp.status_code)
            raise UpstreamAuthError(f"token endpoint returned HTTP {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as exc:
            raise UpstreamAuthError("token endpoint returned a non-JSON body") from exc

        token = data.get("access_token") if isinstance(data, dict) else None
        if not token or not isinstance(token, str):
            logger.error("Token endpoint response had no usable access_token")
            raise UpstreamAuthError("token endpoint returned no access_token")

        try:
            expires_in = int(data.get("expires_in", _DEFAULT_EXPIRES_IN))
        except (TypeError, ValueError):
            expires_in = _DEFAULT_EXPIRES_IN

        expires_at = self._clock() + max(expires_in - self._margin, 0)
        logger.info("Obtained OAuth token from %s (expires in %ds)", self.token_url, expires_in)
        return CachedToken(token=token, expires_at=expires_at)
