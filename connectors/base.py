"""
BaseProviderClient — shared plumbing for outbound provider proxies.

Every provider (payments, shipping, …) subclasses this and supplies its
own authentication headers.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx

from connectors.errors import ProviderError

logger = logging.getLogger(__name__)


class BaseProviderClient(ABC):
    """Abstract base for all provider proxies."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 20.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    # ── Identity ────────────────────────────────────────────────────────
    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Unique slug: 'tilled', 'shipping'."""
        ...

    # ── Auth ────────────────────────────────────────────────────────────
    @abstractmethod
    async def auth_headers(self, **context: Any) -> Dict[str, str]:
        """Headers that authenticate a request to this provider."""
        ...

    def is_configured(self) -> bool:
        return bool(self.base_url)

    # ── Helpers ─────────────────────────────────────────────────────────

    async def _post(
        self,
        path: str,
        payload: Dict[str, Any],
        headers: Dict[str, str],
    ) -> Dict[str, Any]:
        """
        POST JSON to the provider and return the decoded response.

        Raises ``ProviderError`` with the provider's status code on HTTP
        errors, or 502 when the provider could not be reached.
        """
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                resp = await client.post(
                    url,
                    json=payload,
                    headers={"Accept": "application/json", **headers},
                )
        except httpx.HTTPError as exc:
            logger.error("%s request to %s failed: %s", self.provider_name, path, exc)
            raise ProviderError(self.provider_name, 502, "Provider unreachable") from exc

        try:
            body = resp.json()
        except ValueError:
            body = {"raw": resp.text}

        if resp.status_code >= 400:
            logger.warning(
                "%s %s returned HTTP %d", self.provider_name, path, resp.status_code
            )
            raise ProviderError(self.provider_name, resp.status_code, body)
        return body
