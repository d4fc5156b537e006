"""
ShippingClient — proxy for shipper-account registration.

Authenticates with a bearer token from an ``OAuthTokenCache`` (OAuth2
client-credentials grant).
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from config.settings import config
from connectors.base import BaseProviderClient
from connectors.token_cache import OAuthTokenCache

logger = logging.getLogger(__name__)


class ShippingClient(BaseProviderClient):
    """Registers shipper accounts with the shipping provider."""

    def __init__(
        self,
        base_url: str,
        token_cache: OAuthTokenCache,
        *,
        register_path: str = "/registration/v2/customerkeys",
        **kwargs: Any,
    ) -> None:
        super().__init__(base_url, **kwargs)
        self.token_cache = token_cache
        self._register_path = register_path

    @property
    def provider_name(self) -> str:
        return "shipping"

    def is_configured(self) -> bool:
        return bool(self.base_url and self.token_cache.is_configured())

    async def auth_headers(self, **context: Any) -> Dict[str, str]:
        token = await self.token_cache.get_token()
        return {"Authorization": f"Bearer {token}"}

    async def register_shipper_account(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Register a shipper account; ``UpstreamAuthError`` propagates."""
        headers = await self.auth_headers()
        result = await self._post(self._register_path, payload, headers)
        logger.info("Registered shipper account %s", payload.get("accountNumber", "?"))
        return result


def build_shipping_client() -> ShippingClient:
    cache = OAuthTokenCache(
        config.shipping_token_url,
        config.shipping_client_id,
        config.shipping_client_secret,
        timeout=config.oauth_timeout_seconds,
        margin_seconds=config.oauth_margin_seconds,
    )
    return ShippingClient(
        config.shipping_base_url,
        cache,
        register_path=config.shipping_register_path,
        timeout=config.provider_timeout_seconds,
    )
