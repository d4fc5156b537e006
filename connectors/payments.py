"""
PaymentsClient — proxy for the Tilled payments API.

Requests are authenticated with the platform secret key and scoped to the
merchant's connected account via the ``tilled-account`` header.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from config.settings import config
from connectors.base import BaseProviderClient

logger = logging.getLogger(__name__)

_PAYMENT_INTENTS_PATH = "/v1/payment-intents"
_CHECKOUT_SESSIONS_PATH = "/v1/checkout-sessions"


class PaymentsClient(BaseProviderClient):
    """Creates payment intents and checkout sessions for a merchant account."""

    def __init__(self, base_url: str, secret_key: str, **kwargs: Any) -> None:
        super().__init__(base_url, **kwargs)
        self._secret_key = secret_key

    @property
    def provider_name(self) -> str:
        return "tilled"

    def is_configured(self) -> bool:
        return bool(self.base_url and self._secret_key)

    async def auth_headers(self, **context: Any) -> Dict[str, str]:
        return {
            "tilled-api-key": self._secret_key,
            "tilled-account": context["account_id"],
        }

    async def create_payment_intent(self, account_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        headers = await self.auth_headers(account_id=account_id)
        result = await self._post(_PAYMENT_INTENTS_PATH, payload, headers)
        logger.info("Created payment intent %s for account %s", result.get("id"), account_id)
        return result

    async def create_checkout_session(self, account_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        headers = await self.auth_headers(account_id=account_id)
        result = await self._post(_CHECKOUT_SESSIONS_PATH, payload, headers)
        logger.info("Created checkout session %s for account %s", result.get("id"), account_id)
        return result


def build_payments_client() -> PaymentsClient:
    return PaymentsClient(
        config.tilled_base_url,
        config.tilled_secret_key,
        timeout=config.provider_timeout_seconds,
    )
