"""
Inbound webhooks from the payments provider.

Each route has its own signing secret.  The raw body is verified before it
is parsed; unverified requests get a uniform 401 and are otherwise ignored.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import db_session
from config.settings import config
from database.helpers import set_merchant_status, set_transaction_status
from webhooks.signature import SIGNATURE_HEADER, verify_signature

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhooks"])

_UNAUTHORIZED = "Unauthorized webhook"


def verified_body(route: str) -> Callable:
    """
    Build a dependency that verifies the signature for ``route`` and
    returns the decoded JSON body.
    """

    async def _dependency(request: Request) -> Dict[str, Any]:
        secret = config.webhook_secret_for(route)
        if not secret:
            logger.error("No webhook secret configured for %s — rejecting", route)
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=_UNAUTHORIZED)

        raw_body = await request.body()
        ok = verify_signature(
            request.headers.get(SIGNATURE_HEADER),
            raw_body,
            secret,
            config.webhook_tolerance_seconds,
            timestamp_unit=config.webhook_timestamp_unit,
        )
        if not ok:
            logger.warning("Webhook %s failed signature verification", route)
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=_UNAUTHORIZED)

        try:
            body = json.loads(raw_body)
        except ValueError:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid JSON payload")
        if not isinstance(body, dict):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid JSON payload")
        return body

    return _dependency


def _event_data(body: Dict[str, Any]) -> Dict[str, Any]:
    data = body.get("data")
    if not isinstance(data, dict) or not data.get("id"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing id in webhook payload",
        )
    return data


@router.post("/merchant/status")
async def merchant_status_webhook(
    body: Dict[str, Any] = Depends(verified_body("merchant_status")),
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    """Merchant account status changed at the provider."""
    data = _event_data(body)
    account_id, new_status = data["id"], data.get("status")

    merchant = await set_merchant_status(session, account_id, new_status)
    if merchant is None:
        logger.warning("Status webhook for unknown account %s", account_id)
        return {"success": True, "data": None}

    logger.info("Merchant updated: status=%s, accountId=%s", new_status, account_id)
    return {"success": True, "data": merchant.to_dict()}


@router.post("/payment-intent")
async def payment_intent_webhook(
    body: Dict[str, Any] = Depends(verified_body("payment_intent")),
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    """Payment intent event (succeeded, failed, canceled, …)."""
    data = _event_data(body)
    intent_id = data["id"]

    txn = await set_transaction_status(session, intent_id, data.get("status"), payload=data)
    if txn is None:
        logger.warning("Payment-intent webhook for unknown intent %s (%s)", intent_id, body.get("type"))
        return {"success": True, "data": None}

    logger.info("Transaction updated: status=%s, intentId=%s", txn.status, intent_id)
    return {"success": True, "data": txn.to_dict()}
