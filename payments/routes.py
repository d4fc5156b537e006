"""
Payments proxy — payment intents and checkout sessions.

Route prefix: /api/v1/payments
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import db_session, get_payments_client
from connectors.errors import ProviderError
from connectors.payments import PaymentsClient
from database.helpers import get_merchant_by_tenant, record_transaction
from database.models import MerchantProfile
from utils.schemas import CheckoutSessionRequest, PaymentIntentRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["payments"])


async def _merchant_account(session: AsyncSession, tenant_id: str) -> MerchantProfile:
    merchant = await get_merchant_by_tenant(session, tenant_id)
    if merchant is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Merchant not found")
    if not merchant.account_id:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Merchant has no payments account yet",
        )
    return merchant


def _provider_failure(exc: ProviderError) -> HTTPException:
    # Provider 4xx passes through, anything else is a bad gateway
    code = exc.status_code if 400 <= exc.status_code < 500 else status.HTTP_502_BAD_GATEWAY
    return HTTPException(status_code=code, detail=exc.detail or str(exc))


def _require_configured(client: PaymentsClient) -> None:
    if not client.is_configured():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Payments provider not configured",
        )


@router.post("/payment-intents", status_code=status.HTTP_201_CREATED)
async def create_payment_intent(
    req: PaymentIntentRequest,
    session: AsyncSession = Depends(db_session),
    client: PaymentsClient = Depends(get_payments_client),
) -> Dict[str, Any]:
    """Create a payment intent on the merchant's provider account."""
    _require_configured(client)
    merchant = await _merchant_account(session, req.tenant_id)
    try:
        result = await client.create_payment_intent(merchant.account_id, req.provider_payload())
    except ProviderError as exc:
        raise _provider_failure(exc)

    await record_transaction(
        session,
        tenant_id=req.tenant_id,
        kind="payment_intent",
        provider_response=result,
        amount=req.amount,
        currency=req.currency,
    )
    return {"success": True, "data": result}


@router.post("/checkout-sessions", status_code=status.HTTP_201_CREATED)
async def create_checkout_session(
    req: CheckoutSessionRequest,
    session: AsyncSession = Depends(db_session),
    client: PaymentsClient = Depends(get_payments_client),
) -> Dict[str, Any]:
    """Create a hosted checkout session on the merchant's provider account."""
    _require_configured(client)
    merchant = await _merchant_account(session, req.tenant_id)
    try:
        result = await client.create_checkout_session(merchant.account_id, req.provider_payload())
    except ProviderError as exc:
        raise _provider_failure(exc)

    await record_transaction(
        session,
        tenant_id=req.tenant_id,
        kind="checkout_session",
        provider_response=result,
    )
    return {"success": True, "data": result}
