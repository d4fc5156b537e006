"""
Shipping proxy — shipper-account registration.

Route prefix: /api/v1/shipping
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import db_session, get_shipping_client
from connectors.errors import ProviderError, UpstreamAuthError
from connectors.shipping import ShippingClient
from database.helpers import record_shipper_account
from utils.schemas import ShipperAccountRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["shipping"])


@router.post("/shipper-accounts", status_code=status.HTTP_201_CREATED)
async def register_shipper_account(
    req: ShipperAccountRequest,
    session: AsyncSession = Depends(db_session),
    client: ShippingClient = Depends(get_shipping_client),
) -> Dict[str, Any]:
    """Register a shipper account with the shipping provider."""
    if not client.is_configured():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Shipping provider not configured",
        )

    try:
        result = await client.register_shipper_account(req.provider_payload())
    except UpstreamAuthError as exc:
        logger.error("Shipping provider authentication failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Shipping provider authentication failed",
        )
    except ProviderError as exc:
        code = exc.status_code if 400 <= exc.status_code < 500 else status.HTTP_502_BAD_GATEWAY
        raise HTTPException(status_code=code, detail=exc.detail or str(exc))

    account = await record_shipper_account(
        session,
        tenant_id=req.tenant_id,
        account_number=req.account_number,
        provider_response=result,
    )
    return {"success": True, "data": account.to_dict()}
