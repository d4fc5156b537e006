"""
Merchant profile CRUD.

Route prefix: /api/v1/merchants
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import db_session
from database.helpers import (
    create_merchant,
    delete_merchant,
    get_merchant_by_tenant,
    list_merchants,
    update_merchant,
)
from utils.schemas import MerchantCreate, MerchantUpdate

logger = logging.getLogger(__name__)

router = APIRouter(tags=["merchants"])

# Never cleared by a PATCH that sends null
_REQUIRED_FIELDS = {"name", "email"}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_merchant_profile(
    req: MerchantCreate,
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    """Create a merchant profile; one per tenant."""
    if await get_merchant_by_tenant(session, req.tenant_id) is not None:
        raise HTTPException(
            status_code=422,
            detail="Already exists",
        )

    try:
        merchant = await create_merchant(session, req.model_dump())
    except IntegrityError:
        await session.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Duplicate merchant profile for this tenant and email",
        )
    return {"success": True, "data": merchant.to_dict()}


@router.get("")
async def list_merchant_profiles(
    tenant_id: Optional[str] = Query(None, alias="tenantId"),
    email: Optional[str] = Query(None),
    limit: int = Query(50, ge=1, le=500),
    skip: int = Query(0, ge=0),
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    """List merchant profiles, newest first, optionally filtered."""
    rows = await list_merchants(
        session, tenant_id=tenant_id, email=email, limit=limit, skip=skip
    )
    return {"success": True, "data": [m.to_dict() for m in rows]}


@router.get("/{tenant_id}")
async def get_merchant_profile(
    tenant_id: str,
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    merchant = await get_merchant_by_tenant(session, tenant_id)
    if merchant is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    return {"success": True, "data": merchant.to_dict()}


@router.patch("/{tenant_id}")
async def update_merchant_profile(
    tenant_id: str,
    req: MerchantUpdate,
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    merchant = await get_merchant_by_tenant(session, tenant_id)
    if merchant is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")

    changes = {
        key: value
        for key, value in req.model_dump(exclude_unset=True).items()
        if value is not None or key not in _REQUIRED_FIELDS
    }
    try:
        merchant = await update_merchant(session, merchant, changes)
    except IntegrityError:
        await session.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Duplicate merchant profile for this tenant and email",
        )
    logger.info("Updated merchant %s: %s", tenant_id, sorted(changes))
    return {"success": True, "data": merchant.to_dict()}


@router.delete("/{tenant_id}")
async def delete_merchant_profile(
    tenant_id: str,
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    merchant = await get_merchant_by_tenant(session, tenant_id)
    if merchant is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    await delete_merchant(session, merchant)
    return {"success": True, "data": {"tenantId": tenant_id}}
