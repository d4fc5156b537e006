"""
Database helper functions — merchant profiles, transactions and shipper
accounts.

"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import MerchantProfile, PaymentTransaction, ShipperAccount

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _redact(value: Any) -> Any:
    """Drop credential-looking keys (``*key*``, ``*secret*``) before storage."""
    if isinstance(value, dict):
        return {
            k: _redact(v)
            for k, v in value.items()
            if "key" not in k.lower() and "secret" not in k.lower()
        }
    if isinstance(value, list):
        return [_redact(v) for v in value]
    return value


# ── Merchant profiles ─────────────────────────────────────────────────────


async def get_merchant_by_tenant(session: AsyncSession, tenant_id: str) -> Optional[MerchantProfile]:
    result = await session.execute(
        select(MerchantProfile).where(MerchantProfile.tenant_id == tenant_id).limit(1)
    )
    return result.scalar_one_or_none()


async def create_merchant(session: AsyncSession, fields: Dict[str, Any]) -> MerchantProfile:
    """
    Insert a merchant profile with status ``created``.

    ``IntegrityError`` from the (tenant_id, email) unique constraint is left
    to the caller.
    """
    merchant = MerchantProfile(**fields, status="created", created_at=_now(), updated_at=_now())
    session.add(merchant)
    await session.flush()
    logger.info("Created merchant profile for tenant %s", merchant.tenant_id)
    return merchant


async def list_merchants(
    session: AsyncSession,
    *,
    tenant_id: Optional[str] = None,
    email: Optional[str] = None,
    limit: int = 50,
    skip: int = 0,
) -> List[MerchantProfile]:
    stmt = select(MerchantProfile)
    if tenant_id:
        stmt = stmt.where(MerchantProfile.tenant_id == tenant_id)
    if email:
        stmt = stmt.where(MerchantProfile.email == email.lower())
    stmt = stmt.order_by(MerchantProfile.created_at.desc()).offset(skip).limit(limit)
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def update_merchant(
    session: AsyncSession,
    merchant: MerchantProfile,
    changes: Dict[str, Any],
) -> MerchantProfile:
    for key, value in changes.items():
        setattr(merchant, key, value)
    merchant.updated_at = _now()
    await session.flush()
    return merchant


async def delete_merchant(session: AsyncSession, merchant: MerchantProfile) -> None:
    await session.delete(merchant)
    await session.flush()
    logger.info("Deleted merchant profile for tenant %s", merchant.tenant_id)


async def set_merchant_status(
    session: AsyncSession,
    account_id: str,
    status: Optional[str],
) -> Optional[MerchantProfile]:
    """Update the status of the merchant linked to a provider account."""
    result = await session.execute(
        select(MerchantProfile).where(MerchantProfile.account_id == account_id).limit(1)
    )
    merchant = result.scalar_one_or_none()
    if merchant is None:
        return None
    merchant.status = status or merchant.status
    merchant.updated_at = _now()
    await session.flush()
    return merchant


# ── Payment transactions ──────────────────────────────────────────────────


async def record_transaction(
    session: AsyncSession,
    *,
    tenant_id: str,
    kind: str,
    provider_response: Dict[str, Any],
    amount: Optional[int] = None,
    currency: Optional[str] = None,
) -> PaymentTransaction:
    txn = PaymentTransaction(
        tenant_id=tenant_id,
        kind=kind,
        provider_id=provider_response.get("id"),
        amount=provider_response.get("amount", amount),
        currency=provider_response.get("currency", currency),
        status=provider_response.get("status") or "created",
        payload=provider_response,
        created_at=_now(),
        updated_at=_now(),
    )
    session.add(txn)
    await session.flush()
    return txn


async def set_transaction_status(
    session: AsyncSession,
    provider_id: str,
    status: Optional[str],
    payload: Optional[Dict[str, Any]] = None,
) -> Optional[PaymentTransaction]:
    result = await session.execute(
        select(PaymentTransaction).where(PaymentTransaction.provider_id == provider_id).limit(1)
    )
    txn = result.scalar_one_or_none()
    if txn is None:
        return None
    txn.status = status or txn.status
    if payload is not None:
        txn.payload = payload
    txn.updated_at = _now()
    await session.flush()
    return txn


# ── Shipper accounts ──────────────────────────────────────────────────────


async def record_shipper_account(
    session: AsyncSession,
    *,
    tenant_id: str,
    account_number: str,
    provider_response: Dict[str, Any],
) -> ShipperAccount:
    reference = provider_response.get("id") or provider_response.get("transactionId")
    account = ShipperAccount(
        tenant_id=tenant_id,
        account_number=account_number,
        provider_reference=reference,
        status="registered",
        payload=_redact(provider_response),
        created_at=_now(),
        updated_at=_now(),
    )
    session.add(account)
    await session.flush()
    return account
