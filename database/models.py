"""
SQLAlchemy ORM models for merchant profiles, payment transactions and
shipper accounts.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    BigInteger,
    Column,
    DateTime,
    Index,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class MerchantProfile(Base):
    __tablename__ = "merchant_profiles"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    tenant_id = Column(String(128), nullable=False)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(64))
    address = Column(Text)
    gst_number = Column(String(64))
    company_name = Column(String(255))
    remark = Column(Text)
    account_id = Column(String(128))      # payments-provider merchant account
    status = Column(String(64), nullable=False, default="created")
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow)

    __table_args__ = (
        UniqueConstraint("tenant_id", "email", name="unique_tenant_email"),
        Index("idx_merchant_tenant", "tenant_id"),
        Index("idx_merchant_account", "account_id"),
    )

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "tenantId": self.tenant_id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "address": self.address,
            "gstNumber": self.gst_number,
            "companyName": self.company_name,
            "remark": self.remark,
            "accountId": self.account_id,
            "status": self.status,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


class PaymentTransaction(Base):
    __tablename__ = "payment_transactions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    tenant_id = Column(String(128), nullable=False)
    kind = Column(String(32), nullable=False)   # payment_intent | checkout_session
    provider_id = Column(String(128))
    amount = Column(BigInteger)
    currency = Column(String(8))
    status = Column(String(64), nullable=False, default="created")
    payload = Column(JSON, default=dict)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow)

    __table_args__ = (
        Index("idx_transaction_provider", "provider_id"),
    )

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "tenantId": self.tenant_id,
            "kind": self.kind,
            "providerId": self.provider_id,
            "amount": self.amount,
            "currency": self.currency,
            "status": self.status,
            "payload": self.payload or {},
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


class ShipperAccount(Base):
    __tablename__ = "shipper_accounts"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    tenant_id = Column(String(128), nullable=False)
    account_number = Column(String(64), nullable=False)
    provider_reference = Column(String(255))
    status = Column(String(64), nullable=False, default="registered")
    payload = Column(JSON, default=dict)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "tenantId": self.tenant_id,
            "accountNumber": self.account_number,
            "providerReference": self.provider_reference,
            "status": self.status,
            "payload": self.payload or {},
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
