"""
Pydantic schemas for request bodies.

Incoming JSON uses camelCase (``tenantId``); snake_case is accepted too.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


_CAMEL = ConfigDict(populate_by_name=True, str_strip_whitespace=True)


# ═══════════════════════════════════════════════════════════════════════════════
# Merchant profiles
# ═══════════════════════════════════════════════════════════════════════════════


class MerchantCreate(BaseModel):
    model_config = _CAMEL

    tenant_id: str = Field(..., alias="tenantId", min_length=1, max_length=128)
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=1, max_length=255)
    phone: Optional[str] = None
    address: Optional[str] = None
    gst_number: Optional[str] = Field(None, alias="gstNumber")
    company_name: Optional[str] = Field(None, alias="companyName")
    remark: Optional[str] = None
    account_id: Optional[str] = Field(None, alias="accountId")

    @field_validator("email")
    @classmethod
    def _lower_email(cls, value: str) -> str:
        return value.lower()


class MerchantUpdate(BaseModel):
    """Partial update — only fields present in the body are changed."""

    model_config = _CAMEL

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[str] = Field(None, min_length=1, max_length=255)
    phone: Optional[str] = None
    address: Optional[str] = None
    gst_number: Optional[str] = Field(None, alias="gstNumber")
    company_name: Optional[str] = Field(None, alias="companyName")
    remark: Optional[str] = None
    account_id: Optional[str] = Field(None, alias="accountId")

    @field_validator("email")
    @classmethod
    def _lower_email(cls, value: Optional[str]) -> Optional[str]:
        return value.lower() if value else value


# ═══════════════════════════════════════════════════════════════════════════════
# Payments proxy
# ═══════════════════════════════════════════════════════════════════════════════


class PaymentIntentRequest(BaseModel):
    """Extra provider fields (metadata, capture_method, …) are passed through."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    tenant_id: str = Field(..., alias="tenantId", min_length=1)
    amount: int = Field(..., gt=0)
    currency: str = "usd"
    payment_method_types: List[str] = Field(default_factory=lambda: ["card"])

    def provider_payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude={"tenant_id"}, exclude_none=True)


class CheckoutSessionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    tenant_id: str = Field(..., alias="tenantId", min_length=1)
    line_items: List[Dict[str, Any]] = Field(..., min_length=1)
    success_url: Optional[str] = None
    cancel_url: Optional[str] = None

    def provider_payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude={"tenant_id"}, exclude_none=True)


# ═══════════════════════════════════════════════════════════════════════════════
# Shipping proxy
# ═══════════════════════════════════════════════════════════════════════════════


class ShipperAccountRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    tenant_id: str = Field(..., alias="tenantId", min_length=1)
    account_number: str = Field(..., alias="accountNumber", min_length=1)

    def provider_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude={"tenant_id"}, exclude_none=True)
