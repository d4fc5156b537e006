"""
FastAPI dependencies (shared across routes).
"""

from __future__ import annotations

from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from connectors.payments import PaymentsClient
from connectors.shipping import ShippingClient
from database.session import get_db_session


async def db_session(session: AsyncSession = Depends(get_db_session)) -> AsyncGenerator[AsyncSession, None]:
    """Re-export so routes import from a single place."""
    yield session


def get_payments_client(request: Request) -> PaymentsClient:
    return request.app.state.payments_client


def get_shipping_client(request: Request) -> ShippingClient:
    """The shipping client owns the process-wide OAuth token cache."""
    return request.app.state.shipping_client
