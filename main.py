"""
Merchant Gateway — application entry point.
"""

from __future__ import annotations

import logging
import sys

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.middleware import register_exception_handlers, register_middleware
from config.settings import config
from connectors.payments import build_payments_client
from connectors.shipping import build_shipping_client
from database.session import dispose_engine, init_models
from merchants.routes import router as merchants_router
from payments.routes import router as payments_router
from shipping.routes import router as shipping_router
from webhooks.routes import router as webhooks_router

logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
    stream=sys.stdout,
)
for _noisy in ("httpcore", "httpx", "urllib3", "aiosqlite"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Merchant Gateway",
        version="1.0.0",
        description="Merchant profiles, payments and shipping proxies, provider webhooks.",
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middleware(app)
    register_exception_handlers(app)

    # Outbound provider clients; the shipping client owns the OAuth token cache
    app.state.payments_client = build_payments_client()
    app.state.shipping_client = build_shipping_client()

    # Routes
    app.include_router(merchants_router, prefix="/api/v1/merchants")
    app.include_router(payments_router, prefix="/api/v1/payments")
    app.include_router(shipping_router, prefix="/api/v1/shipping")
    app.include_router(webhooks_router, prefix="/webhook")

    @app.get("/health", tags=["meta"])
    async def health() -> dict:
        return {"success": True, "status": "ok"}

    @app.on_event("startup")
    async def on_startup():
        logger.info("Creating database tables…")
        await init_models()

        for name, client in (
            ("payments", app.state.payments_client),
            ("shipping", app.state.shipping_client),
        ):
            if not client.is_configured():
                logger.warning("%s provider not configured — its routes will return 503", name)
        for route in ("merchant_status", "payment_intent"):
            if not config.webhook_secret_for(route):
                logger.warning("No webhook secret for %s — those webhooks will be rejected", route)

        logger.info("Application ready to accept requests.")

    @app.on_event("shutdown")
    async def on_shutdown():
        await dispose_engine()

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level="debug" if config.debug else "info",
    )
