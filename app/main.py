from __future__ import annotations

from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import build_router
from app.config import settings
from app.handlers import register_exception_handlers
from app.logging import configure_logging
from app.middleware import RequestIdMiddleware, RequestLogMiddleware, SecurityHeadersMiddleware

ENDPOINTS = {
    "setActivity": {
        "method": "POST",
        "path": "/setActivity",
        "description": "Activate or deactivate subscription",
    },
    "setSubscriptionDiscount": {
        "method": "POST",
        "path": "/setSubscriptionDiscount",
        "description": "Set discount for future subscription payments",
    },
    "setSubscriptionPaymentDate": {
        "method": "POST",
        "path": "/setSubscriptionPaymentDate",
        "description": "Set next subscription payment date",
    },
}


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.SERVICE_NAME,
        version=settings.SERVICE_VERSION,
        description="Signed proxy for Prodamus subscription management",
    )

    # Last added runs first
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestLogMiddleware)
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(build_router())

    @app.get("/")
    async def root():
        return {
            "name": "Prodamus API Wrapper",
            "service": settings.SERVICE_NAME,
            "version": settings.SERVICE_VERSION,
            "description": "Simple API wrapper for Prodamus subscription management",
            "status": "running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "endpoints": ENDPOINTS,
            "documentation": "/docs",
        }

    @app.on_event("startup")
    async def on_startup():
        configure_logging()

    return app


app = create_app()
