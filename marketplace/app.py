from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from marketplace.core.config import Settings, get_settings
from marketplace.core.logging_setup import configure_logging
from marketplace.repositories.record_store import RecordStore, build_record_store
from marketplace.routers import auth as auth_router
from marketplace.routers import billing as billing_router
from marketplace.routers import gigs as gigs_router
from marketplace.routers import orders as orders_router
from marketplace.routers import profile as profile_router
from marketplace.services.account_service import AccountService

logger = logging.getLogger(__name__)

DEV_ORIGINS = {
    "http://localhost:8080",
    "http://127.0.0.1:8080",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Baseline headers for a JSON API (no framing, no sniffing)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer-when-downgrade")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[RecordStore] = None,
    account_service: Optional[AccountService] = None,
) -> FastAPI:
    """Factory compatible with uvicorn/gunicorn (``--factory``)."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Freelance Marketplace API")
    store = store or build_record_store(settings)
    app.state.settings = settings
    app.state.record_store = store
    app.state.account_service = account_service or AccountService(store=store, settings=settings)
    logger.info(
        "Record store ready (backend=%s, seed_on_read=%s)", settings.store_backend, store.seed_on_read
    )

    if settings.app_env != "prod":
        app.add_middleware(
            CORSMiddleware,
            allow_origins=sorted(DEV_ORIGINS),
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        )
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")

    app.include_router(auth_router.router)
    app.include_router(profile_router.router)
    app.include_router(gigs_router.router)
    app.include_router(billing_router.router)
    app.include_router(orders_router.router)
    return app
