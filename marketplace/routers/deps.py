"""Accessors for objects the app factory places on ``app.state``."""
from __future__ import annotations

from fastapi import HTTPException, Request

from marketplace.domain.records import Role
from marketplace.repositories.record_store import RecordStore
from marketplace.services.account_service import AccountService


def get_store(request: Request) -> RecordStore:
    store = getattr(getattr(request.app, "state", None), "record_store", None)
    if store is None:
        raise RuntimeError("RecordStore not configured")
    return store


def get_account_service(request: Request) -> AccountService:
    svc = getattr(getattr(request.app, "state", None), "account_service", None)
    if svc is None:
        raise RuntimeError("AccountService not configured")
    return svc


def require_seller(request: Request) -> RecordStore:
    store = get_store(request)
    if store.get_role() is not Role.SELLER:
        raise HTTPException(403, "Seller only")
    return store
