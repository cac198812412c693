from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from marketplace.domain.records import BillingEntry, PaymentMethod
from marketplace.repositories.record_store import RecordStore
from marketplace.routers.deps import get_store
from marketplace.services.views import (
    STATEMENT_FILENAME,
    ViewFilterError,
    build_earnings_view,
    export_statement_csv,
)

router = APIRouter(tags=["billing"])


@router.get("/billing")
def list_billing(store: RecordStore = Depends(get_store)):
    return {"rows": [r.to_dict() for r in store.get_billing()]}


@router.put("/billing")
def replace_billing(rows: list[BillingEntry], store: RecordStore = Depends(get_store)):
    store.save_billing(rows)
    return {"rows": [r.to_dict() for r in rows]}


@router.get("/billing/payment-methods")
def list_payment_methods(store: RecordStore = Depends(get_store)):
    return {"methods": [m.to_dict() for m in store.get_payment_methods()]}


@router.put("/billing/payment-methods")
def replace_payment_methods(methods: list[PaymentMethod], store: RecordStore = Depends(get_store)):
    store.save_payment_methods(methods)
    return {"methods": [m.to_dict() for m in methods]}


@router.get("/earnings")
def earnings(date_from: str = Query("", alias="from"), date_to: str = Query("", alias="to"), store: RecordStore = Depends(get_store)):
    try:
        view = build_earnings_view(store.get_billing(), date_from, date_to)
    except ViewFilterError as exc:
        raise HTTPException(400, str(exc))
    return view.to_dict()


@router.get("/earnings/statement.csv")
def earnings_statement(date_from: str = Query("", alias="from"), date_to: str = Query("", alias="to"), store: RecordStore = Depends(get_store)):
    try:
        view = build_earnings_view(store.get_billing(), date_from, date_to)
    except ViewFilterError as exc:
        raise HTTPException(400, str(exc))
    return Response(
        content=export_statement_csv(view.rows),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{STATEMENT_FILENAME}"'},
    )
