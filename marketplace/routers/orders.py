from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from marketplace.domain.records import OrderCategory
from marketplace.repositories.record_store import RecordStore
from marketplace.routers.deps import require_seller
from marketplace.services.views import ViewFilterError, build_orders_view

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("")
def list_orders(category: str = OrderCategory.PRIORITY.value, store: RecordStore = Depends(require_seller)):
    try:
        view = build_orders_view(store.get_orders(), category)
    except ViewFilterError as exc:
        raise HTTPException(400, str(exc))
    return view.to_dict()
