from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import ValidationError

from marketplace.domain.records import Gig, GigDraft
from marketplace.repositories.record_store import RecordStore
from marketplace.routers.deps import get_store
from marketplace.services.views import find_gig, gigs_for_seller

router = APIRouter(prefix="/gigs", tags=["gigs"])


@router.get("")
def list_gigs(seller: str = "", store: RecordStore = Depends(get_store)):
    return {"gigs": [g.to_dict() for g in gigs_for_seller(store.get_gigs(), seller)]}


@router.get("/{gig_id}")
def read_gig(gig_id: str, store: RecordStore = Depends(get_store)):
    gig = find_gig(store.get_gigs(), gig_id)
    if not gig:
        raise HTTPException(404, "Gig not found")
    return gig.to_dict()


@router.put("/{gig_id}")
def save_gig(gig_id: str, draft: GigDraft, store: RecordStore = Depends(get_store)):
    if draft.id is not None and draft.id != gig_id:
        raise HTTPException(400, "Gig id does not match the URL")
    seller_id = (draft.seller_id or "").strip() or store.ensure_user_id()
    try:
        gig = Gig.model_validate({**draft.model_dump(), "id": gig_id, "seller_id": seller_id})
    except ValidationError as exc:
        raise HTTPException(422, str(exc))
    store.upsert_gig(gig)
    return gig.to_dict()


@router.delete("/{gig_id}", status_code=204)
def remove_gig(gig_id: str, store: RecordStore = Depends(get_store)):
    store.delete_gig(gig_id)
    return Response(status_code=204)
