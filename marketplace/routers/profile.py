from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from marketplace.domain.records import NonBlankStr, UserProfile
from marketplace.repositories.record_store import RecordStore
from marketplace.routers.deps import get_store
from marketplace.services.views import add_unique

router = APIRouter(prefix="/profile", tags=["profile"])


class ListEntry(BaseModel):
    """One language or skill typed into the profile editor."""

    value: NonBlankStr


def _current(store: RecordStore) -> UserProfile:
    return store.get_user_profile() or UserProfile(full_name="", email="")


@router.get("")
def read_profile(store: RecordStore = Depends(get_store)):
    profile = store.get_user_profile()
    return {"profile": profile.to_dict() if profile else None}


@router.put("")
def replace_profile(profile: UserProfile, store: RecordStore = Depends(get_store)):
    store.save_user_profile(profile)
    return {"profile": profile.to_dict()}


def _add_value(store: RecordStore, attr: str, entry: ListEntry) -> dict:
    profile = _current(store)
    setattr(profile, attr, add_unique(getattr(profile, attr), entry.value))
    store.save_user_profile(profile)
    return {attr: getattr(profile, attr)}


@router.post("/languages")
def add_language(entry: ListEntry, store: RecordStore = Depends(get_store)):
    return _add_value(store, "languages", entry)


@router.post("/skills")
def add_skill(entry: ListEntry, store: RecordStore = Depends(get_store)):
    return _add_value(store, "skills", entry)
