"""
Typed record store over a key-value substrate.

One JSON value per entity kind. Reads fail soft to a documented default,
writes replace the whole record (last writer wins). Collections can be
upserted/deleted by identifier. Example rows are only written when seeding
is explicitly enabled.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Iterable, Mapping, Optional

from pydantic import TypeAdapter, ValidationError

from marketplace.core.security import new_user_id
from marketplace.domain.migrations import resolve_user_profile
from marketplace.domain.records import (
    BillingEntry,
    Gig,
    NonBlankStr,
    OnboardingDraft,
    Order,
    PaymentMethod,
    Record,
    RegistrationDraft,
    Role,
    UserProfile,
)
from marketplace.repositories import seeds
from marketplace.repositories.json_storage import JsonFileBackend, KeyValueBackend, MemoryBackend

logger = logging.getLogger(__name__)


class RecordKind(str, Enum):
    PROFILE = "userProfile"
    ONBOARDING = "onboarding"
    REGISTRATION = "registration"
    USER_ID = "userId"
    ROLE = "role"
    GIGS = "gigs"
    BILLING = "billingHistory"
    PAYMENT_METHODS = "paymentMethods"
    ORDERS = "orders"


@dataclass(frozen=True)
class _Slot:
    adapter: TypeAdapter  # Optional[...] so a stored null reads as absent
    item_type: Optional[type[Record]] = None  # set for collections
    seed: Optional[Callable[[datetime], list]] = None

    @property
    def collection(self) -> bool:
        return self.item_type is not None


def _single(value_type: Any) -> _Slot:
    return _Slot(TypeAdapter(Optional[value_type]))


def _many(item_type: type[Record], seed: Optional[Callable[[datetime], list]] = None) -> _Slot:
    return _Slot(TypeAdapter(Optional[list[item_type]]), item_type=item_type, seed=seed)


_SLOTS: dict[RecordKind, _Slot] = {
    RecordKind.PROFILE: _single(UserProfile),
    RecordKind.ONBOARDING: _single(OnboardingDraft),
    RecordKind.REGISTRATION: _single(RegistrationDraft),
    RecordKind.USER_ID: _single(NonBlankStr),
    RecordKind.ROLE: _single(Role),
    RecordKind.GIGS: _many(Gig),
    RecordKind.BILLING: _many(BillingEntry, seed=seeds.billing_seed),
    RecordKind.PAYMENT_METHODS: _many(PaymentMethod, seed=seeds.payment_methods_seed),
    RecordKind.ORDERS: _many(Order, seed=seeds.orders_seed),
}

SEEDABLE_KINDS = tuple(kind for kind, slot in _SLOTS.items() if slot.seed is not None)

_MISSING = object()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RecordStore:
    """Typed get/set/upsert/delete over one slot per record kind."""

    def __init__(
        self,
        backend: KeyValueBackend,
        *,
        seed_on_read: bool = False,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.backend = backend
        self.seed_on_read = seed_on_read
        self._clock = clock

    def _coerce_item(self, slot: _Slot, item: Any) -> Record:
        if isinstance(item, slot.item_type):
            return item
        if isinstance(item, Mapping):
            return slot.item_type.model_validate(item)
        raise TypeError(f"expected {slot.item_type.__name__}, got {type(item).__name__}")

    def _load(self, kind: RecordKind) -> Any:
        """Decoded slot value, or _MISSING when absent/null/malformed."""
        text = self.backend.read(kind.value)
        if text is None:
            return _MISSING
        try:
            value = _SLOTS[kind].adapter.validate_json(text)
        except ValidationError as exc:
            logger.warning("Unreadable record in slot %s, using default: %s", kind.value, exc)
            return _MISSING
        return _MISSING if value is None else value

    def _write_seed(self, kind: RecordKind) -> list:
        rows = _SLOTS[kind].seed(self._clock())
        self.set(kind, rows)
        logger.info("Seeded %d example rows into %s", len(rows), kind.value)
        return rows

    # -------------------------- contract --------------------------
    def get(self, kind: RecordKind) -> Any:
        """Return the stored value, or [] / None when absent or unreadable."""
        kind = RecordKind(kind)
        slot = _SLOTS[kind]
        value = self._load(kind)
        if value is not _MISSING:
            return value
        if self.seed_on_read and slot.seed is not None:
            return self._write_seed(kind)
        return [] if slot.collection else None

    def set(self, kind: RecordKind, value: Any) -> None:
        """Validate and replace the whole slot; raises ValidationError on a bad shape."""
        kind = RecordKind(kind)
        slot = _SLOTS[kind]
        if value is None and slot.collection:
            raise TypeError(f"{kind.value} expects a list")
        value = slot.adapter.validate_python(value)
        text = slot.adapter.dump_json(value, by_alias=True, exclude_none=True)
        self.backend.write(kind.value, text.decode("utf-8"))

    def _collection_slot(self, kind: RecordKind) -> _Slot:
        slot = _SLOTS[RecordKind(kind)]
        if not slot.collection:
            raise TypeError(f"{RecordKind(kind).value} is not a collection")
        return slot

    def upsert(self, kind: RecordKind, item: Any, match_on: str = "id") -> None:
        """Replace the item sharing ``match_on`` in place, or append it last."""
        slot = self._collection_slot(kind)
        item = self._coerce_item(slot, item)
        key = getattr(item, match_on)
        items = list(self.get(kind))
        for idx, existing in enumerate(items):
            if getattr(existing, match_on, _MISSING) == key:
                items[idx] = item
                break
        else:
            items.append(item)
        self.set(kind, items)

    def delete(self, kind: RecordKind, item_id: Any, match_on: str = "id") -> None:
        self._collection_slot(kind)
        items = self.get(kind)
        kept = [item for item in items if getattr(item, match_on, _MISSING) != item_id]
        if len(kept) != len(items):
            self.set(kind, kept)

    def seed_demo_data(self, kinds: Optional[Iterable[RecordKind]] = None) -> list[RecordKind]:
        """Write example rows into every empty seedable slot; returns the kinds written."""
        targets = SEEDABLE_KINDS if kinds is None else tuple(RecordKind(k) for k in kinds)
        written = []
        for kind in targets:
            if _SLOTS[kind].seed is None:
                raise ValueError(f"{kind.value} has no example rows")
            if self._load(kind) is _MISSING:
                self._write_seed(kind)
                written.append(kind)
        return written

    # -------------------------- profile / identity --------------------------
    def get_user_profile(self) -> Optional[UserProfile]:
        return resolve_user_profile(
            self.get(RecordKind.PROFILE),
            self.get(RecordKind.ONBOARDING),
            self.get(RecordKind.REGISTRATION),
        )

    def save_user_profile(self, profile: UserProfile) -> None:
        self.set(RecordKind.PROFILE, profile)

    def save_registration_draft(self, draft: RegistrationDraft) -> None:
        self.set(RecordKind.REGISTRATION, draft)

    def save_onboarding_draft(self, draft: OnboardingDraft) -> None:
        self.set(RecordKind.ONBOARDING, draft)

    def ensure_user_id(self) -> str:
        user_id = self.get(RecordKind.USER_ID)
        if not user_id:
            user_id = new_user_id()
            self.set(RecordKind.USER_ID, user_id)
        return user_id

    def get_role(self) -> Optional[Role]:
        return self.get(RecordKind.ROLE)

    def set_role(self, role: Role | str | None) -> None:
        self.set(RecordKind.ROLE, role)

    # -------------------------- collections --------------------------
    def get_gigs(self) -> list[Gig]:
        return self.get(RecordKind.GIGS)

    def save_gigs(self, gigs: list[Gig]) -> None:
        self.set(RecordKind.GIGS, gigs)

    def upsert_gig(self, gig: Gig) -> None:
        self.upsert(RecordKind.GIGS, gig)

    def delete_gig(self, gig_id: str) -> None:
        self.delete(RecordKind.GIGS, gig_id)

    def get_billing(self) -> list[BillingEntry]:
        return self.get(RecordKind.BILLING)

    def save_billing(self, rows: list[BillingEntry]) -> None:
        self.set(RecordKind.BILLING, rows)

    def get_payment_methods(self) -> list[PaymentMethod]:
        return self.get(RecordKind.PAYMENT_METHODS)

    def save_payment_methods(self, methods: list[PaymentMethod]) -> None:
        self.set(RecordKind.PAYMENT_METHODS, methods)

    def get_orders(self) -> list[Order]:
        return self.get(RecordKind.ORDERS)

    def save_orders(self, orders: list[Order]) -> None:
        self.set(RecordKind.ORDERS, orders)


def build_record_store(settings) -> RecordStore:
    """Pick the substrate named by STORE_BACKEND."""
    if settings.store_backend == "sql":
        from marketplace.repositories.sql_repository import SQLSlotBackend

        backend = SQLSlotBackend()
    elif settings.store_backend == "memory":
        backend = MemoryBackend()
    else:
        backend = JsonFileBackend(settings.store_path)
    return RecordStore(backend, seed_on_read=settings.seed_demo_data)
