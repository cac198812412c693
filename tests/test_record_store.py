"""
Behaviour of the typed record store over in-memory and JSON-file substrates.
"""
from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from marketplace.domain.records import (
    BillingEntry,
    Gig,
    GigMedia,
    MediaType,
    OnboardingDraft,
    OnboardingProfileDraft,
    Order,
    OrderCategory,
    PackageName,
    PackageTier,
    PaymentMethod,
    RegistrationDraft,
    Role,
    UserCertification,
    UserProfile,
    UserProject,
)
from marketplace.repositories.json_storage import JsonFileBackend, MemoryBackend
from marketplace.repositories.record_store import SEEDABLE_KINDS, RecordKind, RecordStore

FIXED_NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def _gig(gig_id: str, title: str = "Logo Design", seller: str = "u_1") -> Gig:
    return Gig(
        id=gig_id,
        seller_id=seller,
        title=title,
        category="Design",
        packages=[PackageTier(name=PackageName.BASIC, price=25, delivery_days=3, revisions=1)],
        gallery=[GigMedia(url="data:image/png;base64,AAA", type=MediaType.IMAGE)],
    )


SAMPLE_VALUES = {
    RecordKind.PROFILE: UserProfile(
        full_name="Ada Lovelace",
        email="ada@example.com",
        phone="+44 1",
        languages=["English"],
        skills=["Math"],
        projects=[UserProject(link="https://example.com", description="Engine")],
        certifications=[UserCertification(name="CS", by="Uni", year="1843")],
    ),
    RecordKind.ONBOARDING: OnboardingDraft(
        profile=OnboardingProfileDraft(full_name="Ada", email="ada@example.com", experience_years="3", skills=["Math"])
    ),
    RecordKind.REGISTRATION: RegistrationDraft(first_name="Ada", last_name="Lovelace", email="ada@example.com", country="UK"),
    RecordKind.USER_ID: "u_lx1abc_9zzzzz",
    RecordKind.ROLE: Role.SELLER,
    RecordKind.GIGS: [_gig("g1"), _gig("g2", "Landing Page")],
    RecordKind.BILLING: [
        BillingEntry(date=FIXED_NOW, document="Invoice", service="Logo", order="#1", currency="USD", total=200),
        BillingEntry(date=FIXED_NOW - timedelta(days=3), document="Receipt", service="Site", order="#2", currency="EUR", total=12.5),
    ],
    RecordKind.PAYMENT_METHODS: [PaymentMethod(provider="PayPal", account="a@b.c"), PaymentMethod(provider="PayPal", account="a@b.c")],
    RecordKind.ORDERS: [
        Order(id="o1", category=OrderCategory.LATE, buyer="Acme", gig="Site", due_on=FIXED_NOW, status="Delayed"),
    ],
}


@pytest.mark.parametrize("kind", list(RecordKind))
def test_get_after_set_returns_equal_value(memory_store, kind):
    value = SAMPLE_VALUES[kind]
    memory_store.set(kind, value)
    assert memory_store.get(kind) == value


def test_defaults_for_missing_slots(memory_store):
    assert memory_store.get(RecordKind.GIGS) == []
    assert memory_store.get(RecordKind.BILLING) == []
    assert memory_store.get(RecordKind.PROFILE) is None
    assert memory_store.get(RecordKind.ROLE) is None


def test_malformed_json_reads_as_default(caplog):
    backend = MemoryBackend({"gigs": "{not json", "userProfile": "[1, 2]"})
    store = RecordStore(backend)
    assert store.get(RecordKind.GIGS) == []
    assert store.get(RecordKind.PROFILE) is None
    assert "gigs" in caplog.text


def test_unknown_enum_values_read_as_default():
    bad_order = {"id": "o9", "category": "Archived", "buyer": "x", "gig": "y", "dueOn": "2024-01-01", "status": "?"}
    backend = MemoryBackend({"orders": json.dumps([bad_order]), "role": json.dumps("admin")})
    store = RecordStore(backend)
    assert store.get_orders() == []
    assert store.get_role() is None


def test_set_rejects_unknown_package_tier(memory_store):
    payload = _gig("g1").to_dict()
    payload["packages"][0]["name"] = "Gold"
    with pytest.raises(ValidationError):
        memory_store.set(RecordKind.GIGS, [payload])
    assert memory_store.get_gigs() == []


@pytest.mark.parametrize("field", ["id", "sellerId", "title"])
def test_set_rejects_blank_required_gig_fields(memory_store, field):
    payload = _gig("g1").to_dict()
    payload[field] = "  "
    with pytest.raises(ValidationError):
        memory_store.set(RecordKind.GIGS, [payload])
    with pytest.raises(ValidationError):
        memory_store.upsert(RecordKind.GIGS, payload)
    assert memory_store.get_gigs() == []


def test_blank_payment_account_is_rejected(memory_store):
    with pytest.raises(ValidationError):
        memory_store.save_payment_methods([{"provider": "PayPal", "account": ""}])


def test_wire_shape_is_camel_case_and_drops_unset_fields():
    payload = _gig("g1").to_dict()
    assert payload["sellerId"] == "u_1"
    assert payload["packages"][0]["deliveryDays"] == 3
    assert payload["packages"][0]["extras"] == {}
    assert "thumbnail" not in payload
    assert Gig.model_validate(payload) == _gig("g1")


def test_billing_rows_are_frozen_and_naive_dates_are_utc():
    row = BillingEntry.model_validate({"date": "2024-01-05T10:00:00", "total": 5})
    assert row.date == datetime(2024, 1, 5, 10, tzinfo=timezone.utc)
    with pytest.raises(ValidationError):
        row.total = 6


def test_upsert_replaces_in_place_and_appends_new(memory_store):
    memory_store.save_gigs([_gig("a"), _gig("b"), _gig("c")])

    memory_store.upsert_gig(_gig("b", "Renamed"))
    gigs = memory_store.get_gigs()
    assert [g.id for g in gigs] == ["a", "b", "c"]
    assert gigs[1].title == "Renamed"

    memory_store.upsert_gig(_gig("d"))
    assert [g.id for g in memory_store.get_gigs()] == ["a", "b", "c", "d"]


def test_upsert_accepts_mapping_and_custom_match_field(memory_store):
    memory_store.save_billing(SAMPLE_VALUES[RecordKind.BILLING])
    replacement = {"date": "2024-06-02T00:00:00Z", "document": "Invoice", "service": "Logo v2", "order": "#1", "currency": "USD", "total": 250}
    memory_store.upsert(RecordKind.BILLING, replacement, match_on="order")
    rows = memory_store.get_billing()
    assert [r.order for r in rows] == ["#1", "#2"]
    assert rows[0].service == "Logo v2"


def test_upsert_on_singular_kind_is_rejected(memory_store):
    with pytest.raises(TypeError):
        memory_store.upsert(RecordKind.PROFILE, SAMPLE_VALUES[RecordKind.PROFILE])


def test_delete_gig_by_id(memory_store):
    memory_store.save_gigs([_gig("a"), _gig("b")])
    memory_store.delete_gig("a")
    assert [g.id for g in memory_store.get_gigs()] == ["b"]
    memory_store.delete_gig("missing")
    assert [g.id for g in memory_store.get_gigs()] == ["b"]


def test_billing_bulk_overwrite_keeps_insertion_order(memory_store):
    newer = BillingEntry(date=FIXED_NOW, document="Invoice", service="A", order="#9", currency="USD", total=1)
    older = BillingEntry(date=FIXED_NOW - timedelta(days=400), document="Invoice", service="B", order="#8", currency="USD", total=2)
    memory_store.save_billing([newer, older])
    assert [r.order for r in memory_store.get_billing()] == ["#9", "#8"]


def test_seeding_is_off_by_default(memory_store):
    assert memory_store.get_billing() == []
    assert memory_store.backend.read("billingHistory") is None


def test_seed_on_first_read_is_idempotent():
    backend = MemoryBackend()
    store = RecordStore(backend, seed_on_read=True, clock=lambda: FIXED_NOW)

    first = store.get_orders()
    persisted = backend.read("orders")
    assert [o.id for o in first] == ["o1", "o2", "o3", "o4", "o5"]
    assert {o.category for o in first} == set(OrderCategory)

    for _ in range(3):
        assert store.get_orders() == first
    assert backend.read("orders") == persisted


def test_seeded_billing_and_payment_rows():
    store = RecordStore(MemoryBackend(), seed_on_read=True, clock=lambda: FIXED_NOW)
    billing = store.get_billing()
    assert [(b.order, b.total) for b in billing] == [("#1001", 200), ("#1000", 1200)]
    assert billing[1].date == FIXED_NOW - timedelta(days=35)
    assert [(p.provider, p.account) for p in store.get_payment_methods()] == [
        ("PayPal", "seller@example.com"),
        ("Stripe", "acct_1234"),
    ]


def test_existing_empty_collection_is_not_reseeded():
    backend = MemoryBackend({"billingHistory": "[]"})
    store = RecordStore(backend, seed_on_read=True)
    assert store.get_billing() == []


def test_explicit_seed_only_fills_empty_slots(memory_store):
    memory_store.save_payment_methods([PaymentMethod(provider="Wise", account="w-1")])
    written = memory_store.seed_demo_data()
    assert set(written) == {RecordKind.BILLING, RecordKind.ORDERS}
    assert [p.provider for p in memory_store.get_payment_methods()] == ["Wise"]
    assert memory_store.seed_demo_data() == []
    assert set(SEEDABLE_KINDS) == {RecordKind.BILLING, RecordKind.PAYMENT_METHODS, RecordKind.ORDERS}


def test_ensure_user_id_is_created_once(memory_store):
    first = memory_store.ensure_user_id()
    assert first.startswith("u_")
    assert memory_store.ensure_user_id() == first


def test_profile_falls_back_to_onboarding_then_registration(memory_store):
    memory_store.save_registration_draft(RegistrationDraft(first_name="Grace", last_name="Hopper", email="g@navy.mil", country="US"))
    profile = memory_store.get_user_profile()
    assert profile.full_name == "Grace Hopper"
    assert profile.country == "US"

    memory_store.save_onboarding_draft(
        OnboardingDraft(
            profile=OnboardingProfileDraft(
                full_name="Grace B. Hopper",
                email="g@navy.mil",
                skills=["COBOL"],
                projects=[UserProject(image="data:x", link="https://a", description="Compiler")],
            )
        )
    )
    profile = memory_store.get_user_profile()
    assert profile.full_name == "Grace B. Hopper"
    assert profile.skills == ["COBOL"]
    assert profile.projects == [UserProject(image=None, link="https://a", description="Compiler")]

    saved = UserProfile(full_name="Saved", email="s@x")
    memory_store.save_user_profile(saved)
    assert memory_store.get_user_profile() == saved


def test_legacy_onboarding_blob_with_loose_fields():
    legacy = {"profile": {"fullName": "Lin", "experienceYears": 4, "languages": ["Hindi"]}}
    store = RecordStore(MemoryBackend({"onboarding": json.dumps(legacy)}))
    profile = store.get_user_profile()
    assert profile.full_name == "Lin"
    assert profile.email == ""
    assert profile.languages == ["Hindi"]
    assert store.get(RecordKind.ONBOARDING).profile.experience_years == "4"


def test_json_file_backend_persists_between_instances(tmp_path):
    path = tmp_path / "store" / "local.json"
    RecordStore(JsonFileBackend(path)).save_gigs([_gig("g1")])
    reopened = RecordStore(JsonFileBackend(path))
    assert [g.id for g in reopened.get_gigs()] == ["g1"]
    raw = json.loads(path.read_text(encoding="utf-8"))
    assert set(raw) == {"gigs"}
    assert isinstance(raw["gigs"], str)


def test_json_file_backend_survives_corrupt_file(tmp_path):
    path = tmp_path / "local.json"
    path.write_text("{{{", encoding="utf-8")
    store = RecordStore(JsonFileBackend(path))
    assert store.get_gigs() == []
    store.set_role("buyer")
    assert store.get_role() is Role.BUYER
