from __future__ import annotations

import csv
import io
from datetime import datetime, timezone

import pytest

from marketplace.domain.records import BillingEntry, Gig, Order, OrderCategory
from marketplace.services.views import (
    STATEMENT_FILENAME,
    ViewFilterError,
    add_unique,
    build_earnings_view,
    build_orders_view,
    export_statement_csv,
    filter_by_date_range,
    filter_orders_by_category,
    find_gig,
    gigs_for_seller,
    parse_bound,
)


def _entry(day: str, total: float, service: str = "Logo Design", order: str = "#1") -> BillingEntry:
    return BillingEntry(date=f"{day}T00:00:00Z", document="Invoice", service=service, order=order, currency="USD", total=total)


BILLING = [
    _entry("2024-01-10", 100, order="#1"),
    _entry("2024-02-15", 250.5, order="#2"),
    _entry("2023-12-31", 40, order="#3"),
]


def _orders() -> list[Order]:
    return [
        Order(id=f"o{i}", category=c, buyer="b", gig="g", due_on="2024-01-01T00:00:00Z", status=c.value)
        for i, c in enumerate(OrderCategory, start=1)
    ]


def test_empty_bounds_return_full_collection():
    assert filter_by_date_range(BILLING, None, None, key=lambda b: b.date) == BILLING
    assert filter_by_date_range(BILLING, "", "  ", key=lambda b: b.date) == BILLING


def test_inverted_bounds_return_nothing():
    assert filter_by_date_range(BILLING, "2024-03-01", "2024-01-01", key=lambda b: b.date) == []


def test_bounds_are_inclusive_and_compare_dates_not_strings():
    rows = filter_by_date_range(BILLING, "2024-01-10", "2024-02-15", key=lambda b: b.date)
    assert [r.order for r in rows] == ["#1", "#2"]
    rows = filter_by_date_range(BILLING, None, "2024-01-01", key=lambda b: b.date)
    assert [r.order for r in rows] == ["#3"]


def test_open_lower_bound_only():
    rows = filter_by_date_range(BILLING, "2024-01-11", None, key=lambda b: b.date)
    assert [r.order for r in rows] == ["#2"]


def test_parse_bound_rejects_garbage():
    with pytest.raises(ViewFilterError):
        parse_bound("yesterday")
    with pytest.raises(ViewFilterError):
        parse_bound("2024-13-45")
    assert parse_bound("2024-05-06") == datetime(2024, 5, 6, tzinfo=timezone.utc)


def test_earnings_total_covers_filtered_rows_only():
    full = build_earnings_view(BILLING)
    assert full.total == pytest.approx(390.5)
    january = build_earnings_view(BILLING, "2024-01-01", "2024-01-31")
    assert [r.order for r in january.rows] == ["#1"]
    assert january.total == 100
    assert build_earnings_view([], "2024-01-01", None).total == 0


def test_category_filter_returns_exact_matches():
    orders = _orders()
    for category in OrderCategory:
        rows = filter_orders_by_category(orders, category)
        assert len(rows) == 1
        assert rows[0].category is category
    assert [o.id for o in filter_orders_by_category(orders, "Late")] == ["o2"]


def test_unknown_category_is_rejected():
    with pytest.raises(ViewFilterError):
        filter_orders_by_category(_orders(), "Archived")


def test_orders_view_counts_every_category():
    orders = _orders() + [Order(id="o9", category="Late", buyer="x", gig="y", due_on="2024-02-01", status="Delayed")]
    view = build_orders_view(orders)
    assert view.category is OrderCategory.PRIORITY
    assert view.counts[OrderCategory.LATE] == 2
    assert view.counts[OrderCategory.PRIORITY] == 1
    payload = view.to_dict()
    assert payload["categories"] == ["Priority", "Late", "Delivered", "Completed", "Cancelled"]
    assert [r["id"] for r in payload["rows"]] == ["o1"]


def test_statement_csv_is_bit_exact():
    rows = [
        BillingEntry(date="2024-03-07T15:00:00Z", document="Invoice", service='Say "Hi" Design', order="#1001", currency="USD", total=200.0),
        BillingEntry(date="2024-11-20T00:00:00Z", document="Receipt", service="Landing, Page", order="#1000", currency="EUR", total=12.5),
    ]
    assert export_statement_csv(rows) == (
        '"Date","Document","Service","Order","Currency","Total"\n'
        '"3/7/2024","Invoice","Say ""Hi"" Design","#1001","USD","200"\n'
        '"11/20/2024","Receipt","Landing, Page","#1000","EUR","12.5"'
    )
    assert STATEMENT_FILENAME == "earnings-statement.csv"


def test_statement_csv_parses_back_to_original_strings():
    service = 'The "Best" logo, "quoted" twice'
    text = export_statement_csv([_entry("2024-01-10", 100, service=service)])
    parsed = list(csv.reader(io.StringIO(text)))
    assert parsed[0] == ["Date", "Document", "Service", "Order", "Currency", "Total"]
    assert parsed[1][2] == service
    assert len(parsed) == 2


def test_statement_csv_for_empty_view_has_header_only():
    assert export_statement_csv([]) == '"Date","Document","Service","Order","Currency","Total"'


def test_gig_helpers():
    gigs = [Gig(id="g1", seller_id="s1", title="A"), Gig(id="g2", seller_id="s2", title="B")]
    assert [g.id for g in gigs_for_seller(gigs, "s2")] == ["g2"]
    assert gigs_for_seller(gigs, "") == gigs
    assert find_gig(gigs, "g1").title == "A"
    assert find_gig(gigs, "nope") is None


def test_add_unique_trims_and_dedupes():
    assert add_unique(["English"], " English ") == ["English"]
    assert add_unique(["English"], "Hindi") == ["English", "Hindi"]
    assert add_unique(["English"], "   ") == ["English"]
