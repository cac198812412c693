"""
Derived views over stored records.

Every builder here is a pure function of the current records and the filter
parameters; nothing is cached between calls.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional, Sequence, TypeVar

from pydantic import ValidationError

from marketplace.domain.records import BillingEntry, Gig, Order, OrderCategory, parse_datetime

T = TypeVar("T")

STATEMENT_FILENAME = "earnings-statement.csv"
STATEMENT_HEADER = ("Date", "Document", "Service", "Order", "Currency", "Total")

_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")


class ViewFilterError(ValueError):
    """Raised when a filter parameter cannot be interpreted."""


# -------------------------------------- date ranges --------------------------------------
def parse_bound(value: str | datetime | None) -> Optional[datetime]:
    """Parse a date-range bound; empty means unbounded.

    ``YYYY-MM-DD`` is read as UTC midnight, matching how the browser's date
    inputs were interpreted.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    text = value.strip()
    if not text:
        return None
    if not _ISO_DATE.match(text):
        raise ViewFilterError(f"Invalid date: {value}")
    try:
        return parse_datetime(text)
    except ValidationError:
        raise ViewFilterError(f"Invalid date: {value}") from None


def filter_by_date_range(
    rows: Iterable[T],
    date_from: str | datetime | None,
    date_to: str | datetime | None,
    *,
    key: Callable[[T], datetime],
) -> list[T]:
    """Keep rows whose ``key`` falls inside [date_from, date_to] (inclusive)."""
    lower = parse_bound(date_from)
    upper = parse_bound(date_to)
    result = []
    for row in rows:
        moment = key(row)
        if lower is not None and moment < lower:
            continue
        if upper is not None and moment > upper:
            continue
        result.append(row)
    return result


# -------------------------------------- earnings --------------------------------------
@dataclass
class EarningsView:
    rows: list[BillingEntry]
    total: float
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "from": self.date_from.isoformat() if self.date_from else None,
            "to": self.date_to.isoformat() if self.date_to else None,
            "total": self.total,
            "rows": [row.to_dict() for row in self.rows],
        }


def build_earnings_view(
    billing: Sequence[BillingEntry],
    date_from: str | datetime | None = None,
    date_to: str | datetime | None = None,
) -> EarningsView:
    rows = filter_by_date_range(billing, date_from, date_to, key=lambda b: b.date)
    total = sum((row.total for row in rows), 0)
    return EarningsView(rows=rows, total=total, date_from=parse_bound(date_from), date_to=parse_bound(date_to))


def _format_date(value: datetime) -> str:
    return f"{value.month}/{value.day}/{value.year}"


def _format_total(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _quote(value: str) -> str:
    return '"' + str(value).replace('"', '""') + '"'


def export_statement_csv(rows: Iterable[BillingEntry]) -> str:
    """Statement text: every field double-quoted, rows joined by newlines."""
    lines = [STATEMENT_HEADER]
    for r in rows:
        lines.append((_format_date(r.date), r.document, r.service, r.order, r.currency, _format_total(r.total)))
    return "\n".join(",".join(_quote(v) for v in line) for line in lines)


# -------------------------------------- orders --------------------------------------
@dataclass
class OrdersView:
    category: OrderCategory
    rows: list[Order]
    counts: dict[OrderCategory, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "category": self.category.value,
            "categories": [c.value for c in OrderCategory],
            "counts": {c.value: n for c, n in self.counts.items()},
            "rows": [row.to_dict() for row in self.rows],
        }


def _category(value: OrderCategory | str) -> OrderCategory:
    try:
        return OrderCategory(value)
    except ValueError:
        allowed = ", ".join(c.value for c in OrderCategory)
        raise ViewFilterError(f"Unknown category {value!r}; expected one of {allowed}") from None


def filter_orders_by_category(orders: Iterable[Order], category: OrderCategory | str) -> list[Order]:
    wanted = _category(category)
    return [o for o in orders if o.category is wanted]


def build_orders_view(orders: Sequence[Order], category: OrderCategory | str = OrderCategory.PRIORITY) -> OrdersView:
    wanted = _category(category)
    counts = {c: 0 for c in OrderCategory}
    for order in orders:
        counts[order.category] += 1
    return OrdersView(category=wanted, rows=filter_orders_by_category(orders, wanted), counts=counts)


# -------------------------------------- gigs / profile --------------------------------------
def gigs_for_seller(gigs: Iterable[Gig], seller_id: str | None) -> list[Gig]:
    if not seller_id:
        return list(gigs)
    return [g for g in gigs if g.seller_id == seller_id]


def find_gig(gigs: Iterable[Gig], gig_id: str) -> Optional[Gig]:
    for gig in gigs:
        if gig.id == gig_id:
            return gig
    return None


def add_unique(values: Sequence[str], value: str | None) -> list[str]:
    """Append a trimmed value unless blank or already present."""
    candidate = (value or "").strip()
    result = list(values)
    if candidate and candidate not in result:
        result.append(candidate)
    return result
