"""Example rows written into empty collections when demo seeding is enabled."""
from __future__ import annotations

from datetime import datetime, timedelta

from marketplace.domain.records import BillingEntry, Order, OrderCategory, PaymentMethod


def billing_seed(now: datetime) -> list[BillingEntry]:
    return [
        BillingEntry(date=now, document="Invoice", service="Logo Design", order="#1001", currency="USD", total=200),
        BillingEntry(
            date=now - timedelta(days=35),
            document="Receipt",
            service="Landing Page",
            order="#1000",
            currency="USD",
            total=1200,
        ),
    ]


def payment_methods_seed(now: datetime) -> list[PaymentMethod]:
    return [
        PaymentMethod(provider="PayPal", account="seller@example.com"),
        PaymentMethod(provider="Stripe", account="acct_1234"),
    ]


def orders_seed(now: datetime) -> list[Order]:
    day = timedelta(days=1)
    return [
        Order(id="o1", category=OrderCategory.PRIORITY, buyer="John Doe", gig="Logo Design",
              due_on=now + day, note="Urgent brand refresh", status="In Progress"),
        Order(id="o2", category=OrderCategory.LATE, buyer="Acme Inc.", gig="Landing Page",
              due_on=now - 2 * day, note="Delay approved", status="Delayed"),
        Order(id="o3", category=OrderCategory.DELIVERED, buyer="Maria G.", gig="Social Kit",
              due_on=now - day, note="Awaiting review", status="Delivered"),
        Order(id="o4", category=OrderCategory.COMPLETED, buyer="Pixel Co", gig="App UI",
              due_on=now - 10 * day, status="Completed"),
        Order(id="o5", category=OrderCategory.CANCELLED, buyer="Byte Ltd", gig="SEO Audit",
              due_on=now + 5 * day, note="Client cancelled", status="Cancelled"),
    ]
