#!/usr/bin/env python3
"""
Write the example billing/payment/order rows into the configured store.

Only empty slots are touched. Usage:
  python scripts/seed_demo_data.py [--kind billingHistory] [--kind orders]
"""
from __future__ import annotations

import argparse
import sys

from marketplace.core.config import get_settings
from marketplace.repositories.record_store import SEEDABLE_KINDS, RecordKind, build_record_store


def main() -> None:
    ap = argparse.ArgumentParser(description="Seed demo rows into empty store slots")
    ap.add_argument(
        "--kind",
        action="append",
        choices=[k.value for k in SEEDABLE_KINDS],
        help="Slot to seed (repeatable; default: all seedable slots)",
    )
    args = ap.parse_args()

    store = build_record_store(get_settings())
    kinds = [RecordKind(k) for k in args.kind] if args.kind else None
    written = store.seed_demo_data(kinds)
    if not written:
        print("Nothing to seed: slots already hold data")
        return
    for kind in written:
        print(f"OK: seeded {kind.value}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI use
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
