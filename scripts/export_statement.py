#!/usr/bin/env python3
"""
Export the earnings statement for a date range.

Usage:
  python scripts/export_statement.py [--from 2024-01-01] [--to 2024-12-31] [--out earnings-statement.csv]
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from marketplace.core.config import get_settings
from marketplace.repositories.record_store import build_record_store
from marketplace.services.views import STATEMENT_FILENAME, build_earnings_view, export_statement_csv


def main() -> None:
    ap = argparse.ArgumentParser(description="Write the earnings statement CSV")
    ap.add_argument("--from", dest="date_from", default="", help="Inclusive lower bound (YYYY-MM-DD)")
    ap.add_argument("--to", dest="date_to", default="", help="Inclusive upper bound (YYYY-MM-DD)")
    ap.add_argument("--out", default=STATEMENT_FILENAME, help="Output file")
    args = ap.parse_args()

    store = build_record_store(get_settings())
    view = build_earnings_view(store.get_billing(), args.date_from, args.date_to)
    out = Path(args.out)
    out.write_text(export_statement_csv(view.rows), encoding="utf-8")
    print(f"OK: {len(view.rows)} row(s), total {view.total}")
    print(f"  File: {out}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI use
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
