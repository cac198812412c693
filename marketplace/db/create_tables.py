"""Create (or rebuild) the account and slot tables."""
from __future__ import annotations

import argparse

from sqlalchemy.exc import SQLAlchemyError

from .session import Base, get_engine
from . import models  # noqa: F401  # ensure models are imported for metadata


def create_all(*, drop_first: bool = False) -> None:
    engine = get_engine()
    if drop_first:
        Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


def main() -> None:
    ap = argparse.ArgumentParser(description="Create marketplace tables on DATABASE_URL")
    ap.add_argument("--drop", action="store_true", help="Drop existing tables first")
    args = ap.parse_args()
    create_all(drop_first=args.drop)
    print("Database tables created successfully.")


if __name__ == "__main__":
    try:
        main()
    except SQLAlchemyError as exc:
        raise SystemExit(f"Failed to create tables: {exc}") from exc
