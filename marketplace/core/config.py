"""
Configuration helpers for the marketplace backend.

Routers/services read a single Settings object instead of touching
os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

DEFAULT_STORE_PATH = Path(__file__).resolve().parents[2] / "data" / "local_store.json"
STORE_BACKENDS = {"json", "sql", "memory"}


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    store_backend: str
    store_path: Path
    database_url: str
    seed_demo_data: bool
    session_ttl_seconds: int
    min_password_length: int
    log_level: str


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    backend = (os.getenv("STORE_BACKEND") or "json").strip().lower()
    if backend not in STORE_BACKENDS:
        backend = "json"

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        store_backend=backend,
        store_path=Path(os.getenv("STORE_PATH") or DEFAULT_STORE_PATH),
        database_url=os.getenv("DATABASE_URL", ""),
        seed_demo_data=_bool(os.getenv("SEED_DEMO_DATA"), False),
        session_ttl_seconds=_int(os.getenv("SESSION_TTL_SECONDS", "86400"), 86400),
        min_password_length=_int(os.getenv("MIN_PASSWORD_LENGTH", "6"), 6),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
