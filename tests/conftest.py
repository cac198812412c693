from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the marketplace package importable when running tests from a checkout.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from marketplace.core import config as core_config  # noqa: E402
from marketplace.core.rate_limiter import reset_rate_limits  # noqa: E402
from marketplace.db import models  # noqa: E402
from marketplace.db import session as db_session  # noqa: E402
from marketplace.repositories.json_storage import MemoryBackend  # noqa: E402
from marketplace.repositories.record_store import RecordStore  # noqa: E402


@pytest.fixture()
def db_env(tmp_path, monkeypatch):
    """Point DATABASE_URL at a temporary SQLite file and reset settings/engine caches."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    monkeypatch.setenv("STORE_BACKEND", "memory")
    core_config.get_settings.cache_clear()
    db_session.reset_engine_cache()

    engine = db_session.get_engine()
    models.Base.metadata.create_all(bind=engine)

    yield db_file

    models.Base.metadata.drop_all(bind=engine)
    db_session.reset_engine_cache()
    core_config.get_settings.cache_clear()


@pytest.fixture()
def memory_store():
    return RecordStore(MemoryBackend())


@pytest.fixture(autouse=True)
def _fresh_rate_limits():
    reset_rate_limits()
    yield
    reset_rate_limits()
