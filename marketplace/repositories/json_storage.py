"""
Key-value substrates for the local record store.

Every backend keeps one string-keyed slot per entity kind whose value is JSON
text. The store never sees how the slots are kept (dict, JSON file, SQL).
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class KeyValueBackend(Protocol):
    def read(self, key: str) -> Optional[str]: ...

    def write(self, key: str, text: str) -> None: ...


class MemoryBackend:
    """Slots held in a plain dict; lives as long as the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self.slots: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> Optional[str]:
        return self.slots.get(key)

    def write(self, key: str, text: str) -> None:
        self.slots[key] = text


def load(path: Path) -> dict[str, str]:
    if not path.exists():
        return {}
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable store file %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring store file %s: top-level value is not an object", path)
        return {}
    return {k: v for k, v in data.items() if isinstance(v, str)}


def save(path: Path, slots: dict[str, str]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps(slots, ensure_ascii=False, indent=2), encoding="utf-8")
    os.replace(tmp, path)


class JsonFileBackend:
    """All slots in a single JSON object file, rewritten whole on every write."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def read(self, key: str) -> Optional[str]:
        return load(self.path).get(key)

    def write(self, key: str, text: str) -> None:
        slots = load(self.path)
        slots[key] = text
        save(self.path, slots)
