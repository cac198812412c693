"""
In-process fixed-window throttling for the account endpoints.

Counters are keyed by ``<scope>:<client ip>`` and live only as long as the
process; a multi-worker deployment gets one budget per worker.
"""
from __future__ import annotations

import logging
import math
import threading
import time
from typing import Callable, Dict, NamedTuple

from fastapi import HTTPException, Request

logger = logging.getLogger(__name__)


class Window(NamedTuple):
    hits: int
    ends_at: float


# scope -> (max requests, window seconds)
AUTH_LIMITS: Dict[str, tuple[int, int]] = {
    "register": (10, 300),
    "login": (10, 60),
    "onboarding": (10, 300),
}


class FixedWindowLimiter:
    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._windows: Dict[str, Window] = {}
        self._lock = threading.Lock()

    def hit(self, key: str, limit: int, window_seconds: int) -> float:
        """Count one request; return seconds to wait when over ``limit``, else 0."""
        now = self._clock()
        with self._lock:
            current = self._windows.get(key)
            if current is None or now >= current.ends_at:
                current = Window(0, now + window_seconds)
            current = Window(current.hits + 1, current.ends_at)
            self._windows[key] = current
        if current.hits > limit:
            return current.ends_at - now
        return 0.0

    def clear(self) -> None:
        with self._lock:
            self._windows.clear()


_limiter = FixedWindowLimiter()


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client and request.client.host else "unknown"


def limit_auth(request: Request, scope: str, limiter: FixedWindowLimiter | None = None) -> None:
    """Raise 429 (with Retry-After) once ``scope`` is exhausted for this client."""
    limit, window_seconds = AUTH_LIMITS[scope]
    ip = client_ip(request)
    wait = (limiter or _limiter).hit(f"auth:{scope}:{ip}", limit, window_seconds)
    if wait > 0:
        logger.warning("Throttled %s for %s (%.0fs left)", scope, ip, wait)
        raise HTTPException(
            429,
            "Too many attempts. Try again in a moment.",
            headers={"Retry-After": str(max(1, math.ceil(wait)))},
        )


def reset_rate_limits() -> None:
    _limiter.clear()
