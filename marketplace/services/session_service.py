"""Session helpers (issue tokens, cookies, validation)."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Request, Response

from marketplace.core.config import Settings
from marketplace.repositories.sql_repository import SQLRepository

SESSION_COOKIE_NAME = "session"


def _aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone=True columns.
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def issue_session(repository: SQLRepository, user_id: str, ttl_seconds: int) -> str:
    """Create a new session token for the authenticated identity."""
    ttl = max(60, ttl_seconds)
    expires_at = datetime.now(timezone.utc) + timedelta(seconds=ttl)
    return repository.create_session(user_id, expires_at)


def user_id_for_token(repository: SQLRepository, token: Optional[str]) -> Optional[str]:
    """Return the identity behind a session token; expired tokens are removed."""
    if not token:
        return None
    entry = repository.get_session_entry(token)
    if not entry:
        return None
    if entry.expires_at and _aware(entry.expires_at) < datetime.now(timezone.utc):
        repository.delete_session(token)
        return None
    return entry.user_id


def session_token(request: Request) -> Optional[str]:
    return request.cookies.get(SESSION_COOKIE_NAME)


def set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        httponly=True,
        secure=settings.app_env == "prod",
        samesite="strict",
        max_age=settings.session_ttl_seconds,
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(SESSION_COOKIE_NAME, path="/")
