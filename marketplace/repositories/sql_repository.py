"""High-level data access helpers backed by SQLAlchemy."""
from __future__ import annotations

import secrets
from datetime import datetime, timezone
from typing import Iterable, Optional

from sqlalchemy import select, update, delete

from marketplace.db.models import (
    Account,
    StoreSlot,
    User,
    UserCertification,
    UserEducation,
    UserLanguage,
    UserSession,
    UserSkill,
)
from marketplace.db.session import get_session


class SQLRepository:
    """CRUD helpers for the hosted account tables."""

    # -------------------------- accounts --------------------------
    def get_account_by_email(self, email: str) -> Optional[Account]:
        with get_session() as session:
            stmt = select(Account).where(Account.email == email)
            return session.execute(stmt).scalar_one_or_none()

    def create_account(self, account_id: str, email: str, password_hash: str) -> Account:
        entity = Account(id=account_id, email=email, password_hash=password_hash, created_at=datetime.now(timezone.utc))
        with get_session() as session:
            session.add(entity)
            session.commit()
            session.refresh(entity)
            return entity

    def delete_account(self, account_id: str) -> None:
        with get_session() as session:
            session.execute(delete(Account).where(Account.id == account_id))
            session.commit()

    # -------------------------- users --------------------------
    def get_user(self, user_id: str) -> Optional[User]:
        with get_session() as session:
            return session.get(User, user_id)

    def insert_user(self, user_id: str, *, email: str, role: str, full_name: str, country: str | None) -> User:
        now = datetime.now(timezone.utc)
        entity = User(
            id=user_id,
            email=email,
            role=role,
            full_name=full_name,
            country=country,
            created_at=now,
            updated_at=now,
        )
        with get_session() as session:
            session.add(entity)
            session.commit()
            session.refresh(entity)
            return entity

    def update_user(self, user_id: str, **values) -> int:
        values["updated_at"] = datetime.now(timezone.utc)
        with get_session() as session:
            result = session.execute(update(User).where(User.id == user_id).values(**values))
            session.commit()
            return result.rowcount or 0

    def insert_skills(self, user_id: str, skills: Iterable[str]) -> None:
        with get_session() as session:
            session.add_all([UserSkill(user_id=user_id, skill=s) for s in skills])
            session.commit()

    def insert_languages(self, user_id: str, languages: Iterable[str]) -> None:
        with get_session() as session:
            session.add_all([UserLanguage(user_id=user_id, language=lang) for lang in languages])
            session.commit()

    def insert_certifications(self, user_id: str, rows: Iterable[dict]) -> None:
        with get_session() as session:
            session.add_all(
                [UserCertification(user_id=user_id, name=r["name"], issued_by=r.get("issued_by"), year=r.get("year")) for r in rows]
            )
            session.commit()

    def insert_education(self, user_id: str, rows: Iterable[dict]) -> None:
        with get_session() as session:
            session.add_all(
                [UserEducation(user_id=user_id, college=r["college"], degree=r.get("degree"), year=r.get("year")) for r in rows]
            )
            session.commit()

    def list_skills(self, user_id: str) -> list[str]:
        with get_session() as session:
            stmt = select(UserSkill.skill).where(UserSkill.user_id == user_id).order_by(UserSkill.id)
            return list(session.execute(stmt).scalars().all())

    def list_languages(self, user_id: str) -> list[str]:
        with get_session() as session:
            stmt = select(UserLanguage.language).where(UserLanguage.user_id == user_id).order_by(UserLanguage.id)
            return list(session.execute(stmt).scalars().all())

    def list_certifications(self, user_id: str) -> list[UserCertification]:
        with get_session() as session:
            stmt = select(UserCertification).where(UserCertification.user_id == user_id).order_by(UserCertification.id)
            return list(session.execute(stmt).scalars().all())

    def list_education(self, user_id: str) -> list[UserEducation]:
        with get_session() as session:
            stmt = select(UserEducation).where(UserEducation.user_id == user_id).order_by(UserEducation.id)
            return list(session.execute(stmt).scalars().all())

    # -------------------------- sessions --------------------------
    def create_session(self, user_id: str, expires_at: datetime) -> str:
        token = secrets.token_urlsafe(32)
        with get_session() as session:
            session.add(UserSession(token=token, user_id=user_id, expires_at=expires_at))
            session.commit()
        return token

    def get_session_entry(self, token: str) -> Optional[UserSession]:
        with get_session() as session:
            return session.get(UserSession, token)

    def delete_session(self, token: str) -> None:
        with get_session() as session:
            session.execute(delete(UserSession).where(UserSession.token == token))
            session.commit()


class SQLSlotBackend:
    """Key-value slots stored as rows of ``store_slots``."""

    def read(self, key: str) -> Optional[str]:
        with get_session() as session:
            slot = session.get(StoreSlot, key)
            return slot.value if slot else None

    def write(self, key: str, text: str) -> None:
        now = datetime.now(timezone.utc)
        with get_session() as session:
            slot = session.get(StoreSlot, key)
            if not slot:
                session.add(StoreSlot(key=key, value=text, updated_at=now))
            else:
                slot.value = text
                slot.updated_at = now
            session.commit()
