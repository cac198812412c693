"""
Account creation, credential verification and onboarding persistence.

Remote rows (accounts, users and the per-user detail tables) are written
first; the local record store is only touched once every remote call has
succeeded, so a rejected call leaves local state as it was.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from marketplace.core.config import Settings, get_settings
from marketplace.core.security import hash_password, verify_password
from marketplace.domain.migrations import profile_from_onboarding
from marketplace.domain.records import (
    OnboardingDraft,
    OnboardingProfileDraft,
    RegistrationDraft,
    Role,
)
from marketplace.repositories.record_store import RecordKind, RecordStore
from marketplace.repositories.sql_repository import SQLRepository
from marketplace.services.session_service import issue_session, user_id_for_token

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Base class for account-related failures; ``message`` is user-facing."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RegistrationError(AuthError):
    pass


class AccountExistsError(AuthError):
    pass


class InvalidCredentialsError(AuthError):
    pass


class NotAuthenticatedError(AuthError):
    pass


class RemoteCallError(AuthError):
    pass


@dataclass
class SignUpResult:
    user_id: str
    email: str
    role: Role
    session_token: str
    next_step: str


@dataclass
class SignInResult:
    user_id: str
    email: str
    role: Optional[Role]
    session_token: str


@dataclass
class OnboardingResult:
    user_id: str
    saved: dict = field(default_factory=dict)


@dataclass
class AccountService:
    """Handles sign-up, sign-in and seller onboarding against the account database."""

    store: RecordStore
    repository: SQLRepository = field(default_factory=SQLRepository)
    settings: Settings = field(default_factory=get_settings)

    # -------------------------------------- helpers --------------------------------------
    def _normalize_email(self, email: str | None) -> str:
        return (email or "").strip().lower()

    def _remote(self, failure: str, call, *args, **kwargs):
        """Run one database call; a rejection becomes RemoteCallError("<failure>: <reason>")."""
        try:
            return call(*args, **kwargs)
        except SQLAlchemyError as exc:
            logger.info("%s: %s", failure, exc)
            raise RemoteCallError(f"{failure}: {exc}") from exc

    def _start_session(self, user_id: str) -> str:
        return self._remote(
            "Failed to start session", issue_session, self.repository, user_id, self.settings.session_ttl_seconds
        )

    def _remember_identity(self, user_id: str, role: Optional[Role]) -> None:
        self.store.set(RecordKind.USER_ID, user_id)
        self.store.set_role(role)

    # -------------------------------------- sign up --------------------------------------
    def sign_up(
        self,
        email: str,
        password: str,
        *,
        first_name: str,
        last_name: str,
        country: str,
        role: Role | str | None,
    ) -> SignUpResult:
        first = (first_name or "").strip()
        last = (last_name or "").strip()
        raw_email = self._normalize_email(email)
        country_value = (country or "").strip()
        if not (first and last and raw_email and password and country_value and role):
            raise RegistrationError("First name, last name, email, password, country and role are required")
        try:
            role_value = Role(role)
        except ValueError:
            raise RegistrationError(f"Role must be one of: {', '.join(r.value for r in Role)}") from None
        if len(password) < self.settings.min_password_length:
            raise RegistrationError(f"Password should be at least {self.settings.min_password_length} characters")
        if self._remote("Failed to check email", self.repository.get_account_by_email, raw_email):
            logger.info("sign_up rejected: account exists")
            raise AccountExistsError("User already registered")

        full_name = f"{first} {last}".strip()
        user_id = str(uuid.uuid4())
        self._remote("Failed to create account", self.repository.create_account, user_id, raw_email, hash_password(password))
        try:
            self._remote(
                "Failed to create user profile",
                self.repository.insert_user,
                user_id,
                email=raw_email,
                role=role_value.value,
                full_name=full_name,
                country=country_value,
            )
        except RemoteCallError:
            try:
                self.repository.delete_account(user_id)
            except SQLAlchemyError as exc:
                logger.warning("Could not remove half-created account %s: %s", user_id, exc)
            raise

        token = self._start_session(user_id)
        self._remember_identity(user_id, role_value)
        self.store.save_registration_draft(
            RegistrationDraft(first_name=first, last_name=last, email=raw_email, country=country_value)
        )
        next_step = "onboarding" if role_value is Role.SELLER else "explore"
        return SignUpResult(user_id=user_id, email=raw_email, role=role_value, session_token=token, next_step=next_step)

    # -------------------------------------- sign in --------------------------------------
    def sign_in(self, email: str, password: str) -> SignInResult:
        raw_email = self._normalize_email(email)
        if not raw_email or not password:
            raise InvalidCredentialsError("Invalid login credentials")
        account = self._remote("Failed to sign in", self.repository.get_account_by_email, raw_email)
        if not account or not verify_password(password, account.password_hash):
            logger.info("sign_in rejected for unknown account or wrong password")
            raise InvalidCredentialsError("Invalid login credentials")
        user = self._remote("Failed to load user", self.repository.get_user, account.id)
        role = None
        if user and user.role in {r.value for r in Role}:
            role = Role(user.role)
        token = self._start_session(account.id)
        self._remember_identity(account.id, role)
        return SignInResult(user_id=account.id, email=raw_email, role=role, session_token=token)

    def user_for_session(self, token: Optional[str]) -> Optional[str]:
        return self._remote("Failed to check session", user_id_for_token, self.repository, token)

    def sign_out(self, token: Optional[str]) -> None:
        if token:
            self._remote("Failed to end session", self.repository.delete_session, token)

    # -------------------------------------- onboarding --------------------------------------
    def complete_onboarding(self, token: Optional[str], details: OnboardingProfileDraft) -> OnboardingResult:
        user_id = self.user_for_session(token)
        if not user_id:
            raise NotAuthenticatedError("User not authenticated")
        user = self._remote("Failed to load user", self.repository.get_user, user_id)
        if not user:
            raise NotAuthenticatedError("User not authenticated")

        updated = self._remote(
            "Failed to update profile",
            self.repository.update_user,
            user_id,
            full_name=details.full_name,
            phone=details.phone,
            country=details.country,
            bio=", ".join(details.skills),
            website="",
        )
        if not updated:
            raise RemoteCallError("Failed to update profile")

        certs = [{"name": c.name, "issued_by": c.by, "year": c.year} for c in details.certifications if c.name]
        education = [{"college": e.college, "degree": e.degree, "year": e.year} for e in details.education if e.college]
        saved = {"skills": 0, "languages": 0, "certifications": 0, "education": 0}
        if details.skills:
            self._remote("Failed to save skills", self.repository.insert_skills, user_id, details.skills)
            saved["skills"] = len(details.skills)
        if details.languages:
            self._remote("Failed to save languages", self.repository.insert_languages, user_id, details.languages)
            saved["languages"] = len(details.languages)
        if certs:
            self._remote("Failed to save certifications", self.repository.insert_certifications, user_id, certs)
            saved["certifications"] = len(certs)
        if education:
            self._remote("Failed to save education", self.repository.insert_education, user_id, education)
            saved["education"] = len(education)

        draft = details.model_copy(update={"email": details.email or user.email})
        self.store.save_onboarding_draft(OnboardingDraft(profile=draft))
        profile = profile_from_onboarding(OnboardingDraft(profile=draft))
        profile.phone = draft.phone
        self.store.save_user_profile(profile)
        return OnboardingResult(user_id=user_id, saved=saved)
