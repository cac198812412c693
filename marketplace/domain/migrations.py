"""Adapters from legacy draft shapes to the current profile record."""
from __future__ import annotations

from typing import Optional

from marketplace.domain.records import (
    OnboardingDraft,
    RegistrationDraft,
    UserProject,
    UserProfile,
)


def profile_from_onboarding(draft: OnboardingDraft) -> Optional[UserProfile]:
    p = draft.profile
    if p is None:
        return None
    # Project images were never persisted by the wizard.
    projects = [UserProject(image=None, link=pr.link, description=pr.description) for pr in p.projects]
    return UserProfile(
        full_name=p.full_name or "",
        email=p.email or "",
        country=p.country,
        languages=list(p.languages),
        skills=list(p.skills),
        projects=projects,
        certifications=list(p.certifications),
        education=list(p.education),
    )


def profile_from_registration(draft: RegistrationDraft) -> UserProfile:
    return UserProfile(
        full_name=f"{draft.first_name or ''} {draft.last_name or ''}".strip(),
        email=draft.email or "",
        country=draft.country,
    )


def resolve_user_profile(
    saved: Optional[UserProfile],
    onboarding: Optional[OnboardingDraft],
    registration: Optional[RegistrationDraft],
) -> Optional[UserProfile]:
    """Pick the freshest available source: saved profile, onboarding, then registration."""
    if saved is not None:
        return saved
    if onboarding is not None:
        profile = profile_from_onboarding(onboarding)
        if profile is not None:
            return profile
    if registration is not None:
        return profile_from_registration(registration)
    return None
