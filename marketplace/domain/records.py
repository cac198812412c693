"""Record shapes persisted by the local record store.

Each entity is a pydantic model whose wire names are the camelCase keys of
the existing local data, so previously stored slots stay readable. Models
accept either spelling on input (``full_name`` or ``fullName``).
"""
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel


class PackageName(str, Enum):
    BASIC = "Basic"
    STANDARD = "Standard"
    PREMIUM = "Premium"


class MediaType(str, Enum):
    IMAGE = "image"
    VIDEO = "video"


class OrderCategory(str, Enum):
    PRIORITY = "Priority"
    LATE = "Late"
    DELIVERED = "Delivered"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class Role(str, Enum):
    BUYER = "buyer"
    SELLER = "seller"


def _assume_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


# Naive timestamps in old data were written in UTC.
UtcDatetime = Annotated[datetime, AfterValidator(_assume_utc)]
NonBlankStr = Annotated[str, AfterValidator(_not_blank)]

_DATETIME = TypeAdapter(UtcDatetime)


def parse_datetime(value: Any) -> datetime:
    """ISO-8601 text (``Z`` suffix or offset) to an aware datetime; raises ValidationError."""
    return _DATETIME.validate_python(value)


class Record(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> dict:
        """Wire shape: camelCase keys, unset optionals omitted."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


# -------------------------- profile --------------------------
class UserProject(Record):
    image: Optional[str] = None
    link: Optional[str] = None
    description: Optional[str] = None


class UserCertification(Record):
    name: str = ""
    by: str = ""
    year: str = ""


class UserEducation(Record):
    college: str = ""
    degree: str = ""
    year: str = ""


class UserProfile(Record):
    full_name: str
    email: str
    phone: Optional[str] = None
    country: Optional[str] = None
    photo: Optional[str] = None  # data URL
    languages: list[str] = Field(default_factory=list)
    website: Optional[str] = None
    skills: list[str] = Field(default_factory=list)
    projects: list[UserProject] = Field(default_factory=list)
    certifications: list[UserCertification] = Field(default_factory=list)
    education: list[UserEducation] = Field(default_factory=list)


# -------------------------- gigs --------------------------
class PackageExtras(Record):
    mockup: Optional[float] = None
    source_file: Optional[float] = None
    social_kit: Optional[float] = None
    extra_fast: Optional[float] = None


class PackageTier(Record):
    name: PackageName
    price: float
    delivery_days: int
    revisions: int = 0
    extras: PackageExtras = Field(default_factory=PackageExtras)


class GigMedia(Record):
    url: NonBlankStr  # data URL for images/videos
    type: MediaType


class GigDraft(Record):
    """Gig fields as submitted by the editor; id and seller may come from elsewhere."""

    id: Optional[str] = None
    seller_id: Optional[str] = None
    title: NonBlankStr
    category: str = ""
    subcategory: str = ""
    description_html: str = ""
    skills: list[str] = Field(default_factory=list)
    packages: list[PackageTier] = Field(default_factory=list)
    requirements: list[str] = Field(default_factory=list)
    thumbnail: Optional[str] = None
    gallery: list[GigMedia] = Field(default_factory=list)
    rating: Optional[float] = None


class Gig(GigDraft):
    id: NonBlankStr
    seller_id: NonBlankStr


# -------------------------- billing --------------------------
class BillingEntry(Record):
    model_config = ConfigDict(frozen=True)

    date: UtcDatetime
    document: str = ""  # Invoice, Receipt, Order Confirmation
    service: str = ""
    order: str = ""
    currency: str = ""  # USD, EUR, INR
    total: float


class PaymentMethod(Record):
    provider: NonBlankStr  # e.g. PayPal, Stripe
    account: NonBlankStr


# -------------------------- orders --------------------------
class Order(Record):
    id: NonBlankStr
    category: OrderCategory
    buyer: str = ""
    gig: str = ""
    due_on: UtcDatetime
    note: Optional[str] = None
    status: str = ""


# -------------------------- drafts --------------------------
class RegistrationDraft(Record):
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    country: Optional[str] = None


class OnboardingProfileDraft(Record):
    full_name: str = ""
    email: str = ""
    phone: Optional[str] = None
    country: Optional[str] = None
    occupations: list[str] = Field(default_factory=list)
    experience_years: Optional[str] = None
    languages: list[str] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    projects: list[UserProject] = Field(default_factory=list)
    certifications: list[UserCertification] = Field(default_factory=list)
    education: list[UserEducation] = Field(default_factory=list)

    @field_validator("experience_years", mode="before")
    @classmethod
    def years_as_text(cls, v: Any) -> Any:
        """Older wizard builds stored the number itself."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


class OnboardingDraft(Record):
    profile: Optional[OnboardingProfileDraft] = None
