"""
Resume building-block Pydantic schemas.

Create schemas carry the full field rules; Update schemas accept the same fields,
all optional, and only what the client actually sent ends up in the change set.
"""
from datetime import date
from typing import Annotated, Any, ClassVar, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    HttpUrl,
    TypeAdapter,
    model_validator,
)

from backend.app.db.base import utcnow

_http_url = TypeAdapter(HttpUrl)


def _check_url(value: str) -> str:
    _http_url.validate_python(value)
    return value


def _not_in_future(value: date) -> date:
    if value > utcnow().date():
        raise ValueError("Date cannot be in the future")
    return value


UrlStr = Annotated[str, AfterValidator(_check_url)]
PastDate = Annotated[date, AfterValidator(_not_in_future)]
Name = Annotated[str, Field(min_length=2, max_length=255)]
PhoneNumber = Annotated[str, Field(pattern=r"^\+?[1-9]\d{0,15}$")]
Description1000 = Annotated[str, Field(min_length=20, max_length=1000)]
Description2000 = Annotated[str, Field(min_length=20, max_length=2000)]
SkillLevel = Annotated[int, Field(ge=1, le=5)]


def check_date_range(start_date: date | None, end_date: date | None) -> None:
    if start_date is not None and end_date is not None and end_date < start_date:
        raise ValueError("End date must be after start date")


def check_employment_period(is_current: bool | None, end_date: date | None) -> None:
    """A current position has no end date; a past one must have one."""
    if is_current and end_date is not None:
        raise ValueError("Current job cannot have an end date")
    if not is_current and end_date is None:
        raise ValueError("Non-current job must have an end date")


class BlockCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    def values(self) -> dict[str, Any]:
        """Column values for the new row."""
        return self.model_dump()


class BlockUpdate(BaseModel):
    """Partial update: every field optional, explicit null only where the column allows it."""

    model_config = ConfigDict(extra="forbid")

    non_nullable: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="after")
    def reject_nulls(self):
        nulled = sorted(
            name for name in self.model_fields_set
            if name in self.non_nullable and getattr(self, name) is None
        )
        if nulled:
            raise ValueError(f"Fields cannot be null: {', '.join(nulled)}")
        return self

    def changes(self) -> dict[str, Any]:
        """Field name -> new value for every field the client supplied."""
        return self.model_dump(exclude_unset=True)


class DatedBlockUpdate(BlockUpdate):
    """Partial update of a block with a start/end date pair."""

    @model_validator(mode="after")
    def check_dates(self):
        check_date_range(getattr(self, "start_date", None), getattr(self, "end_date", None))
        return self


# --- Personal information ---
class SocialMediaUrls(BaseModel):
    model_config = ConfigDict(extra="forbid")

    linkedin: Optional[UrlStr] = None
    github: Optional[UrlStr] = None
    portfolio: Optional[UrlStr] = None
    leetcode: Optional[UrlStr] = None
    hackerrank: Optional[UrlStr] = None


class PersonalInformationCreate(BlockCreate):
    full_name: Name
    professional_title: Name
    email: EmailStr
    phone_number: PhoneNumber
    location: Name
    social_media_urls: SocialMediaUrls = Field(default_factory=SocialMediaUrls)

    def values(self) -> dict[str, Any]:
        return self.model_dump(exclude={"social_media_urls"}) | {
            "social_media_urls": self.social_media_urls.model_dump(exclude_none=True),
        }


class PersonalInformationUpdate(BlockUpdate):
    non_nullable = frozenset(
        {"full_name", "professional_title", "email", "phone_number", "location", "social_media_urls"}
    )

    full_name: Optional[Name] = None
    professional_title: Optional[Name] = None
    email: Optional[EmailStr] = None
    phone_number: Optional[PhoneNumber] = None
    location: Optional[Name] = None
    social_media_urls: Optional[SocialMediaUrls] = None

    def changes(self) -> dict[str, Any]:
        changes = super().changes()
        if self.social_media_urls is not None:
            changes["social_media_urls"] = self.social_media_urls.model_dump(exclude_none=True)
        return changes


# --- Professional summary ---
class ProfessionalSummaryCreate(BlockCreate):
    summary: Annotated[str, Field(min_length=50, max_length=1000)]


class ProfessionalSummaryUpdate(BlockUpdate):
    non_nullable = frozenset({"summary"})

    summary: Optional[Annotated[str, Field(min_length=50, max_length=1000)]] = None


# --- Work experience ---
class WorkExperienceCreate(BlockCreate):
    title: Name
    name: Name
    url: Optional[UrlStr] = None
    location: Optional[Name] = None
    start_date: PastDate
    end_date: Optional[PastDate] = None
    is_current: bool = False
    description: Optional[Description2000] = None

    @model_validator(mode="after")
    def check_period(self):
        check_date_range(self.start_date, self.end_date)
        check_employment_period(self.is_current, self.end_date)
        return self


class WorkExperienceUpdate(DatedBlockUpdate):
    non_nullable = frozenset({"title", "name", "start_date", "is_current"})

    title: Optional[Name] = None
    name: Optional[Name] = None
    url: Optional[UrlStr] = None
    location: Optional[Name] = None
    start_date: Optional[PastDate] = None
    end_date: Optional[PastDate] = None
    is_current: Optional[bool] = None
    description: Optional[Description2000] = None


# --- Project ---
class ProjectCreate(BlockCreate):
    title: Name
    url: Optional[UrlStr] = None
    start_date: PastDate
    end_date: Optional[PastDate] = None
    description: Description2000

    @model_validator(mode="after")
    def check_dates(self):
        check_date_range(self.start_date, self.end_date)
        return self


class ProjectUpdate(DatedBlockUpdate):
    non_nullable = frozenset({"title", "start_date", "description"})

    title: Optional[Name] = None
    url: Optional[UrlStr] = None
    start_date: Optional[PastDate] = None
    end_date: Optional[PastDate] = None
    description: Optional[Description2000] = None


# --- Skill ---
class SkillCreate(BlockCreate):
    name: Name
    level: Optional[SkillLevel] = None


class SkillUpdate(BlockUpdate):
    non_nullable = frozenset({"name"})

    name: Optional[Name] = None
    level: Optional[SkillLevel] = None


# --- Education ---
class EducationCreate(BlockCreate):
    degree: Name
    name: Name
    url: Optional[UrlStr] = None
    start_date: PastDate
    end_date: Optional[PastDate] = None
    location: Name
    description: Optional[Description1000] = None

    @model_validator(mode="after")
    def check_dates(self):
        check_date_range(self.start_date, self.end_date)
        return self


class EducationUpdate(DatedBlockUpdate):
    non_nullable = frozenset({"degree", "name", "start_date", "location"})

    degree: Optional[Name] = None
    name: Optional[Name] = None
    url: Optional[UrlStr] = None
    start_date: Optional[PastDate] = None
    end_date: Optional[PastDate] = None
    location: Optional[Name] = None
    description: Optional[Description1000] = None


# --- Certification ---
class CertificationCreate(BlockCreate):
    name: Name
    url: Optional[UrlStr] = None
    description: Optional[Description1000] = None


class CertificationUpdate(BlockUpdate):
    non_nullable = frozenset({"name"})

    name: Optional[Name] = None
    url: Optional[UrlStr] = None
    description: Optional[Description1000] = None
