"""
Generic CRUD over the user-scoped, soft-deleted building-block tables.

One ResourceSpec per block type describes its model, schemas, list ordering and
any cross-field rule; ResourceRepository applies the same create/list/update/
delete contract to all of them.
"""
from dataclasses import dataclass
from typing import Any, Callable, Optional, Type

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.app.core.exceptions import Conflict, NoFieldsProvided, NotFound, PayloadValidationError
from backend.app.core.logging_config import get_logger
from backend.app.db.base import Base, utcnow
from backend.app.models.resume_blocks import (
    Certification,
    Education,
    PersonalInformation,
    ProfessionalSummary,
    Project,
    Skill,
    WorkExperience,
)
from backend.app.schemas.resume_blocks import (
    BlockCreate,
    BlockUpdate,
    CertificationCreate,
    CertificationUpdate,
    EducationCreate,
    EducationUpdate,
    PersonalInformationCreate,
    PersonalInformationUpdate,
    ProfessionalSummaryCreate,
    ProfessionalSummaryUpdate,
    ProjectCreate,
    ProjectUpdate,
    SkillCreate,
    SkillUpdate,
    WorkExperienceCreate,
    WorkExperienceUpdate,
    check_date_range,
    check_employment_period,
)
from backend.app.services.ownership import OwnershipAuthorizer

logger = get_logger("services.resource_repository")


@dataclass(frozen=True)
class ResourceSpec:
    slug: str
    label: str
    model: Type[Base]
    create_schema: Type[BlockCreate]
    update_schema: Type[BlockUpdate]
    ordering: Callable[[Type[Base]], tuple]
    singleton: bool = False
    # Validates the row as it would look after an update (existing values overlaid with changes)
    check_merged: Optional[Callable[[dict[str, Any]], None]] = None

    def order_by(self) -> tuple:
        return self.ordering(self.model) + (self.model.id.desc(),)


def _check_dated(row: dict[str, Any]) -> None:
    check_date_range(row["start_date"], row["end_date"])


def _check_work_experience(row: dict[str, Any]) -> None:
    check_date_range(row["start_date"], row["end_date"])
    check_employment_period(row["is_current"], row["end_date"])


PERSONAL_INFORMATION = ResourceSpec(
    slug="personal-information",
    label="Personal information",
    model=PersonalInformation,
    create_schema=PersonalInformationCreate,
    update_schema=PersonalInformationUpdate,
    ordering=lambda m: (m.created_at.desc(),),
    singleton=True,
)
PROFESSIONAL_SUMMARIES = ResourceSpec(
    slug="professional-summaries",
    label="Professional summary",
    model=ProfessionalSummary,
    create_schema=ProfessionalSummaryCreate,
    update_schema=ProfessionalSummaryUpdate,
    ordering=lambda m: (m.created_at.desc(),),
)
WORK_EXPERIENCES = ResourceSpec(
    slug="work-experiences",
    label="Work experience",
    model=WorkExperience,
    create_schema=WorkExperienceCreate,
    update_schema=WorkExperienceUpdate,
    ordering=lambda m: (m.start_date.desc(), m.created_at.desc()),
    check_merged=_check_work_experience,
)
PROJECTS = ResourceSpec(
    slug="projects",
    label="Project",
    model=Project,
    create_schema=ProjectCreate,
    update_schema=ProjectUpdate,
    ordering=lambda m: (m.start_date.desc(), m.created_at.desc()),
    check_merged=_check_dated,
)
SKILLS = ResourceSpec(
    slug="skills",
    label="Skill",
    model=Skill,
    create_schema=SkillCreate,
    update_schema=SkillUpdate,
    ordering=lambda m: (m.name.asc(), m.created_at.desc()),
)
EDUCATION = ResourceSpec(
    slug="education",
    label="Education",
    model=Education,
    create_schema=EducationCreate,
    update_schema=EducationUpdate,
    ordering=lambda m: (m.start_date.desc(), m.created_at.desc()),
    check_merged=_check_dated,
)
CERTIFICATIONS = ResourceSpec(
    slug="certifications",
    label="Certification",
    model=Certification,
    create_schema=CertificationCreate,
    update_schema=CertificationUpdate,
    ordering=lambda m: (m.created_at.desc(),),
)

COLLECTION_SPECS: tuple[ResourceSpec, ...] = (
    PROFESSIONAL_SUMMARIES,
    WORK_EXPERIENCES,
    PROJECTS,
    SKILLS,
    EDUCATION,
    CERTIFICATIONS,
)


class ResourceRepository:
    """CRUD for one block type, always scoped to the calling user."""

    def __init__(self, db: Session, spec: ResourceSpec):
        self.db = db
        self.spec = spec
        self.ownership = OwnershipAuthorizer(db)

    @property
    def model(self) -> Type[Base]:
        return self.spec.model

    def _not_found(self) -> NotFound:
        return NotFound(f"{self.spec.label} not found")

    def _active_for(self, user_id: int):
        return self.db.query(self.model).filter(
            self.model.user_id == user_id,
            self.model.is_active.is_(True),
        )

    def _target(self, user_id: int, resource_id: Optional[int]) -> Base:
        """Locked row an update/delete acts on: the user's singleton, or an owned row by id."""
        if self.spec.singleton:
            row = self._active_for(user_id).with_for_update().first()
        else:
            row = self.ownership.fetch_owned(self.model, resource_id, user_id, lock=True)
        if row is None:
            raise self._not_found()
        return row

    def create(self, user_id: int, payload: BlockCreate) -> Base:
        if self.spec.singleton and self._active_for(user_id).first() is not None:
            raise Conflict(f"{self.spec.label} already exists. Use update endpoint to modify it.")
        row = self.model(user_id=user_id, **payload.values())
        self.db.add(row)
        try:
            self.db.commit()
        except IntegrityError:
            # Partial unique index caught a concurrent singleton insert
            self.db.rollback()
            raise Conflict(f"{self.spec.label} already exists. Use update endpoint to modify it.")
        self.db.refresh(row)
        logger.info("Created %s id=%s user_id=%s", self.spec.slug, row.id, user_id)
        return row

    def get_all(self, user_id: int) -> list[Base]:
        return self._active_for(user_id).order_by(*self.spec.order_by()).all()

    def get_single(self, user_id: int) -> Base:
        row = self._active_for(user_id).first()
        if row is None:
            raise self._not_found()
        return row

    def update(self, user_id: int, payload: BlockUpdate, resource_id: Optional[int] = None) -> Base:
        """Apply the supplied fields. The update schema (extra=forbid) is the column allow-list."""
        row = self._target(user_id, resource_id)
        changes = payload.changes()
        if not changes:
            raise NoFieldsProvided()

        if self.spec.check_merged is not None:
            merged = row.to_dict() | changes
            try:
                self.spec.check_merged(merged)
            except ValueError as exc:
                raise PayloadValidationError(errors=[str(exc)]) from exc

        for field, value in changes.items():
            setattr(row, field, value)
        row.updated_at = utcnow()
        self.db.commit()
        self.db.refresh(row)
        logger.info("Updated %s id=%s user_id=%s fields=%s", self.spec.slug, row.id, user_id, sorted(changes))
        return row

    def delete(self, user_id: int, resource_id: Optional[int] = None) -> None:
        row = self._target(user_id, resource_id)
        row.is_active = False
        row.updated_at = utcnow()
        self.db.commit()
        logger.info("Deleted %s id=%s user_id=%s", self.spec.slug, row.id, user_id)
