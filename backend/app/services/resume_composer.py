"""
Resume composer - builds resumes out of id references to the user's building blocks.

References are weak: ownership is checked when a resume is written, and at read
time every id is resolved again against active rows. A reference whose row has
since been soft-deleted simply drops out of the expanded resume.
"""
from dataclasses import dataclass
from typing import Any, Type

from sqlalchemy.orm import Session

from backend.app.core.exceptions import InvalidReference, NoFieldsProvided, NotFound
from backend.app.core.logging_config import get_logger
from backend.app.db.base import Base, utcnow
from backend.app.models.resume import Resume
from backend.app.models.resume_blocks import (
    Certification,
    Education,
    PersonalInformation,
    ProfessionalSummary,
    Project,
    Skill,
    WorkExperience,
)
from backend.app.schemas.resume import ResumeCreate, ResumeUpdate
from backend.app.services.ownership import OwnershipAuthorizer

logger = get_logger("services.resume_composer")


@dataclass(frozen=True)
class WeakReference:
    """An id-list column on Resume pointing into one block table."""

    field: str
    target: Type[Base]
    expanded_key: str
    description: str


PERSONAL_INFORMATION_REF = "personal_information_id"

REFERENCE_LISTS: tuple[WeakReference, ...] = (
    WeakReference("professional_summary_ids", ProfessionalSummary, "professional_summaries", "professional summaries"),
    WeakReference("work_experience_ids", WorkExperience, "work_experiences", "work experiences"),
    WeakReference("project_ids", Project, "projects", "projects"),
    WeakReference("skill_ids", Skill, "skills", "skills"),
    WeakReference("education_ids", Education, "education", "education records"),
    WeakReference("certification_ids", Certification, "certifications", "certifications"),
)


class ResumeComposer:
    def __init__(self, db: Session):
        self.db = db
        self.ownership = OwnershipAuthorizer(db)

    def _validate_references(self, user_id: int, values: dict[str, Any]) -> None:
        """Check every reference present in `values` points at an active row owned by user_id."""
        if PERSONAL_INFORMATION_REF in values:
            if not self.ownership.owns(PersonalInformation, values[PERSONAL_INFORMATION_REF], user_id, lock=True):
                raise InvalidReference("Personal information not found or does not belong to you")
        for ref in REFERENCE_LISTS:
            if ref.field not in values:
                continue
            if not self.ownership.owns_all(ref.target, values[ref.field], user_id, lock=True):
                raise InvalidReference(
                    f"One or more {ref.description} do not exist or do not belong to you",
                    errors=[ref.field],
                )

    def _owned_resume(self, user_id: int, resume_id: int, lock: bool = False) -> Resume:
        resume = self.ownership.fetch_owned(Resume, resume_id, user_id, lock=lock)
        if resume is None:
            raise NotFound("Resume not found")
        return resume

    def create(self, user_id: int, payload: ResumeCreate) -> Resume:
        values = payload.model_dump()
        self._validate_references(user_id, values)
        resume = Resume(user_id=user_id, **values)
        self.db.add(resume)
        self.db.commit()
        self.db.refresh(resume)
        logger.info("Created resume id=%s user_id=%s", resume.id, user_id)
        return resume

    def get_all(self, user_id: int) -> list[Resume]:
        return (
            self.db.query(Resume)
            .filter(Resume.user_id == user_id, Resume.is_active.is_(True))
            .order_by(Resume.created_at.desc(), Resume.id.desc())
            .all()
        )

    def _resolve(self, target: Type[Base], ids: list[int], user_id: int) -> list[dict[str, Any]]:
        """Active rows for `ids`, in reference order; ids that no longer resolve are skipped."""
        if not ids:
            return []
        rows = (
            self.db.query(target)
            .filter(target.id.in_(ids), target.user_id == user_id, target.is_active.is_(True))
            .all()
        )
        by_id = {row.id: row for row in rows}
        return [by_id[i].to_dict() for i in ids if i in by_id]

    def get_expanded(self, user_id: int, resume_id: int) -> dict[str, Any]:
        resume = self._owned_resume(user_id, resume_id)
        expanded = resume.to_dict()

        personal = self._resolve(PersonalInformation, [resume.personal_information_id], user_id)
        expanded["personal_information"] = personal[0] if personal else None
        for ref in REFERENCE_LISTS:
            expanded[ref.expanded_key] = self._resolve(ref.target, getattr(resume, ref.field) or [], user_id)
        return expanded

    def update(self, user_id: int, resume_id: int, payload: ResumeUpdate) -> Resume:
        resume = self._owned_resume(user_id, resume_id, lock=True)
        changes = payload.changes()
        self._validate_references(user_id, changes)
        if not changes:
            raise NoFieldsProvided()
        for field, value in changes.items():
            setattr(resume, field, value)
        resume.updated_at = utcnow()
        self.db.commit()
        self.db.refresh(resume)
        logger.info("Updated resume id=%s user_id=%s fields=%s", resume.id, user_id, sorted(changes))
        return resume

    def delete(self, user_id: int, resume_id: int) -> None:
        resume = self._owned_resume(user_id, resume_id, lock=True)
        resume.is_active = False
        resume.updated_at = utcnow()
        self.db.commit()
        logger.info("Deleted resume id=%s user_id=%s", resume.id, user_id)
