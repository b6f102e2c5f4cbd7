"""
Resume Pydantic schemas - a title plus id references into the building-block tables
"""
from typing import Annotated, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, PositiveInt, field_validator

from backend.app.schemas.resume_blocks import BlockUpdate

ResumeTitle = Annotated[str, Field(min_length=2, max_length=255)]
IdList = list[PositiveInt]

REFERENCE_LIST_FIELDS: tuple[str, ...] = (
    "professional_summary_ids",
    "work_experience_ids",
    "project_ids",
    "skill_ids",
    "education_ids",
    "certification_ids",
)


def _dedupe(ids: list[int] | None) -> list[int] | None:
    if ids is None:
        return None
    return list(dict.fromkeys(ids))


class ResumeCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: ResumeTitle = "Default Resume"
    personal_information_id: PositiveInt
    professional_summary_ids: IdList = Field(
        default_factory=list,
        validation_alias=AliasChoices("professional_summary_ids", "summary_ids"),
    )
    work_experience_ids: IdList = Field(default_factory=list)
    project_ids: IdList = Field(default_factory=list)
    skill_ids: IdList = Field(default_factory=list)
    education_ids: IdList = Field(default_factory=list)
    certification_ids: IdList = Field(default_factory=list)

    @field_validator(*REFERENCE_LIST_FIELDS)
    @classmethod
    def collapse_duplicates(cls, ids):
        return _dedupe(ids)


class ResumeUpdate(BlockUpdate):
    non_nullable = frozenset(("title", "personal_information_id") + REFERENCE_LIST_FIELDS)

    title: Optional[ResumeTitle] = None
    personal_information_id: Optional[PositiveInt] = None
    professional_summary_ids: Optional[IdList] = Field(
        default=None,
        validation_alias=AliasChoices("professional_summary_ids", "summary_ids"),
    )
    work_experience_ids: Optional[IdList] = None
    project_ids: Optional[IdList] = None
    skill_ids: Optional[IdList] = None
    education_ids: Optional[IdList] = None
    certification_ids: Optional[IdList] = None

    @field_validator(*REFERENCE_LIST_FIELDS)
    @classmethod
    def collapse_duplicates(cls, ids):
        return _dedupe(ids)
