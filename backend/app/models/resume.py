"""
Resume - a named composition of building blocks.

Reference columns hold raw id lists (weak references); the referenced rows are
resolved at read time and may have been soft-deleted since.
"""
from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.types import JSON

from backend.app.db.base import Base, OwnedResourceMixin


class Resume(OwnedResourceMixin, Base):
    __tablename__ = "resumes"

    title = Column(String(255), nullable=False, default="Default Resume")
    personal_information_id = Column(Integer, ForeignKey("personal_information.id"), nullable=False)

    professional_summary_ids = Column(JSON, default=list, nullable=False)
    work_experience_ids = Column(JSON, default=list, nullable=False)
    project_ids = Column(JSON, default=list, nullable=False)
    skill_ids = Column(JSON, default=list, nullable=False)
    education_ids = Column(JSON, default=list, nullable=False)
    certification_ids = Column(JSON, default=list, nullable=False)
