"""
Resume building blocks. Every table is user-scoped and soft-deleted via is_active.
"""
from sqlalchemy import Boolean, Column, Date, Index, Integer, String, Text, text
from sqlalchemy.types import JSON

from backend.app.db.base import Base, OwnedResourceMixin


class PersonalInformation(OwnedResourceMixin, Base):
    __tablename__ = "personal_information"
    __table_args__ = (
        # At most one active row per user
        Index(
            "uq_personal_information_active_user",
            "user_id",
            unique=True,
            sqlite_where=text("is_active = 1"),
            postgresql_where=text("is_active"),
        ),
    )

    full_name = Column(String(255), nullable=False)
    professional_title = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone_number = Column(String(20), nullable=False)
    location = Column(String(255), nullable=False)
    social_media_urls = Column(JSON, default=dict, nullable=False)


class ProfessionalSummary(OwnedResourceMixin, Base):
    __tablename__ = "professional_summaries"

    summary = Column(Text, nullable=False)


class WorkExperience(OwnedResourceMixin, Base):
    __tablename__ = "work_experiences"

    title = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)  # company
    url = Column(String(1024), nullable=True)
    location = Column(String(255), nullable=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    is_current = Column(Boolean, default=False, nullable=False)
    description = Column(Text, nullable=True)


class Project(OwnedResourceMixin, Base):
    __tablename__ = "projects"

    title = Column(String(255), nullable=False)
    url = Column(String(1024), nullable=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    description = Column(Text, nullable=False)


class Skill(OwnedResourceMixin, Base):
    __tablename__ = "skills"

    name = Column(String(255), nullable=False)
    level = Column(Integer, nullable=True)  # 1-5


class Education(OwnedResourceMixin, Base):
    __tablename__ = "education"

    degree = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)  # institution
    url = Column(String(1024), nullable=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    location = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)


class Certification(OwnedResourceMixin, Base):
    __tablename__ = "certifications"

    name = Column(String(255), nullable=False)
    url = Column(String(1024), nullable=True)
    description = Column(Text, nullable=True)
