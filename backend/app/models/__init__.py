from backend.app.models.user import User
from backend.app.models.auth_session import AuthSession
from backend.app.models.resume_blocks import (
    Certification,
    Education,
    PersonalInformation,
    ProfessionalSummary,
    Project,
    Skill,
    WorkExperience,
)
from backend.app.models.resume import Resume
