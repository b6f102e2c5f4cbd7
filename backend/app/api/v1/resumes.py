"""
Resume endpoints - compose resumes from the caller's building blocks
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from backend.app.core.dependencies import get_db, require_capability
from backend.app.core.permissions import Capability, Principal
from backend.app.schemas.common import envelope
from backend.app.schemas.resume import ResumeCreate, ResumeUpdate
from backend.app.services.resume_composer import ResumeComposer

router = APIRouter()

resume_owner = require_capability(Capability.MANAGE_OWN_RESUME_DATA)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_resume(
    payload: ResumeCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(resume_owner),
):
    """
    Create a resume.

    - **personal_information_id**: required, must be your own active record
    - **\\*_ids**: lists of your own block ids; order is kept, duplicates collapse
    """
    resume = ResumeComposer(db).create(principal.user_id, payload)
    return envelope(message="Resume created successfully", data=resume.to_dict())


@router.get("")
def list_resumes(
    db: Session = Depends(get_db),
    principal: Principal = Depends(resume_owner),
):
    """List the caller's resumes, newest first. References are not expanded."""
    resumes = ResumeComposer(db).get_all(principal.user_id)
    return envelope(data=[r.to_dict() for r in resumes])


@router.get("/{resume_id}")
def get_resume(
    resume_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(resume_owner),
):
    """Resume with every reference replaced by the referenced block."""
    return envelope(data=ResumeComposer(db).get_expanded(principal.user_id, resume_id))


@router.put("/{resume_id}")
def update_resume(
    resume_id: int,
    payload: ResumeUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(resume_owner),
):
    resume = ResumeComposer(db).update(principal.user_id, resume_id, payload)
    return envelope(message="Resume updated successfully", data=resume.to_dict())


@router.delete("/{resume_id}")
def delete_resume(
    resume_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(resume_owner),
):
    ResumeComposer(db).delete(principal.user_id, resume_id)
    return envelope(message="Resume deleted successfully")
