"""
Building-block endpoints - personal information (one per user) and the six
collection types (summaries, work experience, projects, skills, education,
certifications). Every route is scoped to the caller's own rows.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from backend.app.core.dependencies import get_db, require_capability
from backend.app.core.permissions import Capability, Principal
from backend.app.schemas.common import envelope
from backend.app.schemas.resume_blocks import PersonalInformationCreate, PersonalInformationUpdate
from backend.app.services.resource_repository import (
    COLLECTION_SPECS,
    PERSONAL_INFORMATION,
    ResourceRepository,
    ResourceSpec,
)

resume_data_owner = require_capability(Capability.MANAGE_OWN_RESUME_DATA)


def build_collection_router(spec: ResourceSpec) -> APIRouter:
    """POST / GET / PUT {id} / DELETE {id} for one block type."""
    router = APIRouter()
    create_schema = spec.create_schema
    update_schema = spec.update_schema

    @router.post("", status_code=status.HTTP_201_CREATED)
    def create_item(
        payload: create_schema,
        db: Session = Depends(get_db),
        principal: Principal = Depends(resume_data_owner),
    ):
        row = ResourceRepository(db, spec).create(principal.user_id, payload)
        return envelope(message=f"{spec.label} created successfully", data=row.to_dict())

    @router.get("")
    def list_items(
        db: Session = Depends(get_db),
        principal: Principal = Depends(resume_data_owner),
    ):
        rows = ResourceRepository(db, spec).get_all(principal.user_id)
        return envelope(data=[row.to_dict() for row in rows])

    @router.put("/{item_id}")
    def update_item(
        item_id: int,
        payload: update_schema,
        db: Session = Depends(get_db),
        principal: Principal = Depends(resume_data_owner),
    ):
        row = ResourceRepository(db, spec).update(principal.user_id, payload, resource_id=item_id)
        return envelope(message=f"{spec.label} updated successfully", data=row.to_dict())

    @router.delete("/{item_id}")
    def delete_item(
        item_id: int,
        db: Session = Depends(get_db),
        principal: Principal = Depends(resume_data_owner),
    ):
        ResourceRepository(db, spec).delete(principal.user_id, resource_id=item_id)
        return envelope(message=f"{spec.label} deleted successfully")

    return router


personal_information_router = APIRouter()


@personal_information_router.post("", status_code=status.HTTP_201_CREATED)
def create_personal_information(
    payload: PersonalInformationCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(resume_data_owner),
):
    """Create the caller's personal information. 409 if one is already active."""
    row = ResourceRepository(db, PERSONAL_INFORMATION).create(principal.user_id, payload)
    return envelope(message="Personal information created successfully", data=row.to_dict())


@personal_information_router.get("")
def get_personal_information(
    db: Session = Depends(get_db),
    principal: Principal = Depends(resume_data_owner),
):
    row = ResourceRepository(db, PERSONAL_INFORMATION).get_single(principal.user_id)
    return envelope(data=row.to_dict())


@personal_information_router.put("")
def update_personal_information(
    payload: PersonalInformationUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(resume_data_owner),
):
    """Partial update; only the fields sent are changed."""
    row = ResourceRepository(db, PERSONAL_INFORMATION).update(principal.user_id, payload)
    return envelope(message="Personal information updated successfully", data=row.to_dict())


@personal_information_router.delete("")
def delete_personal_information(
    db: Session = Depends(get_db),
    principal: Principal = Depends(resume_data_owner),
):
    ResourceRepository(db, PERSONAL_INFORMATION).delete(principal.user_id)
    return envelope(message="Personal information deleted successfully")


def include_resume_block_routers(parent: APIRouter | None = None, prefix: str = "/api") -> APIRouter:
    """Mount every block router under `prefix`, one tag per block type."""
    parent = parent or APIRouter()
    parent.include_router(
        personal_information_router,
        prefix=f"{prefix}/{PERSONAL_INFORMATION.slug}",
        tags=[PERSONAL_INFORMATION.slug],
    )
    for spec in COLLECTION_SPECS:
        parent.include_router(build_collection_router(spec), prefix=f"{prefix}/{spec.slug}", tags=[spec.slug])
    return parent
