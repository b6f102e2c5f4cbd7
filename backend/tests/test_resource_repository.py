"""Tests for the unique-index backstops behind the check-then-insert paths"""
import pytest

from backend.app.core.exceptions import Conflict
from backend.app.models.resume_blocks import PersonalInformation
from backend.app.models.user import User
from backend.app.schemas.resume_blocks import PersonalInformationCreate
from backend.app.services.auth_service import AuthService
from backend.app.services.resource_repository import PERSONAL_INFORMATION, ResourceRepository

PERSONAL_INFO = {
    "full_name": "Test User",
    "professional_title": "Backend Engineer",
    "email": "test@example.com",
    "phone_number": "+14155550100",
    "location": "Berlin",
}


def test_personal_information_index_catches_missed_precheck(db_session, test_user, monkeypatch):
    """A concurrent insert the existence check did not see still ends in Conflict."""
    db_session.add(PersonalInformation(user_id=test_user.id, **PERSONAL_INFO, social_media_urls={}))
    db_session.commit()

    # the other request's row is not visible to the pre-check
    monkeypatch.setattr(
        ResourceRepository,
        "_active_for",
        lambda self, user_id: self.db.query(self.model).filter(self.model.id == -1),
    )
    repo = ResourceRepository(db_session, PERSONAL_INFORMATION)
    with pytest.raises(Conflict) as exc_info:
        repo.create(test_user.id, PersonalInformationCreate(**PERSONAL_INFO))
    assert exc_info.value.message == "Personal information already exists. Use update endpoint to modify it."

    monkeypatch.undo()
    rows = db_session.query(PersonalInformation).filter(PersonalInformation.user_id == test_user.id).all()
    assert len(rows) == 1


def test_inactive_personal_information_does_not_block_insert(db_session, test_user):
    db_session.add(PersonalInformation(user_id=test_user.id, is_active=False, **PERSONAL_INFO, social_media_urls={}))
    db_session.commit()

    row = ResourceRepository(db_session, PERSONAL_INFORMATION).create(
        test_user.id, PersonalInformationCreate(**PERSONAL_INFO)
    )
    assert row.is_active is True


@pytest.mark.parametrize("field", ["username", "email"])
def test_duplicate_user_insert_is_conflict(db_session, test_user, field):
    fields = {
        "username": "freshname",
        "name": "Fresh Name",
        "email": "fresh@example.com",
        "hashed_password": "not-a-real-hash",
        "role": "USER",
    }
    fields[field] = getattr(test_user, field)

    with pytest.raises(Conflict) as exc_info:
        AuthService(db_session)._insert_user(**fields)
    assert exc_info.value.message == "User with this email or username already exists"
    assert db_session.query(User).count() == 1
