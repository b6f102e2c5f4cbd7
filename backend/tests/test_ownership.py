"""Tests for the ownership authorizer and the role/capability mapping"""
import pytest

from backend.app.core.exceptions import Forbidden
from backend.app.core.permissions import Capability, Principal, ensure_capability, has_capability
from backend.app.models.resume_blocks import Skill
from backend.app.services.ownership import OwnershipAuthorizer


@pytest.fixture
def skills(db_session, test_user, other_user):
    rows = [
        Skill(user_id=test_user.id, name="Python"),
        Skill(user_id=test_user.id, name="SQL"),
        Skill(user_id=test_user.id, name="COBOL", is_active=False),
        Skill(user_id=other_user.id, name="Haskell"),
    ]
    db_session.add_all(rows)
    db_session.commit()
    return {row.name: row.id for row in rows}


def test_owns(db_session, test_user, other_user, skills):
    auth = OwnershipAuthorizer(db_session)
    assert auth.owns(Skill, skills["Python"], test_user.id)
    assert not auth.owns(Skill, skills["Python"], other_user.id)
    assert not auth.owns(Skill, skills["COBOL"], test_user.id)
    assert not auth.owns(Skill, 9999, test_user.id)


def test_owns_all(db_session, test_user, skills):
    auth = OwnershipAuthorizer(db_session)
    assert auth.owns_all(Skill, [skills["Python"], skills["SQL"]], test_user.id)
    assert auth.owns_all(Skill, [skills["Python"], skills["Python"]], test_user.id)
    assert not auth.owns_all(Skill, [skills["Python"], skills["Haskell"]], test_user.id)
    assert not auth.owns_all(Skill, [skills["Python"], skills["COBOL"]], test_user.id)
    assert not auth.owns_all(Skill, [skills["Python"], 9999], test_user.id)


def test_owns_all_empty_list(db_session, test_user):
    assert OwnershipAuthorizer(db_session).owns_all(Skill, [], test_user.id) is True


def test_fetch_owned_with_lock(db_session, test_user, skills):
    row = OwnershipAuthorizer(db_session).fetch_owned(Skill, skills["SQL"], test_user.id, lock=True)
    assert row is not None
    assert row.name == "SQL"


def _principal(role: str) -> Principal:
    return Principal(user_id=1, email="p@example.com", role=role, session_id=1)


def test_role_capabilities():
    user, admin = _principal("USER"), _principal("ADMIN")
    assert has_capability(user, Capability.MANAGE_OWN_RESUME_DATA)
    assert not has_capability(user, Capability.VIEW_ANY_USER)
    assert has_capability(admin, Capability.VIEW_ANY_USER)
    assert not has_capability(_principal("GUEST"), Capability.MANAGE_OWN_RESUME_DATA)
    assert not has_capability(None, Capability.MANAGE_OWN_RESUME_DATA)


def test_ensure_capability_raises_forbidden():
    with pytest.raises(Forbidden) as exc_info:
        ensure_capability(_principal("USER"), Capability.VIEW_ANY_USER)
    assert exc_info.value.status_code == 403
    assert exc_info.value.message == "Insufficient permissions"
