"""
Pytest fixtures for the Resume Management API tests.
Uses in-memory SQLite, provides users, live sessions and auth headers.
"""
import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Use in-memory SQLite for tests - set before config/session load
# Must override any .env DATABASE_URL
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["GOOGLE_CLIENT_ID"] = "test-client-id"
os.environ["GOOGLE_CLIENT_SECRET"] = "test-client-secret"

from backend.app.db.base import Base
from backend.main import app
from backend.app.core.config import ROLE_ADMIN, ROLE_USER
from backend.app.core.dependencies import get_db
from backend.app.core.security import get_password_hash
from backend.app.models.user import User
from backend.app.services.auth_service import AuthService

# In-memory SQLite for tests - StaticPool ensures all sessions share same DB
engine = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Patch the session module so app uses our test engine
import backend.app.db.session as session_module
session_module.engine = engine
session_module.SessionLocal = TestingSessionLocal


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db

TEST_PASSWORD = "testpass123"


@pytest.fixture(scope="function")
def db_session():
    """Create tables and a fresh DB session per test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


def make_user(db, username: str, email: str, role: str = ROLE_USER) -> User:
    user = User(
        username=username,
        name=username.title(),
        email=email,
        hashed_password=get_password_hash(TEST_PASSWORD),
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def test_user(db_session):
    """Create a test user in the DB."""
    return make_user(db_session, "testuser", "test@example.com")


@pytest.fixture
def other_user(db_session):
    return make_user(db_session, "otheruser", "other@example.com")


@pytest.fixture
def admin_user(db_session):
    return make_user(db_session, "adminuser", "admin@example.com", role=ROLE_ADMIN)


@pytest.fixture
def auth_token(db_session, test_user):
    """Token backed by a live session row for test_user."""
    return AuthService(db_session).issue_session(test_user).token


@pytest.fixture
def auth_headers(auth_token):
    """Bearer token for test user."""
    return bearer(auth_token)


@pytest.fixture
def other_headers(db_session, other_user):
    return bearer(AuthService(db_session).issue_session(other_user).token)


@pytest.fixture
def admin_headers(db_session, admin_user):
    return bearer(AuthService(db_session).issue_session(admin_user).token)


@pytest.fixture
def test_password():
    return TEST_PASSWORD


@pytest.fixture
def client(db_session):
    """TestClient over a freshly created schema."""
    return TestClient(app)
