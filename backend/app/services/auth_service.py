"""
Authentication service business logic
"""
import secrets
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.app.core.config import ROLE_USER
from backend.app.core.exceptions import Conflict, InvalidCredentials, NotFound
from backend.app.core.logging_config import get_logger
from backend.app.core.security import create_access_token, get_password_hash, token_lifetime, verify_password
from backend.app.db.base import utcnow
from backend.app.models.user import NAME_MAX_LENGTH, USERNAME_MAX_LENGTH, User
from backend.app.schemas.user import UserLogin, UserRegister
from backend.app.services.oauth_client import OAuthIdentity
from backend.app.services.session_store import SessionStore

logger = get_logger("services.auth")


@dataclass
class IssuedSession:
    """A freshly minted token and the session row that keeps it alive."""

    user: User
    token: str
    session_id: int
    expires_at: datetime


def oauth_username(email: str, external_id: str) -> str:
    """
    Local part of the email plus the last 4 chars of the provider id, e.g. jane_1234.

    The local part is cut so the result fits the username column.
    """
    suffix = f"_{external_id[-4:]}"
    return email.split("@")[0][: USERNAME_MAX_LENGTH - len(suffix)] + suffix


class AuthService:
    """Service for authentication operations"""

    def __init__(self, db: Session):
        self.db = db
        self.sessions = SessionStore(db)

    def issue_session(self, user: User) -> IssuedSession:
        """Sign a token for the user and record it as an active session."""
        token = create_access_token(data={"sub": str(user.id), "email": user.email, "role": user.role})
        expires_at = utcnow() + token_lifetime()
        record = self.sessions.create(user.id, token, expires_at)
        self.db.commit()
        return IssuedSession(user=user, token=token, session_id=record.id, expires_at=expires_at)

    def _insert_user(self, **fields) -> User:
        user = User(**fields)
        self.db.add(user)
        try:
            self.db.flush()
        except IntegrityError:
            # Unique index caught a concurrent registration with the same username/email
            self.db.rollback()
            raise Conflict("User with this email or username already exists")
        return user

    def register(self, user_data: UserRegister) -> IssuedSession:
        """Register a new user; the user is logged in after registering."""
        existing = (
            self.db.query(User.id)
            .filter(or_(User.email == user_data.email, User.username == user_data.username))
            .first()
        )
        if existing:
            raise Conflict("User with this email or username already exists")

        user = self._insert_user(
            username=user_data.username,
            name=user_data.name,
            email=user_data.email,
            hashed_password=get_password_hash(user_data.password),
            role=user_data.role,
        )
        return self.issue_session(user)

    def login(self, login_data: UserLogin) -> IssuedSession:
        """Same failure for unknown email and wrong password."""
        user = self.db.query(User).filter(User.email == login_data.email).first()
        if not user or not verify_password(login_data.password, user.hashed_password):
            raise InvalidCredentials()
        return self.issue_session(user)

    def oauth_login(self, identity: OAuthIdentity) -> IssuedSession:
        """Log in the user owning identity.email, creating the account on first sight."""
        user = self.db.query(User).filter(User.email == identity.email).first()
        if user is None:
            user = self._insert_user(
                username=oauth_username(identity.email, identity.id),
                name=(identity.name or identity.email)[:NAME_MAX_LENGTH],
                email=identity.email,
                # OAuth accounts have no usable password
                hashed_password=get_password_hash(secrets.token_urlsafe(32)),
                role=ROLE_USER,
            )
            logger.info("Created OAuth user user_id=%s email=%s", user.id, user.email)
        return self.issue_session(user)

    def logout(self, token: str) -> bool:
        """Deactivate the session holding this token. Returns whether one was active."""
        found = self.sessions.invalidate(token)
        self.db.commit()
        return found

    def get_user(self, user_id: int) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFound("User not found")
        return user
