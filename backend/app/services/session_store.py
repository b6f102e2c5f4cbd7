"""
Session store - durable record of issued tokens.

A session is usable iff is_active AND expires_at > now. Rows are only ever
deactivated (logout), never deleted or swept; expiry is checked lazily.
"""
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from backend.app.db.base import utcnow
from backend.app.models.auth_session import AuthSession
from backend.app.models.user import User


class SessionStore:
    def __init__(self, db: Session):
        self.db = db

    def create(self, user_id: int, token: str, expires_at: datetime) -> AuthSession:
        """Record a freshly issued token. Caller commits."""
        record = AuthSession(user_id=user_id, token=token, expires_at=expires_at, is_active=True)
        self.db.add(record)
        self.db.flush()
        return record

    def find_live(self, token: str) -> Optional[tuple[AuthSession, User]]:
        """Return (session, user) for a usable session holding this token."""
        row = (
            self.db.query(AuthSession, User)
            .join(User, AuthSession.user_id == User.id)
            .filter(
                AuthSession.token == token,
                AuthSession.is_active.is_(True),
                AuthSession.expires_at > utcnow(),
            )
            .first()
        )
        if row is None:
            return None
        return row[0], row[1]

    def invalidate(self, token: str) -> bool:
        """Deactivate the active session for this token. Caller commits."""
        updated = (
            self.db.query(AuthSession)
            .filter(AuthSession.token == token, AuthSession.is_active.is_(True))
            .update({"is_active": False, "updated_at": utcnow()}, synchronize_session=False)
        )
        return updated > 0
