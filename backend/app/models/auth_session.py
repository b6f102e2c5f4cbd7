"""
AuthSession - one row per issued token. Rows are deactivated on logout, never deleted.
"""
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String

from backend.app.db.base import Base, TimestampMixin


class AuthSession(TimestampMixin, Base):
    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    token = Column(String(1024), unique=True, nullable=False, index=True)
    expires_at = Column(DateTime, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
