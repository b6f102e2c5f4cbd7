"""
User database model - password and OAuth accounts
"""
from sqlalchemy import Column, DateTime, Integer, String

from backend.app.core.config import ROLE_USER
from backend.app.db.base import Base, utcnow

USERNAME_MAX_LENGTH = 30
NAME_MAX_LENGTH = 100


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(USERNAME_MAX_LENGTH), unique=True, nullable=False, index=True)
    name = Column(String(NAME_MAX_LENGTH), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=ROLE_USER)

    created_at = Column(DateTime, default=utcnow, nullable=False)
