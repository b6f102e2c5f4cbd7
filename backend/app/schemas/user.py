"""
User Pydantic schemas for request/response validation
"""
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserRegister(BaseModel):
    """Schema for user registration"""
    model_config = ConfigDict(extra="forbid")

    username: str = Field(min_length=3, max_length=30, pattern=r"^[A-Za-z0-9]+$")
    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    role: Literal["USER"] = "USER"


class UserLogin(BaseModel):
    """Schema for user login"""
    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(min_length=1)


class LogoutRequest(BaseModel):
    """Optional body for logout; the token may also come from the header or cookie."""
    token: Optional[str] = None


class UserResponse(BaseModel):
    """Schema for user response (password hash never included)"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    name: str
    email: str
    role: str
    created_at: Optional[datetime] = None


class AuthData(BaseModel):
    """Payload returned by register, login and OAuth login"""
    model_config = ConfigDict(populate_by_name=True)

    user: UserResponse
    token: str
    expires_in: int = Field(serialization_alias="expiresIn")
