"""
Password hashing and JWT helpers.
"""
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from backend.app.core.config import settings
from backend.app.core.exceptions import InvalidToken, TokenExpired

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Unrecognized or malformed hash
        return False


def token_lifetime() -> timedelta:
    return timedelta(minutes=settings.access_token_expire_minutes)


def create_access_token(data: dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign a JWT carrying `data` plus iat/exp/jti claims.

    jti keeps tokens distinct even when the same user logs in twice within a second.
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta if expires_delta is not None else token_lifetime())
    to_encode = {**data, "iat": now, "exp": expire, "jti": uuid.uuid4().hex}
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> dict[str, Any]:
    """Verify signature and expiry. Raises TokenExpired or InvalidToken."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except ExpiredSignatureError as exc:
        raise TokenExpired() from exc
    except JWTError as exc:
        raise InvalidToken() from exc
    if not payload.get("sub"):
        raise InvalidToken()
    return payload
