"""
Dependency injection utilities: DB session, authentication gate, capability checks.
"""
from typing import Callable, Iterator, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from backend.app.core.config import settings
from backend.app.core.exceptions import SessionInvalidated, Unauthenticated
from backend.app.core.permissions import Capability, Principal, ensure_capability
from backend.app.core.security import decode_access_token
from backend.app.db.session import SessionLocal
from backend.app.services.session_store import SessionStore

security = HTTPBearer(auto_error=False)


def get_db() -> Iterator[Session]:
    """Get database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_request_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> Optional[str]:
    """Bearer header first, then the auth cookie."""
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.auth_cookie_name) or None


def resolve_principal(db: Session, token: str) -> Principal:
    """
    Turn a raw token into a principal.

    The signature/expiry check comes first (InvalidToken, TokenExpired); the
    session row is authoritative after that, so a logged-out or revoked token
    fails with SessionInvalidated even while its signature is still valid.
    """
    decode_access_token(token)
    live = SessionStore(db).find_live(token)
    if live is None:
        raise SessionInvalidated()
    session, user = live
    return Principal(user_id=user.id, email=user.email, role=user.role, session_id=session.id)


def get_current_principal(
    token: Optional[str] = Depends(get_request_token),
    db: Session = Depends(get_db),
) -> Principal:
    """Get current authenticated principal from the bearer header or cookie"""
    if not token:
        raise Unauthenticated()
    return resolve_principal(db, token)


def get_optional_principal(
    token: Optional[str] = Depends(get_request_token),
    db: Session = Depends(get_db),
) -> Optional[Principal]:
    """Like get_current_principal, but anonymous or bad credentials yield None."""
    if not token:
        return None
    try:
        return resolve_principal(db, token)
    except Unauthenticated:
        return None


def require_capability(capability: Capability) -> Callable[..., Principal]:
    def dependency(principal: Principal = Depends(get_current_principal)) -> Principal:
        ensure_capability(principal, capability)
        return principal

    return dependency
