"""
Authentication endpoints - Register, Login, Logout, Profile and Google OAuth
"""
import secrets
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import RedirectResponse
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from backend.app.core.config import BROWSER_USER_AGENT_TOKENS, settings
from backend.app.core.dependencies import get_current_principal, get_db, security
from backend.app.core.exceptions import AppError, MissingToken, OAuthFailed
from backend.app.core.logging_config import get_logger
from backend.app.core.permissions import Capability, Principal, ensure_capability
from backend.app.schemas.common import envelope
from backend.app.schemas.user import AuthData, LogoutRequest, UserLogin, UserRegister, UserResponse
from backend.app.services.auth_service import AuthService, IssuedSession
from backend.app.services.oauth_client import GoogleOAuthClient, get_oauth_client

logger = get_logger("api.auth")
router = APIRouter()


def set_auth_cookie(response: Response, token: str) -> None:
    """Hand the token out as an HTTP-only cookie alongside the JSON body."""
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
        max_age=settings.access_token_expire_minutes * 60,
    )


def auth_payload(issued: IssuedSession) -> dict:
    return AuthData(
        user=UserResponse.model_validate(issued.user),
        token=issued.token,
        expires_in=settings.access_token_expire_minutes,
    ).model_dump(by_alias=True)


def is_browser(user_agent: str | None) -> bool:
    ua = user_agent or ""
    return any(marker in ua for marker in BROWSER_USER_AGENT_TOKENS)


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(user_data: UserRegister, response: Response, db: Session = Depends(get_db)):
    """
    Register a new user account. Returns the user and an access token (user is logged in after register).

    - **username**: alphanumeric, 3-30 characters (must be unique)
    - **name**: display name
    - **email**: User's email address (must be unique)
    - **password**: 6-128 characters
    """
    logger.info("Registration attempt for email=%s", user_data.email)
    try:
        issued = AuthService(db).register(user_data)
    except AppError as e:
        logger.warning("Registration failed email=%s reason=%s", user_data.email, e.message)
        raise

    set_auth_cookie(response, issued.token)
    logger.info("User registered successfully user_id=%s email=%s", issued.user.id, issued.user.email)
    return envelope(message="User registered successfully", data=auth_payload(issued))


@router.post("/login")
def login(login_data: UserLogin, response: Response, db: Session = Depends(get_db)):
    """
    Login user and get access token

    - **email**: User's email address
    - **password**: User's password
    """
    logger.info("Login attempt for email=%s", login_data.email)
    try:
        issued = AuthService(db).login(login_data)
    except AppError as e:
        logger.warning("Login failed email=%s reason=%s", login_data.email, e.message)
        raise

    set_auth_cookie(response, issued.token)
    logger.info("User logged in successfully user_id=%s email=%s", issued.user.id, issued.user.email)
    return envelope(message="Login successful", data=auth_payload(issued))


@router.post("/logout")
def logout(
    request: Request,
    response: Response,
    payload: Optional[LogoutRequest] = None,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
):
    """
    Invalidate the session behind a token. The token is read from the bearer
    header, then the JSON body (`token`), then the auth cookie.
    """
    token = (
        (credentials.credentials if credentials else None)
        or (payload.token if payload else None)
        or request.cookies.get(settings.auth_cookie_name)
    )
    if not token:
        raise MissingToken()

    found = AuthService(db).logout(token)
    response.delete_cookie(settings.auth_cookie_name)
    logger.info("Logout processed active_session_found=%s", found)
    return envelope(message="Logout successful")


@router.get("/profile")
def get_profile(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Get the current authenticated user's account."""
    user = AuthService(db).get_user(principal.user_id)
    return envelope(data={"user": UserResponse.model_validate(user).model_dump()})


@router.get("/users/{user_id}")
def get_user(
    user_id: int,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Read an account: your own, or anyone's with the view-any-user capability (ADMIN)."""
    if principal.user_id != user_id:
        ensure_capability(principal, Capability.VIEW_ANY_USER, "Access denied. You can only access your own resources.")
    user = AuthService(db).get_user(user_id)
    return envelope(data={"user": UserResponse.model_validate(user).model_dump()})


@router.get("/google")
def google_login(oauth: GoogleOAuthClient = Depends(get_oauth_client)):
    """Redirect to Google's consent screen."""
    return RedirectResponse(oauth.authorization_url(state=secrets.token_urlsafe(16)))


@router.get("/google/callback")
def google_callback(
    request: Request,
    response: Response,
    code: Optional[str] = None,
    error: Optional[str] = None,
    oauth: GoogleOAuthClient = Depends(get_oauth_client),
    db: Session = Depends(get_db),
):
    """
    Finish Google sign-in. Browsers are redirected with the token in the query
    string; API clients get the usual JSON payload. Both also get the cookie.
    """
    if error or not code:
        logger.warning("Google OAuth callback without code error=%s", error)
        raise OAuthFailed(errors=["oauth_failed"])

    try:
        identity = oauth.fetch_identity(code)
        issued = AuthService(db).oauth_login(identity)
    except AppError:
        raise
    except Exception as exc:
        logger.exception("Google OAuth login failed")
        raise OAuthFailed(errors=["oauth_failed"]) from exc

    logger.info("Google OAuth login user_id=%s email=%s", issued.user.id, issued.user.email)
    if is_browser(request.headers.get("user-agent")):
        redirect = RedirectResponse(
            f"{settings.oauth_success_redirect}?{urlencode({'token': issued.token})}",
            status_code=status.HTTP_302_FOUND,
        )
        set_auth_cookie(redirect, issued.token)
        return redirect

    set_auth_cookie(response, issued.token)
    return envelope(message="Google OAuth authentication successful", data=auth_payload(issued))
