"""
Google OAuth 2.0 client (authorization-code flow) over httpx.

Only the pieces the login flow needs: the consent-screen URL, and turning a
callback code into a verified {id, email, name, avatar} identity.
"""
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlencode

import httpx

from backend.app.core.config import (
    GOOGLE_AUTHORIZE_URL,
    GOOGLE_SCOPES,
    GOOGLE_TOKEN_URL,
    GOOGLE_USERINFO_URL,
    settings,
)
from backend.app.core.exceptions import OAuthFailed
from backend.app.core.logging_config import get_logger

logger = get_logger("services.oauth")


@dataclass(frozen=True)
class OAuthIdentity:
    id: str
    email: str
    name: str
    avatar: Optional[str] = None


class GoogleOAuthClient:
    def __init__(self, client_id: str, client_secret: str, redirect_uri: str, timeout: float = 30):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.timeout = timeout

    def _require_config(self) -> None:
        if not self.client_id or not self.client_secret:
            raise OAuthFailed("Google OAuth is not configured", errors=["oauth_failed"])

    def authorization_url(self, state: str) -> str:
        self._require_config()
        query = urlencode({
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": " ".join(GOOGLE_SCOPES),
            "state": state,
        })
        return f"{GOOGLE_AUTHORIZE_URL}?{query}"

    def fetch_identity(self, code: str) -> OAuthIdentity:
        """Exchange the callback code and read the user's profile."""
        self._require_config()
        try:
            with httpx.Client(timeout=self.timeout) as client:
                token_resp = client.post(
                    GOOGLE_TOKEN_URL,
                    data={
                        "code": code,
                        "client_id": self.client_id,
                        "client_secret": self.client_secret,
                        "redirect_uri": self.redirect_uri,
                        "grant_type": "authorization_code",
                    },
                )
                token_resp.raise_for_status()
                access_token = token_resp.json()["access_token"]

                info_resp = client.get(GOOGLE_USERINFO_URL, headers={"Authorization": f"Bearer {access_token}"})
                info_resp.raise_for_status()
                info = info_resp.json()
        except (httpx.HTTPError, KeyError, ValueError) as exc:
            logger.warning("Google OAuth exchange failed: %s", exc)
            raise OAuthFailed(errors=["oauth_failed"]) from exc

        if not info.get("sub") or not info.get("email"):
            logger.warning("Google OAuth profile missing sub/email")
            raise OAuthFailed(errors=["oauth_failed"])
        return OAuthIdentity(
            id=str(info["sub"]),
            email=info["email"],
            name=info.get("name") or "",
            avatar=info.get("picture"),
        )


def get_oauth_client() -> GoogleOAuthClient:
    """FastAPI dependency; tests override it with a fake provider."""
    return GoogleOAuthClient(
        client_id=settings.google_client_id,
        client_secret=settings.google_client_secret,
        redirect_uri=settings.google_callback_url,
        timeout=settings.http_request_timeout,
    )
