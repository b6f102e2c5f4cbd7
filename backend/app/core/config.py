"""
Application configuration settings.
Loads from .env file first (overrides shell env for local dev), then pydantic reads from environment.
Production: set env vars in the platform (Docker, K8s, etc.); .env is optional.

All backend-related configs and constants are centralized here.
"""
from pathlib import Path

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env path: backend/.env (absolute path, works regardless of cwd)
_BASE_DIR = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = (_BASE_DIR / ".env").resolve()

# Load .env into environment BEFORE pydantic reads. override=True ensures .env
# values override any shell env. When .env doesn't exist (prod), this is a no-op.
if _ENV_FILE.exists():
    load_dotenv(_ENV_FILE, override=True)


class Settings(BaseSettings):
    """Application settings. Source: env vars (after dotenv load)."""

    # App
    app_name: str = "Resume Management System"
    app_version: str = "1.0.0"
    environment: str = "development"
    port: int = 3000
    cors_origins: list[str] = ["*"]

    # Database
    database_url: str = "sqlite:///./resumes.db"

    # Auth
    secret_key: str = "your-secret-key-change-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    auth_cookie_name: str = "authToken"
    bcrypt_rounds: int = 12

    # Google OAuth
    google_client_id: str = ""
    google_client_secret: str = ""
    google_callback_url: str = "http://localhost:3000/api/auth/google/callback"
    oauth_success_redirect: str = "/"

    # HTTP / network
    http_request_timeout: int = 30

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE) if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


settings = Settings()


# --- Constants (non-env, business config) ---

# Google OAuth 2.0 endpoints
GOOGLE_AUTHORIZE_URL: str = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL: str = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL: str = "https://openidconnect.googleapis.com/v1/userinfo"
GOOGLE_SCOPES: tuple[str, ...] = ("openid", "profile", "email")

# User-Agent substrings treated as an interactive browser on the OAuth callback
BROWSER_USER_AGENT_TOKENS: tuple[str, ...] = ("Mozilla", "Chrome", "Safari", "Firefox")

# Roles
ROLE_USER: str = "USER"
ROLE_ADMIN: str = "ADMIN"
