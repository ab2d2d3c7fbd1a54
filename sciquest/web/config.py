"""
Configuration and startup security checks for SciQuest Heroes auth.

Why: Keep every tunable (hosted service credentials, cookie policy, redirect
delay, timeouts) in one validated settings object, and refuse obviously
insecure production deployments without burdening local development.
"""
from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings, read from the environment and `.env`."""

    ENVIRONMENT: str = "development"

    # Hosted identity/database service (anon key only; row level security applies)
    SUPABASE_URL: str = ""
    SUPABASE_ANON_KEY: str = ""
    SUPABASE_TIMEOUT_SECONDS: int = 30

    # Public origin used for OAuth and password-reset redirect targets
    SITE_URL: str = "http://localhost:8000"

    # Delay before navigating after a success banner
    REDIRECT_DELAY_SECONDS: float = 1.5

    # Cookies
    COOKIE_NAME: str = "sciquest_session"
    COOKIE_SECURE: bool = False
    COOKIE_SAMESITE: str = "lax"
    SESSION_TIMEOUT_MINUTES: int = 90
    WIZARD_TIMEOUT_MINUTES: int = 30

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore")

    @property
    def is_production(self) -> bool:
        return _is_prod_like(self.ENVIRONMENT)

    def get_cookie_settings(self) -> dict:
        """Flags for the opaque session cookie."""
        return {
            "key": self.COOKIE_NAME,
            "max_age": self.SESSION_TIMEOUT_MINUTES * 60,
            "httponly": True,
            "secure": self.COOKIE_SECURE,
            "samesite": self.COOKIE_SAMESITE,
            "path": "/",
        }


def _is_prod_like(env: str) -> bool:
    env_l = (env or "").lower()
    return env_l in {"prod", "production", "stage", "staging"}


def ensure_secure_config_on_startup(cfg: Settings) -> None:
    """Fail fast on insecure production configuration.

    Checks (production/staging only):
    - Supabase URL and anon key must be set.
    - Session cookies must be Secure.
    - SITE_URL must use https, since it becomes the OAuth and reset target.
    """
    if not cfg.is_production:
        return

    if not cfg.SUPABASE_URL.strip() or not cfg.SUPABASE_ANON_KEY.strip():
        raise SystemExit("Refusing to start: SUPABASE_URL and SUPABASE_ANON_KEY must be set in production.")
    if not cfg.COOKIE_SECURE:
        raise SystemExit("Refusing to start: COOKIE_SECURE must be true in production.")
    if cfg.SITE_URL.strip().lower().startswith("http://"):
        raise SystemExit("Refusing to start: SITE_URL must use https in production (got http).")


settings = Settings()
