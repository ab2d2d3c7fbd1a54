"""
FastAPI dependencies and cookie helpers shared by the routers.

`get_supabase_service` builds a fresh client per request; tests replace it via
`app.dependency_overrides` with a service around a fake client.
"""
from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request
from starlette.responses import Response

from sciquest.identity_access.domain import AccountType
from sciquest.identity_access.service import AuthFlows
from sciquest.identity_access.stores import SessionStore, WizardStore
from sciquest.identity_access.supabase_client import SupabaseService, create_supabase_client

from .config import Settings, settings

HINT_COOKIE_NAME = "account_type"
WIZARD_COOKIE_NAME = "sciquest_signup"
SIGNUP_FLAG_COOKIES = ("new_student_signup", "student_email")

SESSION_STORE = SessionStore()
WIZARD_STORE = WizardStore(ttl_seconds=settings.WIZARD_TIMEOUT_MINUTES * 60)


def get_settings() -> Settings:
    return settings


def get_session_store() -> SessionStore:
    return SESSION_STORE


def get_wizard_store() -> WizardStore:
    return WIZARD_STORE


def get_supabase_service(cfg: Settings = Depends(get_settings)) -> SupabaseService:
    client = create_supabase_client(
        cfg.SUPABASE_URL,
        cfg.SUPABASE_ANON_KEY,
        timeout_seconds=cfg.SUPABASE_TIMEOUT_SECONDS,
    )
    return SupabaseService(client)


def get_flows(
    service: SupabaseService = Depends(get_supabase_service),
    cfg: Settings = Depends(get_settings),
) -> AuthFlows:
    return AuthFlows(service, site_url=cfg.SITE_URL)


def account_type_hint(request: Request, explicit: Optional[str] = None) -> Optional[AccountType]:
    """Hint from the form/query `type` value, else the persisted cookie.

    A non-empty explicit value wins even when it is not a known category, in
    which case the hint is unset.
    """
    if explicit:
        return AccountType.from_hint(explicit)
    return AccountType.from_hint(request.cookies.get(HINT_COOKIE_NAME))


def persist_hint(response: Response, hint: AccountType, cfg: Settings) -> None:
    response.set_cookie(
        key=HINT_COOKIE_NAME,
        value=hint.value,
        httponly=True,
        secure=cfg.COOKIE_SECURE,
        samesite=cfg.COOKIE_SAMESITE,
        max_age=30 * 24 * 3600,
        path="/",
    )


def clear_hint(response: Response) -> None:
    response.delete_cookie(HINT_COOKIE_NAME, path="/")


def set_session_cookie(response: Response, session_id: str, cfg: Settings) -> None:
    response.set_cookie(value=session_id, **cfg.get_cookie_settings())


def clear_session_cookie(response: Response, cfg: Settings) -> None:
    response.delete_cookie(cfg.COOKIE_NAME, path="/")
