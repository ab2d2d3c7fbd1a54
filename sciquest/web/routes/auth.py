"""
Auth page routes: login, sign-up, Google sign-in, password reset, logout.

Why:
    Server-rendered replacement for the browser auth page. Each POST checks
    the CSRF double-submit token, delegates to `AuthFlows`, and renders the
    result with the auth form so errors stay next to the inputs.

Behavior:
    - Successful authentication stores the hosted service's tokens in the
      server-side session store; the browser gets an opaque HttpOnly cookie.
    - A `type` query parameter on GET /auth is persisted as the hint cookie.
"""
from __future__ import annotations

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Form, Request
from starlette.responses import Response

from sciquest.identity_access.domain import AccountType, AUTH_PATH
from sciquest.identity_access.outcomes import Failure, FailureReason, Redirect
from sciquest.identity_access.service import AuthFlows, FlowResult
from sciquest.identity_access.stores import SessionStore

from ..components import AuthForm, ForgotPasswordForm, banner_for
from ..config import Settings
from ..dependencies import (
    SIGNUP_FLAG_COOKIES,
    account_type_hint,
    clear_hint,
    clear_session_cookie,
    get_flows,
    get_session_store,
    get_settings,
    persist_hint,
    set_session_cookie,
)
from ..pages import html_page, see_other, status_for
from ..security import CSRF_FAILED_MESSAGE, csrf_token_for, csrf_valid, set_csrf_cookie

logger = structlog.get_logger()

auth_router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_page(
    request: Request,
    cfg: Settings,
    *,
    signup_mode: bool,
    hint: Optional[AccountType],
    email: str = "",
    result: Optional[FlowResult] = None,
    failure: Optional[Failure] = None,
) -> Response:
    outcome = failure or (result.outcome if result else None)
    csrf = csrf_token_for(request)
    body = AuthForm(
        csrf_token=csrf,
        signup_mode=signup_mode,
        hint=hint,
        email=email,
        banner_html=banner_for(outcome),
    ).render()
    refresh = outcome if isinstance(outcome, Redirect) else None
    response = html_page(
        "Sign Up" if signup_mode else "Log In",
        body,
        status_code=status_for(outcome),
        refresh=refresh,
        delay=cfg.REDIRECT_DELAY_SECONDS,
    )
    set_csrf_cookie(response, csrf, secure=cfg.COOKIE_SECURE)
    return response


def _start_session(response: Response, result: FlowResult, store: SessionStore, cfg: Settings) -> None:
    if result.tokens is None:
        return
    rec = store.create(
        user_id=result.tokens.user_id,
        email=result.tokens.email,
        access_token=result.tokens.access_token,
        refresh_token=result.tokens.refresh_token,
        ttl_seconds=cfg.SESSION_TIMEOUT_MINUTES * 60,
    )
    set_session_cookie(response, rec.session_id, cfg)


def _csrf_failure() -> Failure:
    return Failure(CSRF_FAILED_MESSAGE, FailureReason.ACCESS_POLICY)


@auth_router.get("")
def auth_page(
    request: Request,
    mode: Optional[str] = None,
    type: Optional[str] = None,
    cfg: Settings = Depends(get_settings),
):
    hint = account_type_hint(request, type)
    response = _auth_page(request, cfg, signup_mode=(mode == "signup"), hint=hint)
    explicit = AccountType.from_hint(type)
    if explicit is not None:
        persist_hint(response, explicit, cfg)
    return response


@auth_router.post("/login")
def login(
    request: Request,
    email: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    type: Optional[str] = Form(None),
    csrf_token: Optional[str] = Form(None),
    flows: AuthFlows = Depends(get_flows),
    store: SessionStore = Depends(get_session_store),
    cfg: Settings = Depends(get_settings),
):
    hint = account_type_hint(request, type)
    if not csrf_valid(request, csrf_token):
        logger.warning("csrf_validation_failed", path=request.url.path)
        return _auth_page(request, cfg, signup_mode=False, hint=hint, email=email or "", failure=_csrf_failure())

    result = flows.sign_in(email, password, hint)
    response = _auth_page(request, cfg, signup_mode=False, hint=hint, email=email or "", result=result)
    _start_session(response, result, store, cfg)
    return response


@auth_router.post("/signup")
def signup(
    request: Request,
    email: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    type: Optional[str] = Form(None),
    csrf_token: Optional[str] = Form(None),
    flows: AuthFlows = Depends(get_flows),
    store: SessionStore = Depends(get_session_store),
    cfg: Settings = Depends(get_settings),
):
    hint = account_type_hint(request, type)
    if not csrf_valid(request, csrf_token):
        logger.warning("csrf_validation_failed", path=request.url.path)
        return _auth_page(request, cfg, signup_mode=True, hint=hint, email=email or "", failure=_csrf_failure())

    result = flows.sign_up(email, password, hint)
    response = _auth_page(
        request,
        cfg,
        signup_mode=not result.switch_to_login,
        hint=hint,
        email=email or "",
        result=result,
    )
    _start_session(response, result, store, cfg)
    if result.clear_hint:
        clear_hint(response)
    return response


@auth_router.post("/google")
def google(
    request: Request,
    type: Optional[str] = Form(None),
    csrf_token: Optional[str] = Form(None),
    flows: AuthFlows = Depends(get_flows),
    cfg: Settings = Depends(get_settings),
):
    hint = account_type_hint(request, type)
    if not csrf_valid(request, csrf_token):
        return _auth_page(request, cfg, signup_mode=False, hint=hint, failure=_csrf_failure())

    result = flows.google_sign_in(hint)
    outcome = result.outcome
    if isinstance(outcome, Redirect) and not outcome.delayed:
        return see_other(outcome.target)
    return _auth_page(request, cfg, signup_mode=False, hint=hint, result=result)


def _forgot_page(request: Request, cfg: Settings, *, email: str = "", outcome=None) -> Response:
    csrf = csrf_token_for(request)
    body = ForgotPasswordForm(csrf_token=csrf, email=email, banner_html=banner_for(outcome)).render()
    response = html_page("Reset Password", body, status_code=status_for(outcome))
    set_csrf_cookie(response, csrf, secure=cfg.COOKIE_SECURE)
    return response


@auth_router.get("/forgot")
def forgot_page(request: Request, email: Optional[str] = None, cfg: Settings = Depends(get_settings)):
    return _forgot_page(request, cfg, email=email or "")


@auth_router.post("/forgot")
def forgot(
    request: Request,
    email: Optional[str] = Form(None),
    csrf_token: Optional[str] = Form(None),
    flows: AuthFlows = Depends(get_flows),
    cfg: Settings = Depends(get_settings),
):
    if not csrf_valid(request, csrf_token):
        return _forgot_page(request, cfg, email=email or "", outcome=_csrf_failure())
    result = flows.request_password_reset(email)
    return _forgot_page(request, cfg, email=email or "", outcome=result.outcome)


@auth_router.post("/logout")
def logout(
    request: Request,
    csrf_token: Optional[str] = Form(None),
    flows: AuthFlows = Depends(get_flows),
    store: SessionStore = Depends(get_session_store),
    cfg: Settings = Depends(get_settings),
):
    if not csrf_valid(request, csrf_token):
        return _auth_page(request, cfg, signup_mode=False, hint=None, failure=_csrf_failure())

    sid = request.cookies.get(cfg.COOKIE_NAME)
    rec = store.get(sid)
    if rec is not None and flows.restore(rec.access_token, rec.refresh_token) is not None:
        flows.sign_out()
    store.delete(sid)
    logger.info("user_logged_out", user_id=rec.user_id if rec else None)

    response = see_other(AUTH_PATH)
    clear_session_cookie(response, cfg)
    clear_hint(response)
    for name in SIGNUP_FLAG_COOKIES:
        response.delete_cookie(name, path="/")
    return response
