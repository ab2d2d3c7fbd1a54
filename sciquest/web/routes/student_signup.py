"""
Student sign-up wizard routes.

GET starts a fresh wizard (panel 1). Each POST loads the wizard state by its
cookie, applies one pure transition from `identity_access.wizard`, stores the
new state and renders the resulting panel. A completed panel 2 runs the
student sign-up flow.
"""
from __future__ import annotations

from typing import Optional
from urllib.parse import quote

import structlog
from fastapi import APIRouter, Depends, Form, Request
from starlette.responses import Response

from sciquest.identity_access import wizard
from sciquest.identity_access.outcomes import Failure, Outcome, Redirect
from sciquest.identity_access.service import AuthFlows
from sciquest.identity_access.stores import SessionStore, WizardStore
from sciquest.identity_access.wizard import Panel, WizardState

from ..components import StudentSignupWizard, banner_for
from ..config import Settings
from ..dependencies import (
    WIZARD_COOKIE_NAME,
    get_flows,
    get_session_store,
    get_settings,
    get_wizard_store,
    set_session_cookie,
)
from ..pages import html_page, status_for
from ..security import CSRF_FAILED_MESSAGE, csrf_token_for, csrf_valid, set_csrf_cookie

logger = structlog.get_logger()

student_signup_router = APIRouter(prefix="/auth/student-signup", tags=["student-signup"])


def _wizard_page(
    request: Request,
    cfg: Settings,
    wizard_id: Optional[str],
    state: WizardState,
    *,
    outcome: Optional[Outcome] = None,
    captcha_value: Optional[str] = "",
    status_code: Optional[int] = None,
) -> Response:
    csrf = csrf_token_for(request)
    body = StudentSignupWizard(
        csrf_token=csrf,
        state=state,
        banner_html=banner_for(outcome),
        captcha_value=captcha_value,
    ).render()
    response = html_page(
        "Student Sign Up",
        body,
        status_code=status_code or status_for(outcome),
        refresh=outcome if isinstance(outcome, Redirect) else None,
        delay=cfg.REDIRECT_DELAY_SECONDS,
    )
    set_csrf_cookie(response, csrf, secure=cfg.COOKIE_SECURE)
    if wizard_id is None:
        response.delete_cookie(WIZARD_COOKIE_NAME, path="/auth/student-signup")
        return response
    response.set_cookie(
        key=WIZARD_COOKIE_NAME,
        value=wizard_id,
        httponly=True,
        secure=cfg.COOKIE_SECURE,
        samesite="strict",
        max_age=cfg.WIZARD_TIMEOUT_MINUTES * 60,
        path="/auth/student-signup",
    )
    return response


def _load(request: Request, store: WizardStore) -> tuple[str, WizardState]:
    """Return the wizard id and state; an unknown or expired id starts over."""
    wizard_id = request.cookies.get(WIZARD_COOKIE_NAME)
    state = store.get(wizard_id)
    if wizard_id and state is not None:
        return wizard_id, state
    state = wizard.start()
    return store.start(state), state


def _csrf_rejected(request: Request, cfg: Settings, wizard_id: str, state: WizardState) -> Response:
    logger.warning("csrf_validation_failed", path=request.url.path)
    return _wizard_page(request, cfg, wizard_id, state, outcome=Failure(CSRF_FAILED_MESSAGE), status_code=403)


@student_signup_router.get("")
def start_wizard(
    request: Request,
    store: WizardStore = Depends(get_wizard_store),
    cfg: Settings = Depends(get_settings),
):
    # Loading the page always starts over.
    store.delete(request.cookies.get(WIZARD_COOKIE_NAME))
    state = wizard.start()
    return _wizard_page(request, cfg, store.start(state), state)


@student_signup_router.post("/panel1")
def submit_panel1(
    request: Request,
    age: Optional[str] = Form(None),
    parent_email: Optional[str] = Form(None),
    csrf_token: Optional[str] = Form(None),
    store: WizardStore = Depends(get_wizard_store),
    cfg: Settings = Depends(get_settings),
):
    wizard_id, state = _load(request, store)
    if not csrf_valid(request, csrf_token):
        return _csrf_rejected(request, cfg, wizard_id, state)

    step = wizard.submit_panel1(state, {"age": age, "parent_email": parent_email})
    store.save(wizard_id, step.state)
    outcome = Failure(step.error) if step.error else None
    return _wizard_page(request, cfg, wizard_id, step.state, outcome=outcome)


@student_signup_router.post("/back")
def go_back(
    request: Request,
    csrf_token: Optional[str] = Form(None),
    store: WizardStore = Depends(get_wizard_store),
    cfg: Settings = Depends(get_settings),
):
    wizard_id, state = _load(request, store)
    if not csrf_valid(request, csrf_token):
        return _csrf_rejected(request, cfg, wizard_id, state)

    step = wizard.back(state)
    store.save(wizard_id, step.state)
    return _wizard_page(request, cfg, wizard_id, step.state)


@student_signup_router.post("/panel2")
def submit_panel2(
    request: Request,
    first_name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    captcha: Optional[str] = Form(None),
    csrf_token: Optional[str] = Form(None),
    flows: AuthFlows = Depends(get_flows),
    store: WizardStore = Depends(get_wizard_store),
    sessions: SessionStore = Depends(get_session_store),
    cfg: Settings = Depends(get_settings),
):
    wizard_id, state = _load(request, store)
    if not csrf_valid(request, csrf_token):
        return _csrf_rejected(request, cfg, wizard_id, state)

    form = {"first_name": first_name, "email": email, "password": password, "captcha": captcha}
    step = wizard.submit_panel2(state, form)
    store.save(wizard_id, step.state)
    if step.state.panel is Panel.PANEL1:
        return _wizard_page(request, cfg, wizard_id, step.state)
    if not step.ready:
        return _wizard_page(
            request,
            cfg,
            wizard_id,
            step.state,
            outcome=Failure(step.error or ""),
            captcha_value="" if step.captcha_cleared else captcha,
        )

    result = flows.student_signup(step.signup)
    if isinstance(result.outcome, Failure):
        return _wizard_page(request, cfg, wizard_id, step.state, outcome=result.outcome, captcha_value=captcha)

    store.delete(wizard_id)
    response = _wizard_page(request, cfg, None, step.state, outcome=result.outcome)
    for name, value in result.signup_flags.items():
        # URL-encoded; read by the avatar-selection page script.
        response.set_cookie(
            key=name,
            value=quote(value, safe=""),
            httponly=False,
            secure=cfg.COOKIE_SECURE,
            samesite=cfg.COOKIE_SAMESITE,
            path="/",
        )
    if result.tokens is not None:
        rec = sessions.create(
            user_id=result.tokens.user_id,
            email=result.tokens.email,
            access_token=result.tokens.access_token,
            refresh_token=result.tokens.refresh_token,
            ttl_seconds=cfg.SESSION_TIMEOUT_MINUTES * 60,
        )
        set_session_cookie(response, rec.session_id, cfg)
    return response
