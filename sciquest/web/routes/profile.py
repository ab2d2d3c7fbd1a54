"""
Profile page routes.

Both routes need a live web session: the stored tokens are restored into the
per-request service client and confirmed by a session lookup, so profile
reads and writes run as the signed-in user (row level security).
"""
from __future__ import annotations

from typing import Any, Mapping, Optional

import structlog
from fastapi import APIRouter, Depends, Form, Request
from starlette.responses import Response

from sciquest.identity_access.domain import AUTH_PATH
from sciquest.identity_access.outcomes import Failure, FailureReason, Notice, Outcome, Redirect
from sciquest.identity_access.service import PROFILE_SAVE_FAILED_MESSAGE, AuthFlows, ProfileView
from sciquest.identity_access.stores import SessionRecord, SessionStore

from ..components import Banner, ProfileForm, banner_for
from ..config import Settings
from ..dependencies import clear_session_cookie, get_flows, get_session_store, get_settings
from ..pages import html_page, see_other, status_for
from ..security import CSRF_FAILED_MESSAGE, csrf_token_for, csrf_valid, set_csrf_cookie

logger = structlog.get_logger()

profile_router = APIRouter(tags=["profile"])


def _active_session(request: Request, flows: AuthFlows, store: SessionStore, cfg: Settings) -> Optional[SessionRecord]:
    sid = request.cookies.get(cfg.COOKIE_NAME)
    rec = store.get(sid)
    if rec is None:
        return None
    tokens = flows.restore(rec.access_token, rec.refresh_token)
    if tokens is None:
        logger.info("web_session_expired", user_id=rec.user_id)
        store.delete(sid)
        return None
    if tokens.access_token != rec.access_token:
        store.update_tokens(rec.session_id, access_token=tokens.access_token, refresh_token=tokens.refresh_token)
    return rec


def _profile_page(
    request: Request,
    cfg: Settings,
    view: ProfileView,
    *,
    outcome: Optional[Outcome] = None,
    values: Optional[Mapping[str, Any]] = None,
) -> Response:
    csrf = csrf_token_for(request)
    body = ProfileForm(
        csrf_token=csrf,
        profile=view.profile,
        display_name=view.name,
        account_type=view.account_type,
        is_student=view.is_student,
        banner_html=banner_for(outcome),
        values=values,
    ).render()
    response = html_page("My Profile", body, status_code=status_for(outcome))
    set_csrf_cookie(response, csrf, secure=cfg.COOKIE_SECURE)
    return response


def _message_page(outcome: Failure) -> Response:
    body = (
        '<section class="profile-card">'
        f"{Banner(outcome.message).render()}"
        f'<p><a href="{AUTH_PATH}">Back to login</a></p>'
        "</section>"
    )
    return html_page("My Profile", body, status_code=outcome.status_code)


def _render_loaded(request: Request, cfg: Settings, loaded, **kwargs) -> Response:
    if isinstance(loaded, Redirect):
        return see_other(loaded.target)
    if isinstance(loaded, Failure):
        return _message_page(loaded)
    return _profile_page(request, cfg, loaded, **kwargs)


@profile_router.get("/profile")
def profile_page(
    request: Request,
    flows: AuthFlows = Depends(get_flows),
    store: SessionStore = Depends(get_session_store),
    cfg: Settings = Depends(get_settings),
):
    rec = _active_session(request, flows, store, cfg)
    if rec is None:
        response = see_other(AUTH_PATH)
        clear_session_cookie(response, cfg)
        return response
    return _render_loaded(request, cfg, flows.load_profile(rec.user_id, rec.email))


@profile_router.post("/profile")
def save_profile(
    request: Request,
    first_name: Optional[str] = Form(None),
    full_name: Optional[str] = Form(None),
    age: Optional[str] = Form(None),
    parent_email: Optional[str] = Form(None),
    csrf_token: Optional[str] = Form(None),
    flows: AuthFlows = Depends(get_flows),
    store: SessionStore = Depends(get_session_store),
    cfg: Settings = Depends(get_settings),
):
    if not csrf_valid(request, csrf_token):
        logger.warning("csrf_validation_failed", path=request.url.path)
        return _message_page(Failure(CSRF_FAILED_MESSAGE, FailureReason.ACCESS_POLICY))

    rec = _active_session(request, flows, store, cfg)
    if rec is None:
        return _message_page(Failure(PROFILE_SAVE_FAILED_MESSAGE, FailureReason.AUTHENTICATION))

    loaded = flows.load_profile(rec.user_id, rec.email)
    if not isinstance(loaded, ProfileView):
        return _render_loaded(request, cfg, loaded)

    form = {"first_name": first_name, "full_name": full_name, "age": age, "parent_email": parent_email}
    outcome = flows.save_profile(rec.user_id, form, is_student=loaded.is_student)
    if isinstance(outcome, Notice):
        # Re-read so the header and fields show what was stored.
        return _render_loaded(request, cfg, flows.load_profile(rec.user_id, rec.email), outcome=outcome)
    return _profile_page(request, cfg, loaded, outcome=outcome, values=form)
