"""
Turn flow outcomes into HTML responses.

Why:
    Every router answers the same way: failures render the page again with a
    persistent error banner and a 4xx status, delayed redirects render a
    success banner plus a refresh meta tag, immediate redirects answer 303.
"""
from __future__ import annotations

from typing import Optional

from fastapi.responses import HTMLResponse, RedirectResponse

from sciquest.identity_access.outcomes import Failure, Outcome, Redirect

from .components import Layout, RefreshMeta


def html_page(
    title: str,
    body: str,
    *,
    status_code: int = 200,
    refresh: Optional[Redirect] = None,
    delay: float = 1.5,
) -> HTMLResponse:
    head_extra = RefreshMeta(refresh.target, delay).render() if refresh else None
    return HTMLResponse(Layout(title, body, head_extra=head_extra).render(), status_code=status_code)


def status_for(outcome: Optional[Outcome]) -> int:
    if isinstance(outcome, Failure):
        return outcome.status_code
    return 200


def see_other(target: str) -> RedirectResponse:
    return RedirectResponse(url=target, status_code=303)
