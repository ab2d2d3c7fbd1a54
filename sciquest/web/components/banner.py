"""
Message banners.

A success banner that leads somewhere carries a refresh meta tag so the
browser navigates after the configured delay. Error banners persist.
"""

from typing import Optional, Union

from sciquest.identity_access.outcomes import Failure, Notice, Outcome, Redirect

from .base import Component


class Banner(Component):
    def __init__(self, message: str, *, kind: str = "error"):
        self.message = message
        self.kind = kind

    def render(self) -> str:
        role = "alert" if self.kind == "error" else "status"
        attrs = self.attributes(
            class_=self.classes("message", f"message-{self.kind}", show=True),
            role=role,
            data_kind=self.kind,
        )
        return f"<div {attrs}>{self.escape(self.message)}</div>"


class RefreshMeta(Component):
    """`<meta http-equiv="refresh">` pointing at `target` after `delay` seconds."""

    def __init__(self, target: str, delay: float):
        self.target = target
        self.delay = delay

    def render(self) -> str:
        content = f"{self.delay:g};url={self.target}"
        return f'<meta http-equiv="refresh" content="{self.escape(content)}">'


def banner_for(outcome: Optional[Union[Outcome, str]]) -> str:
    """Render the banner for a flow outcome (a plain string is an error)."""
    if outcome is None:
        return ""
    if isinstance(outcome, str):
        return Banner(outcome).render()
    if isinstance(outcome, Failure):
        return Banner(outcome.message).render()
    if isinstance(outcome, (Notice, Redirect)) and outcome.message:
        return Banner(outcome.message, kind="success").render()
    return ""
