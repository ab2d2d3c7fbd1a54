"""
Student sign-up wizard: a two-panel state machine.

Panel 1 collects age and parent email, panel 2 collects first name, email,
password and the CAPTCHA answer. Transitions are pure functions over an
explicit `WizardState`; the web layer stores the state between requests and
performs the actual sign-up once `submit_panel2` reports `ready`.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Mapping, Optional

from .validation import (
    CAPTCHA_QUESTION,
    ValidationError,
    check_captcha,
    validate_email,
    validate_password,
    validate_signup_age,
)

CAPTCHA_FAILED_MESSAGE = f"Incorrect answer. Please try again. {CAPTCHA_QUESTION}"


class Panel(str, Enum):
    PANEL1 = "panel1"
    PANEL2 = "panel2"


@dataclass(frozen=True)
class WizardState:
    panel: Panel = Panel.PANEL1
    age: Optional[int] = None
    parent_email: str = ""
    first_name: str = ""
    email: str = ""


@dataclass(frozen=True)
class StudentSignup:
    """Validated wizard input, ready for account creation."""

    email: str
    password: str
    first_name: str
    age: int
    parent_email: str


@dataclass(frozen=True)
class Step:
    """Result of one transition.

    `error` is shown on the panel of `state`. `captcha_cleared` asks the view
    to render an empty CAPTCHA input. `signup` is set only when panel 2 passed
    every check.
    """

    state: WizardState
    error: Optional[str] = None
    captcha_cleared: bool = False
    signup: Optional[StudentSignup] = None

    @property
    def ready(self) -> bool:
        return self.signup is not None


def start() -> WizardState:
    return WizardState()


def submit_panel1(state: WizardState, form: Mapping[str, Optional[str]]) -> Step:
    raw_parent = (form.get("parent_email") or "").strip()
    raw_age = form.get("age")
    # Keep what was entered so a failed submit re-renders the same values.
    keep = replace(state, panel=Panel.PANEL1, parent_email=raw_parent)
    try:
        age = validate_signup_age(raw_age)
        parent_email = validate_email(raw_parent, missing="Please enter your parent's email")
    except ValidationError as exc:
        return Step(state=keep, error=str(exc))
    return Step(state=replace(state, panel=Panel.PANEL2, age=age, parent_email=parent_email))


def back(state: WizardState) -> Step:
    return Step(state=replace(state, panel=Panel.PANEL1))


def submit_panel2(state: WizardState, form: Mapping[str, Optional[str]]) -> Step:
    """Validate panel 2. Panel 1 data must already be present."""
    if state.panel is not Panel.PANEL2 or state.age is None or not state.parent_email:
        return Step(state=replace(state, panel=Panel.PANEL1))

    first_name = (form.get("first_name") or "").strip()
    email = (form.get("email") or "").strip()
    current = replace(state, first_name=first_name, email=email)

    if not first_name:
        return Step(state=current, error="Please enter your first name")
    try:
        email = validate_email(email)
        password = validate_password(form.get("password"))
    except ValidationError as exc:
        return Step(state=current, error=str(exc))

    if not check_captcha(form.get("captcha")):
        return Step(state=current, error=CAPTCHA_FAILED_MESSAGE, captcha_cleared=True)

    signup = StudentSignup(
        email=email,
        password=password,
        first_name=first_name,
        age=state.age,
        parent_email=state.parent_email,
    )
    return Step(state=current, signup=signup)


__all__ = [
    "CAPTCHA_FAILED_MESSAGE",
    "Panel",
    "WizardState",
    "StudentSignup",
    "Step",
    "start",
    "submit_panel1",
    "back",
    "submit_panel2",
]
