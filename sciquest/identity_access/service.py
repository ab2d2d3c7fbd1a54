"""
Identity flows: sign-in, sign-up, Google sign-in, password reset, the student
wizard sign-up and the profile page.

Why:
    Routes stay thin. Each flow validates input before any network call, runs
    one sequence of gateway calls against a per-request `SupabaseService`, and
    returns a `FlowResult` the web layer renders (banner, redirect, cookies).

Behavior:
    - No retries. Service errors become `Failure` values with user messages.
    - Tokens from a successful authentication are returned to the caller,
      which keeps them in the server-side session store.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional

import structlog

from .domain import AccountType, AUTH_PATH, AVATAR_SELECTION_PATH, INDEX_PATH
from .errors import (
    ALREADY_REGISTERED_STUDENT,
    auth_error_message,
    is_already_registered,
    student_signup_error_message,
)
from .outcomes import Failure, FailureReason, Notice, Outcome, Redirect
from .profiles import build_profile_update, display_name, ensure_profile
from .resolution import resolve_destination
from .supabase_client import SupabaseService
from .validation import ValidationError, validate_credentials
from .wizard import StudentSignup

logger = structlog.get_logger()

SIGNUP_SUCCESS_MESSAGE = "Account created successfully! Redirecting..."
STUDENT_SIGNUP_SUCCESS_MESSAGE = "Account created successfully! Redirecting to avatar selection..."
GOOGLE_NOT_FOR_STUDENTS_MESSAGE = "Google sign-in is not available for student accounts. Please use email and password."
GOOGLE_FAILED_MESSAGE = "Failed to sign in with Google. Please try again."
RESET_SENT_MESSAGE = "Password reset email sent! Check your inbox."
RESET_FAILED_MESSAGE = "Failed to send reset email. Please try again."
PROFILE_LOAD_FAILED_MESSAGE = "Failed to load profile data"
PROFILE_SAVED_MESSAGE = "Profile updated successfully!"
PROFILE_SAVE_FAILED_MESSAGE = "Failed to update profile. Please try again."


@dataclass(frozen=True)
class SessionTokens:
    user_id: str
    email: str
    access_token: str
    refresh_token: str


@dataclass(frozen=True)
class FlowResult:
    """What a flow asks the web layer to do.

    `switch_to_login` re-renders the auth form in login mode. `clear_hint`
    drops the persisted account-type hint. `signup_flags` are cookies for the
    avatar-selection step.
    """

    outcome: Outcome
    tokens: Optional[SessionTokens] = None
    switch_to_login: bool = False
    clear_hint: bool = False
    signup_flags: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ProfileView:
    """Data for rendering the profile form."""

    profile: Mapping[str, Any]
    email: str
    account_type: Optional[AccountType]

    @property
    def is_student(self) -> bool:
        return self.account_type is AccountType.STUDENT

    @property
    def name(self) -> str:
        return display_name(self.profile, self.email)


def _tokens(user: Any, session: Any, email: str) -> Optional[SessionTokens]:
    access = getattr(session, "access_token", None)
    refresh = getattr(session, "refresh_token", None)
    if not user or not access or not refresh:
        return None
    return SessionTokens(
        user_id=str(user.id),
        email=getattr(user, "email", None) or email,
        access_token=access,
        refresh_token=refresh,
    )


class AuthFlows:
    def __init__(
        self,
        service: SupabaseService,
        *,
        site_url: str,
        clock: Callable[[], float] = time.time,
    ):
        self.service = service
        self.site_url = site_url.rstrip("/")
        self._clock = clock

    # --- Auth page ------------------------------------------------------------------

    def sign_in(self, email: Optional[str], password: Optional[str], hint: Optional[AccountType]) -> FlowResult:
        try:
            email, password = validate_credentials(email, password)
        except ValidationError as exc:
            return FlowResult(outcome=Failure(str(exc), FailureReason.VALIDATION))

        logger.info("login_attempt", email=email, hint=hint.value if hint else None)
        auth = self.service.sign_in(email, password)
        if auth.error is not None:
            return FlowResult(outcome=Failure(auth_error_message(auth.error.message), FailureReason.AUTHENTICATION))

        user_id = str(auth.user.id)
        read = self.service.read_profile(user_id)
        outcome = resolve_destination(read, hint, user_id=user_id, clock=self._clock)

        if read.error is None and read.row is None:
            # Late profile creation; failures are logged, never shown.
            error = ensure_profile(
                self.service,
                user_id=user_id,
                email=getattr(auth.user, "email", None) or email,
                account_type=hint or AccountType.STUDENT,
            )
            if error is not None:
                logger.error(
                    "profile_create_after_login_failed",
                    user_id=user_id,
                    code=error.code,
                    access_policy=error.is_access_policy,
                )

        return FlowResult(outcome=outcome, tokens=_tokens(auth.user, auth.session, email))

    def sign_up(self, email: Optional[str], password: Optional[str], hint: Optional[AccountType]) -> FlowResult:
        try:
            email, password = validate_credentials(email, password)
        except ValidationError as exc:
            return FlowResult(outcome=Failure(str(exc), FailureReason.VALIDATION))

        chosen = hint or AccountType.STUDENT
        auth = self.service.sign_up(email, password)
        if auth.error is not None:
            return FlowResult(
                outcome=Failure(auth_error_message(auth.error.message), FailureReason.AUTHENTICATION),
                switch_to_login=is_already_registered(auth.error.message),
            )

        error = ensure_profile(self.service, user_id=str(auth.user.id), email=email, account_type=chosen)
        if error is not None:
            return FlowResult(outcome=Failure(auth_error_message(error.message), FailureReason.SERVICE))

        logger.info("signup_completed", user_id=str(auth.user.id), account_type=chosen.value)
        return FlowResult(
            outcome=Redirect(target=chosen.dashboard, message=SIGNUP_SUCCESS_MESSAGE),
            tokens=_tokens(auth.user, auth.session, email),
            clear_hint=True,
        )

    def google_sign_in(self, hint: Optional[AccountType]) -> FlowResult:
        if hint is AccountType.STUDENT:
            logger.info("google_sign_in_refused_for_student")
            return FlowResult(outcome=Failure(GOOGLE_NOT_FOR_STUDENTS_MESSAGE, FailureReason.OAUTH_NOT_ALLOWED))

        result = self.service.sign_in_with_oauth(
            "google",
            redirect_to=f"{self.site_url}{INDEX_PATH}",
            query_params={"prompt": "select_account"},
        )
        if result.error is not None:
            return FlowResult(outcome=Failure(GOOGLE_FAILED_MESSAGE, FailureReason.SERVICE))
        return FlowResult(outcome=Redirect(target=result.url, delayed=False))

    def request_password_reset(self, email: Optional[str]) -> FlowResult:
        email = (email or "").strip()
        if not email:
            return FlowResult(outcome=Failure("Please enter your email address", FailureReason.VALIDATION))
        error = self.service.reset_password_for_email(email, redirect_to=f"{self.site_url}{AUTH_PATH}")
        if error is not None:
            return FlowResult(outcome=Failure(error.message or RESET_FAILED_MESSAGE, FailureReason.SERVICE))
        return FlowResult(outcome=Notice(RESET_SENT_MESSAGE))

    # --- Student wizard -------------------------------------------------------------

    def student_signup(self, signup: StudentSignup) -> FlowResult:
        """Create a student identity and profile from validated wizard input."""
        if not self.service.check_email_availability(signup.email):
            return FlowResult(outcome=Failure(ALREADY_REGISTERED_STUDENT, FailureReason.VALIDATION))

        parent_id = None
        parent = self.service.find_parent_by_email(signup.parent_email)
        if parent.error is not None:
            logger.warning("parent_lookup_failed", code=parent.error.code, error=parent.error.message)
        elif parent.row:
            parent_id = parent.row.get("id")

        auth = self.service.sign_up(
            signup.email,
            signup.password,
            metadata={"account_type": AccountType.STUDENT.value, "first_name": signup.first_name},
        )
        if auth.error is not None:
            return FlowResult(
                outcome=Failure(student_signup_error_message(auth.error.message), FailureReason.AUTHENTICATION)
            )

        extra: Dict[str, Any] = {
            "first_name": signup.first_name,
            "age": signup.age,
            "parent_email": signup.parent_email,
        }
        if parent_id:
            extra["parent_id"] = parent_id
        error = ensure_profile(
            self.service,
            user_id=str(auth.user.id),
            email=signup.email,
            account_type=AccountType.STUDENT,
            extra=extra,
        )
        if error is not None:
            return FlowResult(outcome=Failure(student_signup_error_message(error.message), FailureReason.SERVICE))

        logger.info("student_signup_completed", user_id=str(auth.user.id), linked_parent=bool(parent_id))
        return FlowResult(
            outcome=Redirect(target=AVATAR_SELECTION_PATH, message=STUDENT_SIGNUP_SUCCESS_MESSAGE),
            tokens=_tokens(auth.user, auth.session, signup.email),
            signup_flags={"new_student_signup": "true", "student_email": signup.email},
        )

    # --- Profile page ---------------------------------------------------------------

    def restore(self, access_token: str, refresh_token: str) -> Optional[SessionTokens]:
        """Load stored tokens into the client and confirm the session is live."""
        restored = self.service.restore_session(access_token, refresh_token)
        if restored.error is not None:
            return None
        if not self.service.get_session():
            return None
        return _tokens(restored.user, restored.session, getattr(restored.user, "email", "") or "")

    def load_profile(self, user_id: str, email: str) -> ProfileView | Outcome:
        """Return the view data, or the redirect/failure to show instead.

        Any existing row that is not a student profile leaves for the index
        page. A missing row renders an empty form without the student fields.
        """
        read = self.service.read_profile(user_id)
        if read.error is not None:
            return Failure(PROFILE_LOAD_FAILED_MESSAGE, FailureReason.PROFILE_UNAVAILABLE)
        row = read.row or {}
        account_type = AccountType.from_stored(row.get("account_type"))
        if read.row is not None and account_type is not AccountType.STUDENT:
            logger.info("profile_page_not_student", user_id=user_id, account_type=row.get("account_type"))
            return Redirect(target=INDEX_PATH, delayed=False)
        return ProfileView(profile=row, email=email, account_type=account_type)

    def save_profile(
        self, user_id: Optional[str], form: Mapping[str, Optional[str]], *, is_student: bool
    ) -> Outcome:
        try:
            fields = build_profile_update(form, is_student=is_student)
        except ValidationError as exc:
            return Failure(str(exc), FailureReason.VALIDATION)
        if not user_id:
            return Failure(PROFILE_SAVE_FAILED_MESSAGE, FailureReason.AUTHENTICATION)
        error = self.service.update_profile(user_id, fields)
        if error is not None:
            if error.is_access_policy:
                return Failure(PROFILE_SAVE_FAILED_MESSAGE, FailureReason.ACCESS_POLICY)
            return Failure(PROFILE_SAVE_FAILED_MESSAGE, FailureReason.SERVICE)
        logger.info("profile_updated", user_id=user_id, fields=sorted(fields))
        return Notice(PROFILE_SAVED_MESSAGE)

    def sign_out(self) -> None:
        """Best effort; the local session is dropped regardless."""
        self.service.sign_out()


__all__ = [
    "AuthFlows",
    "FlowResult",
    "ProfileView",
    "SessionTokens",
    "SIGNUP_SUCCESS_MESSAGE",
    "STUDENT_SIGNUP_SUCCESS_MESSAGE",
    "GOOGLE_NOT_FOR_STUDENTS_MESSAGE",
    "GOOGLE_FAILED_MESSAGE",
    "RESET_SENT_MESSAGE",
    "RESET_FAILED_MESSAGE",
    "PROFILE_LOAD_FAILED_MESSAGE",
    "PROFILE_SAVED_MESSAGE",
    "PROFILE_SAVE_FAILED_MESSAGE",
]
