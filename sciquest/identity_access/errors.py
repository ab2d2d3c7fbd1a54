"""
Error values returned by the hosted-service gateway and their user messages.

Why:
    The Supabase client raises library-specific exceptions (auth API errors,
    PostgREST API errors, transport errors). The flows only care about a code,
    a message and two classifications: access-policy violations and duplicate
    rows. `ServiceError` captures exactly that, so no flow has to import the
    client library's exception types.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

ACCESS_POLICY_CODE = "42501"
DUPLICATE_KEY_CODE = "23505"
# PostgREST answers "no row" for maybe_single() with one of these, depending on version.
NO_ROW_CODES = frozenset({"204", "PGRST116"})

_ACCESS_POLICY_MARKERS = ("permission denied", "policy", "row-level security")


@dataclass(frozen=True)
class ServiceError:
    message: str
    code: Optional[str] = None
    details: Optional[str] = None
    hint: Optional[str] = None

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ServiceError":
        """Build from any client exception, reading PostgREST-style attributes when present."""
        message = getattr(exc, "message", None) or str(exc) or exc.__class__.__name__
        code = getattr(exc, "code", None)
        return cls(
            message=str(message),
            code=str(code) if code is not None else None,
            details=_optional_str(getattr(exc, "details", None)),
            hint=_optional_str(getattr(exc, "hint", None)),
        )

    @property
    def is_access_policy(self) -> bool:
        """True when the storage layer refused access to a row the caller should own."""
        if self.code == ACCESS_POLICY_CODE:
            return True
        lowered = (self.message or "").lower()
        return any(marker in lowered for marker in _ACCESS_POLICY_MARKERS)

    @property
    def is_duplicate(self) -> bool:
        return self.code == DUPLICATE_KEY_CODE or "duplicate key" in (self.message or "")

    @property
    def is_no_row(self) -> bool:
        return self.code in NO_ROW_CODES


def _optional_str(value: object) -> Optional[str]:
    return str(value) if value is not None else None


def auth_error_message(message: Optional[str]) -> str:
    """Map a sign-in/sign-up error from the auth service to the text shown on the auth page."""
    msg = message or ""
    if "Invalid login credentials" in msg:
        return "Invalid email or password. Please try again."
    if "User already registered" in msg:
        return "This email is already registered. Please log in instead."
    if "Email not confirmed" in msg:
        return "Please check your email to confirm your account."
    if "duplicate key" in msg:
        return "This account already exists. Please log in instead."
    return msg or "An error occurred. Please try again."


def is_already_registered(message: Optional[str]) -> bool:
    return "User already registered" in (message or "")


ALREADY_REGISTERED_STUDENT = (
    "This email is already registered. Please use a different email or try logging in."
)


def student_signup_error_message(message: Optional[str]) -> str:
    """Map a wizard sign-up failure to the text shown on panel 2."""
    msg = message or ""
    lowered = msg.lower()
    if "already registered" in lowered or "already exists" in lowered:
        return ALREADY_REGISTERED_STUDENT
    if "duplicate key" in msg:
        return ALREADY_REGISTERED_STUDENT
    if "violates check constraint" in msg:
        return "Unable to create student account. Please check your information and try again."
    if "email" in lowered and "invalid" in lowered:
        return "Please enter a valid email address."
    return msg or "An error occurred during signup. Please try again."


__all__ = [
    "ServiceError",
    "ACCESS_POLICY_CODE",
    "DUPLICATE_KEY_CODE",
    "NO_ROW_CODES",
    "auth_error_message",
    "is_already_registered",
    "student_signup_error_message",
    "ALREADY_REGISTERED_STUDENT",
]
