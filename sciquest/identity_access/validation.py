"""
Input validation for the auth, sign-up and profile forms.

Every check runs before any call to the hosted service. Validators raise
`ValidationError` carrying the message that is shown to the user, and return
the normalized value on success.
"""

from __future__ import annotations

import re
from typing import Optional

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6
MIN_STUDENT_AGE = 5
MAX_STUDENT_AGE = 12
_WHOLE_NUMBER_RE = re.compile(r"^[+-]?\d+$")

CAPTCHA_QUESTION = "What is 5 + 3?"
CAPTCHA_ANSWER = "8"


class ValidationError(ValueError):
    """Raised when user input is rejected; str(exc) is the user-facing message."""


def is_valid_email(value: str) -> bool:
    return bool(value) and EMAIL_PATTERN.match(value) is not None


def validate_email(value: Optional[str], *, missing: str = "Please enter your email address") -> str:
    email = (value or "").strip()
    if not email:
        raise ValidationError(missing)
    if not is_valid_email(email):
        raise ValidationError("Please enter a valid email address")
    return email


def validate_password(value: Optional[str]) -> str:
    # Passwords are never trimmed; leading/trailing spaces are part of the secret.
    password = value or ""
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError("Password must be at least 6 characters long")
    return password


def validate_credentials(email: Optional[str], password: Optional[str]) -> tuple[str, str]:
    """Validate the auth page's email/password pair.

    Mirrors the order of the auth form checks: missing fields first, then
    email format, then password length.
    """
    email_clean = (email or "").strip()
    if not email_clean or not password:
        raise ValidationError("Please fill in all fields")
    if not is_valid_email(email_clean):
        raise ValidationError("Please enter a valid email address")
    return email_clean, validate_password(password)


def parse_int(value: Optional[str]) -> Optional[int]:
    """Coerce a form value to int; blank or non-numeric input yields None."""
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        return None


def validate_signup_age(value: Optional[str]) -> int:
    age = parse_int(value)
    if age is None:
        raise ValidationError("Please select your age")
    return age


def validate_profile_age(value: Optional[str]) -> Optional[int]:
    """Age on the profile form is optional, but bounded when given.

    Blank and zero count as absent. Anything else must be a whole number in
    range, so "4.5" and "12abc" are rejected.
    """
    text = (value or "").strip()
    if not text:
        return None
    range_error = ValidationError(f"Age must be between {MIN_STUDENT_AGE} and {MAX_STUDENT_AGE}")
    if not _WHOLE_NUMBER_RE.match(text):
        raise range_error
    age = int(text)
    if age == 0:
        return None
    if age < MIN_STUDENT_AGE or age > MAX_STUDENT_AGE:
        raise range_error
    return age


def check_captcha(answer: Optional[str]) -> bool:
    """Return True only for the literal expected answer (no trimming)."""
    return answer == CAPTCHA_ANSWER


__all__ = [
    "ValidationError",
    "CAPTCHA_QUESTION",
    "CAPTCHA_ANSWER",
    "MIN_STUDENT_AGE",
    "MAX_STUDENT_AGE",
    "is_valid_email",
    "validate_email",
    "validate_password",
    "validate_credentials",
    "parse_int",
    "validate_signup_age",
    "validate_profile_age",
    "check_captcha",
]
