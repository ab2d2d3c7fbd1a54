"""
Profile record helpers: idempotent creation, edits and display naming.

Why:
    A profile row may be created by the sign-up form, by the student wizard,
    or defensively after a sign-in that found no row. All three paths funnel
    through `ensure_profile`, which treats "row already there" as success.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

import structlog

from .domain import AccountType
from .errors import ServiceError
from .supabase_client import SupabaseService
from .validation import ValidationError, is_valid_email, validate_profile_age

logger = structlog.get_logger()


def ensure_profile(
    service: SupabaseService,
    *,
    user_id: str,
    email: str,
    account_type: AccountType,
    extra: Optional[Mapping[str, Any]] = None,
) -> Optional[ServiceError]:
    """Create the profile row for `user_id` unless one exists.

    Returns None when a row exists afterwards (created now or earlier) and the
    `ServiceError` otherwise. A read error during the pre-check does not stop
    the insert; the duplicate-key answer still keeps the call idempotent.
    """
    existing = service.read_profile(user_id, columns="id")
    if existing.found:
        logger.info("profile_already_exists", user_id=user_id)
        return None

    row: Dict[str, Any] = {"id": user_id, "email": email, "account_type": account_type.value}
    if extra:
        row.update(extra)
    error = service.insert_profile(row)
    if error is None:
        logger.info("profile_created", user_id=user_id, account_type=account_type.value)
        return None
    if error.is_duplicate:
        logger.info("profile_already_exists", user_id=user_id, code=error.code)
        return None
    logger.error("profile_create_failed", user_id=user_id, code=error.code, error=error.message)
    return error


def display_name(profile: Mapping[str, Any], fallback_email: str = "") -> str:
    for key in ("first_name", "full_name", "username", "email"):
        value = profile.get(key)
        if value:
            return str(value)
    return fallback_email or "User"


def avatar_initial(name: str) -> str:
    return name[:1].upper() if name else "?"


def build_profile_update(form: Mapping[str, Optional[str]], *, is_student: bool) -> Dict[str, Any]:
    """Validate the profile form and return the fields to overwrite.

    `first_name` and `full_name` are always written (blank becomes None).
    Students additionally get `age` and `parent_email`.

    Raises:
        ValidationError: with the message for the first failed check.
    """
    first_name = (form.get("first_name") or "").strip()
    full_name = (form.get("full_name") or "").strip()
    if is_student and not first_name:
        raise ValidationError("First name is required")

    fields: Dict[str, Any] = {"first_name": first_name or None, "full_name": full_name or None}
    if not is_student:
        return fields

    age = validate_profile_age(form.get("age"))
    parent_email = (form.get("parent_email") or "").strip()
    if parent_email and not is_valid_email(parent_email):
        raise ValidationError("Please enter a valid parent email address")
    fields["age"] = age
    fields["parent_email"] = parent_email or None
    return fields


__all__ = ["ensure_profile", "display_name", "avatar_initial", "build_profile_update"]
