"""
Post-sign-in account resolution: decide where a signed-in user lands.

Why:
    The stored profile category is authoritative. The account-type hint only
    bridges the gap when the profile row is not readable yet (created late,
    empty category, transient read error). An access-policy violation is the
    one case the hint may never paper over: continuing could route a user to
    the wrong account's dashboard, and the cause is a server-side policy
    misconfiguration that has to be fixed by an administrator.

Behavior (evaluated in this order):
    1. Read error: access-policy violation -> hard failure with a support
       code. Any other error -> hint fallback.
    2. No row -> hint fallback.
    3. Row with empty category -> hint fallback.
    4. Row with category -> normalized switch; unknown values go to the
       student dashboard only when the hint is `student`.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

import structlog

from .domain import AccountType
from .errors import ServiceError
from .outcomes import Failure, FailureReason, Outcome, Redirect

logger = structlog.get_logger()

LOGIN_SUCCESS_MESSAGE = "Login successful! Redirecting..."

UNAVAILABLE_MESSAGE = "Unable to load your account profile. Please try again or contact support."
MISSING_MESSAGE = "User profile not found. Please contact support to set up your account."
NO_ACCOUNT_TYPE_MESSAGE = "Account type is missing from your profile. Please contact support."
INVALID_ACCOUNT_TYPE_MESSAGE = "Invalid account type detected. Please contact support."


@dataclass(frozen=True)
class ProfileRead:
    """Outcome of reading one profile row: a row, no row, or an error."""

    row: Optional[Mapping[str, Any]] = None
    error: Optional[ServiceError] = None

    @property
    def found(self) -> bool:
        return self.error is None and self.row is not None


def access_policy_failure(clock: Callable[[], float] = time.time) -> Failure:
    support_code = f"RLS-{int(clock() * 1000)}"
    return Failure(
        message=(
            f"Account access error. Please contact support with error code: {support_code}. "
            "This is a database configuration issue that needs to be fixed by an administrator."
        ),
        reason=FailureReason.ACCESS_POLICY,
        support_code=support_code,
    )


def _redirect_to(account_type: AccountType, *, from_hint: bool) -> Redirect:
    return Redirect(target=account_type.dashboard, message=LOGIN_SUCCESS_MESSAGE, from_hint=from_hint)


def _hint_fallback(
    hint: Optional[AccountType], message: str, reason: FailureReason, **log_context: Any
) -> Outcome:
    if hint is not None:
        logger.warning("account_resolution_hint_fallback", reason=reason.value, hint=hint.value, **log_context)
        return _redirect_to(hint, from_hint=True)
    logger.warning("account_resolution_no_fallback", reason=reason.value, **log_context)
    return Failure(message=message, reason=reason)


def resolve_destination(
    read: ProfileRead,
    hint: Optional[AccountType],
    *,
    user_id: Optional[str] = None,
    clock: Callable[[], float] = time.time,
) -> Outcome:
    """Return the `Redirect` or `Failure` for a signed-in user.

    Parameters:
        read: result of reading the user's profile row.
        hint: parsed account-type hint, or None when unset/unknown.
        user_id: identity, for logging only.
        clock: time source for the access-policy support code.
    """
    ctx = {"user_id": user_id, "hint": hint.value if hint else None}

    if read.error is not None:
        err = read.error
        if err.is_access_policy:
            failure = access_policy_failure(clock)
            logger.error(
                "account_resolution_access_policy_error",
                code=err.code,
                error=err.message,
                details=err.details,
                support_code=failure.support_code,
                **ctx,
            )
            return failure
        logger.warning("profile_read_failed", code=err.code, error=err.message, **ctx)
        return _hint_fallback(hint, UNAVAILABLE_MESSAGE, FailureReason.PROFILE_UNAVAILABLE, user_id=user_id)

    if read.row is None:
        return _hint_fallback(hint, MISSING_MESSAGE, FailureReason.PROFILE_MISSING, user_id=user_id)

    raw = read.row.get("account_type")
    if not raw:
        return _hint_fallback(hint, NO_ACCOUNT_TYPE_MESSAGE, FailureReason.ACCOUNT_TYPE_MISSING, user_id=user_id)

    stored = AccountType.from_stored(raw)
    if stored is not None:
        logger.info("account_resolved", account_type=stored.value, **ctx)
        return _redirect_to(stored, from_hint=False)

    # Unknown stored value: only the legacy student path may proceed.
    if hint is AccountType.STUDENT:
        logger.warning("invalid_account_type_student_fallback", account_type=str(raw), **ctx)
        return _redirect_to(AccountType.STUDENT, from_hint=True)
    logger.warning("invalid_account_type", account_type=str(raw), **ctx)
    return Failure(message=INVALID_ACCOUNT_TYPE_MESSAGE, reason=FailureReason.INVALID_ACCOUNT_TYPE)


__all__ = [
    "ProfileRead",
    "LOGIN_SUCCESS_MESSAGE",
    "UNAVAILABLE_MESSAGE",
    "MISSING_MESSAGE",
    "NO_ACCOUNT_TYPE_MESSAGE",
    "INVALID_ACCOUNT_TYPE_MESSAGE",
    "access_policy_failure",
    "resolve_destination",
]
