"""
Result values returned by the identity flows.

The web layer renders these: `Redirect` as a success banner followed by
navigation (deferred unless `delayed` is False), `Failure` as a persistent
error banner without navigation, `Notice` as a success banner that stays on
the page.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


class FailureReason(str, Enum):
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    ACCESS_POLICY = "access_policy"
    PROFILE_UNAVAILABLE = "profile_unavailable"
    PROFILE_MISSING = "profile_missing"
    ACCOUNT_TYPE_MISSING = "account_type_missing"
    INVALID_ACCOUNT_TYPE = "invalid_account_type"
    OAUTH_NOT_ALLOWED = "oauth_not_allowed"
    SERVICE = "service"


@dataclass(frozen=True)
class Redirect:
    target: str
    message: str = ""
    delayed: bool = True
    # Set when the destination came from the account-type hint instead of the stored profile.
    from_hint: bool = False


@dataclass(frozen=True)
class Failure:
    message: str
    reason: FailureReason = FailureReason.SERVICE
    support_code: Optional[str] = None

    @property
    def status_code(self) -> int:
        if self.reason is FailureReason.ACCESS_POLICY:
            return 403
        return 400


@dataclass(frozen=True)
class Notice:
    message: str
    extra: dict = field(default_factory=dict)


Outcome = Union[Redirect, Failure, Notice]

__all__ = ["FailureReason", "Redirect", "Failure", "Notice", "Outcome"]
