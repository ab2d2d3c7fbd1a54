"""
Identity domain constants and simple helpers.

Why:
- Centralize the three account categories and their dashboard destinations so
  the sign-in, sign-up and profile flows cannot drift apart.
- Keep the difference between an authoritative stored category (normalized)
  and a transient hint (exact match only) in one place.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class AccountType(str, Enum):
    STUDENT = "student"
    PARENT = "parent"
    TEACHER = "teacher"

    @property
    def dashboard(self) -> str:
        return DASHBOARD_PATHS[self]

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def from_stored(cls, raw: Optional[str]) -> Optional["AccountType"]:
        """Parse a category read from the profile table.

        Storage keeps the category as a free-form string, so compare after
        lowercasing and trimming. Returns None for anything unknown.
        """
        if not isinstance(raw, str):
            return None
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None

    @classmethod
    def from_hint(cls, raw: Optional[str]) -> Optional["AccountType"]:
        """Parse an account-type hint (query parameter or persisted cookie).

        Hints only count when they are exactly one of the known values.
        """
        if not isinstance(raw, str):
            return None
        try:
            return cls(raw)
        except ValueError:
            return None


DASHBOARD_PATHS = {
    AccountType.STUDENT: "/dashboards/student-dashboard.html",
    AccountType.PARENT: "/dashboards/parent-dashboard.html",
    AccountType.TEACHER: "/dashboards/teacher-dashboard.html",
}

INDEX_PATH = "/index.html"
AUTH_PATH = "/auth"
AVATAR_SELECTION_PATH = "/avatar-selection.html"

PROFILE_TABLE = "user_profiles"

__all__ = [
    "AccountType",
    "DASHBOARD_PATHS",
    "INDEX_PATH",
    "AUTH_PATH",
    "AVATAR_SELECTION_PATH",
    "PROFILE_TABLE",
]
