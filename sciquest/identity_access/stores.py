"""
In-memory stores for web sessions and wizard state.

Why: Keep the hosted service's access/refresh tokens and the wizard's
half-filled state server-side. Cookies carry only an opaque id.

Per process only; entries expire by TTL and are swept whenever a new one is
added. Multi-worker deployments need a shared store behind the same
interface.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional
import secrets
import time

from .wizard import WizardState


def _now() -> int:
    return int(time.time())


@dataclass
class SessionRecord:
    session_id: str
    user_id: str
    email: str
    access_token: str
    refresh_token: str
    expires_at: Optional[int] = None


class SessionStore:
    def __init__(self):
        self._data: Dict[str, SessionRecord] = {}

    def create(
        self, *, user_id: str, email: str, access_token: str, refresh_token: str, ttl_seconds: int = 5400
    ) -> SessionRecord:
        self._purge_expired()
        sid = secrets.token_urlsafe(24)
        rec = SessionRecord(
            session_id=sid,
            user_id=user_id,
            email=email,
            access_token=access_token,
            refresh_token=refresh_token,
            expires_at=_now() + ttl_seconds,
        )
        self._data[sid] = rec
        return rec

    def get(self, session_id: Optional[str]) -> Optional[SessionRecord]:
        if not session_id:
            return None
        rec = self._data.get(session_id)
        if not rec:
            return None
        if rec.expires_at and rec.expires_at < _now():
            self._data.pop(session_id, None)
            return None
        return rec

    def update_tokens(self, session_id: str, *, access_token: str, refresh_token: str) -> None:
        rec = self._data.get(session_id)
        if rec:
            rec.access_token = access_token
            rec.refresh_token = refresh_token

    def delete(self, session_id: Optional[str]) -> None:
        if session_id:
            self._data.pop(session_id, None)

    def _purge_expired(self) -> None:
        now = _now()
        for sid in [k for k, rec in self._data.items() if rec.expires_at and rec.expires_at < now]:
            del self._data[sid]


@dataclass
class _WizardEntry:
    state: WizardState
    expires_at: int


class WizardStore:
    """Wizard state keyed by an opaque cookie value."""

    def __init__(self, ttl_seconds: int = 1800):
        self._data: Dict[str, _WizardEntry] = {}
        self._ttl = ttl_seconds

    def start(self, state: WizardState) -> str:
        self._purge_expired()
        wid = secrets.token_urlsafe(24)
        self._data[wid] = _WizardEntry(state=state, expires_at=_now() + self._ttl)
        return wid

    def get(self, wizard_id: Optional[str]) -> Optional[WizardState]:
        if not wizard_id:
            return None
        entry = self._data.get(wizard_id)
        if not entry:
            return None
        if entry.expires_at < _now():
            self._data.pop(wizard_id, None)
            return None
        return entry.state

    def save(self, wizard_id: str, state: WizardState) -> None:
        self._data[wizard_id] = _WizardEntry(state=state, expires_at=_now() + self._ttl)

    def delete(self, wizard_id: Optional[str]) -> None:
        if wizard_id:
            self._data.pop(wizard_id, None)

    def _purge_expired(self) -> None:
        now = _now()
        for wid in [k for k, entry in self._data.items() if entry.expires_at < now]:
            del self._data[wid]
