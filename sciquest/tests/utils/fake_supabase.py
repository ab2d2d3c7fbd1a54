"""
In-memory Supabase client stand-in for unit and route tests.

Supports the subset `SupabaseService` uses: the auth calls, chained table
queries (`select`/`eq`/`maybe_single`/`insert`/`update` + `execute`) and the
`check_email_availability` RPC. Tests steer failures by setting the
`*_error` attributes and inspect `calls` to assert what was (not) invoked.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import SimpleNamespace
from typing import Any, Dict, List, Optional


class FakeAPIError(Exception):
    """Shaped like postgrest's APIError: code, message, details, hint."""

    def __init__(self, message: str, code: Optional[str] = None, details: Optional[str] = None, hint=None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details
        self.hint = hint


class FakeAuthError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


@dataclass
class _User:
    id: str
    email: str
    password: str
    metadata: Dict[str, Any] = field(default_factory=dict)


def _session(user: _User, n: int) -> SimpleNamespace:
    return SimpleNamespace(
        access_token=f"access-{user.id}-{n}",
        refresh_token=f"refresh-{user.id}-{n}",
        user=SimpleNamespace(id=user.id, email=user.email),
    )


class FakeAuth:
    def __init__(self, backend: "FakeSupabase"):
        self._b = backend
        self.current: Optional[SimpleNamespace] = None

    def sign_up(self, payload: Dict[str, Any]):
        self._b.calls.append(("sign_up", payload))
        if self._b.sign_up_error:
            raise FakeAuthError(self._b.sign_up_error)
        email = payload["email"]
        if any(u.email == email for u in self._b.users.values()):
            raise FakeAuthError("User already registered")
        user = self._b.add_user(email, payload["password"], (payload.get("options") or {}).get("data") or {})
        self.current = _session(user, self._b.next_n())
        return SimpleNamespace(user=self.current.user, session=self.current)

    def sign_in_with_password(self, credentials: Dict[str, str]):
        self._b.calls.append(("sign_in_with_password", credentials["email"]))
        for user in self._b.users.values():
            if user.email == credentials["email"] and user.password == credentials["password"]:
                self.current = _session(user, self._b.next_n())
                return SimpleNamespace(user=self.current.user, session=self.current)
        raise FakeAuthError("Invalid login credentials")

    def sign_in_with_oauth(self, payload: Dict[str, Any]):
        self._b.calls.append(("sign_in_with_oauth", payload))
        if self._b.oauth_error:
            raise FakeAuthError(self._b.oauth_error)
        redirect = payload["options"]["redirect_to"]
        return SimpleNamespace(
            provider=payload["provider"],
            url=f"https://idp.example/authorize?provider={payload['provider']}&redirect_to={redirect}",
        )

    def sign_out(self):
        self._b.calls.append(("sign_out", None))
        self.current = None

    def get_session(self):
        return self.current

    def set_session(self, access_token: str, refresh_token: str):
        self._b.calls.append(("set_session", access_token))
        for user in self._b.users.values():
            if access_token.startswith(f"access-{user.id}-") and access_token not in self._b.revoked:
                self.current = SimpleNamespace(
                    access_token=access_token,
                    refresh_token=refresh_token,
                    user=SimpleNamespace(id=user.id, email=user.email),
                )
                return SimpleNamespace(user=self.current.user, session=self.current)
        raise FakeAuthError("Invalid Refresh Token")

    def reset_password_for_email(self, email: str, options: Dict[str, Any]):
        self._b.calls.append(("reset_password_for_email", (email, options)))
        if self._b.reset_error:
            raise FakeAuthError(self._b.reset_error)


class FakeQuery:
    def __init__(self, backend: "FakeSupabase", table: str):
        self._b = backend
        self._table = table
        self._op = "select"
        self._filters: List[tuple] = []
        self._payload: Dict[str, Any] = {}
        self._single = False

    def select(self, columns: str = "*"):
        self._op = "select"
        return self

    def insert(self, row: Dict[str, Any]):
        self._op = "insert"
        self._payload = dict(row)
        return self

    def update(self, fields: Dict[str, Any]):
        self._op = "update"
        self._payload = dict(fields)
        return self

    def eq(self, column: str, value: Any):
        self._filters.append((column, value))
        return self

    def maybe_single(self):
        self._single = True
        return self

    def _matches(self, row: Dict[str, Any]) -> bool:
        return all(row.get(col) == val for col, val in self._filters)

    def execute(self):
        rows = self._b.tables.setdefault(self._table, [])
        self._b.calls.append((f"table.{self._op}", self._table, dict(self._filters), self._payload))
        if self._op == "select":
            if self._b.select_error:
                raise self._b.select_error
            found = [dict(r) for r in rows if self._matches(r)]
            if self._single:
                if not found:
                    # postgrest returns None for an empty maybe_single() result
                    return None
                return SimpleNamespace(data=found[0])
            return SimpleNamespace(data=found)
        if self._op == "insert":
            if self._b.insert_error:
                raise self._b.insert_error
            if any(r.get("id") == self._payload.get("id") for r in rows):
                raise FakeAPIError(
                    'duplicate key value violates unique constraint "user_profiles_pkey"', code="23505"
                )
            rows.append(dict(self._payload))
            return SimpleNamespace(data=[dict(self._payload)])
        if self._b.update_error:
            raise self._b.update_error
        updated = []
        for row in rows:
            if self._matches(row):
                row.update(self._payload)
                updated.append(dict(row))
        return SimpleNamespace(data=updated)


class FakeRPC:
    def __init__(self, backend: "FakeSupabase", fn: str, params: Dict[str, Any]):
        self._b = backend
        self._fn = fn
        self._params = params

    def execute(self):
        self._b.calls.append(("rpc", self._fn, self._params))
        if self._b.rpc_error:
            raise self._b.rpc_error
        email = self._params.get("check_email")
        taken = any(u.email == email for u in self._b.users.values())
        return SimpleNamespace(data=not taken)


class FakeSupabase:
    """Shared fake backend; each `client()` models one request's client."""

    def __init__(self):
        self.users: Dict[str, _User] = {}
        self.tables: Dict[str, List[Dict[str, Any]]] = {"user_profiles": []}
        self.calls: List[tuple] = []
        self.revoked: set = set()
        self._n = 0
        self.sign_up_error: Optional[str] = None
        self.oauth_error: Optional[str] = None
        self.reset_error: Optional[str] = None
        self.select_error: Optional[Exception] = None
        self.insert_error: Optional[Exception] = None
        self.update_error: Optional[Exception] = None
        self.rpc_error: Optional[Exception] = None

    def next_n(self) -> int:
        self._n += 1
        return self._n

    def add_user(self, email: str, password: str, metadata: Optional[Dict[str, Any]] = None) -> _User:
        user = _User(id=f"user-{len(self.users) + 1}", email=email, password=password, metadata=metadata or {})
        self.users[user.id] = user
        return user

    def add_profile(self, **row: Any) -> Dict[str, Any]:
        self.tables["user_profiles"].append(row)
        return row

    def profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        for row in self.tables["user_profiles"]:
            if row.get("id") == user_id:
                return row
        return None

    def called(self, name: str) -> bool:
        return any(call[0] == name for call in self.calls)

    def client(self) -> "FakeClient":
        return FakeClient(self)


class FakeClient:
    def __init__(self, backend: FakeSupabase):
        self._b = backend
        self.auth = FakeAuth(backend)

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self._b, name)

    def rpc(self, fn: str, params: Dict[str, Any]) -> FakeRPC:
        return FakeRPC(self._b, fn, params)
