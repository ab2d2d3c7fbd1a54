"""
Supabase gateway for auth operations and the profile table.

Why:
    All calls into the hosted identity/database service go through
    `SupabaseService`. It converts library exceptions into `ServiceError`
    values so the flows can branch on results instead of exception types,
    and it is the single seam tests replace with a fake client.

Notes:
    - One client per request flow. A Supabase client keeps the signed-in
      session in memory and uses it for table requests (row level security),
      so sharing one client across users would mix identities.
    - The client is duck-typed: anything exposing `.auth`, `.table()` and
      `.rpc()` like `supabase.Client` works.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import structlog
from supabase import Client, ClientOptions, create_client

from .domain import AccountType, PROFILE_TABLE
from .errors import ServiceError
from .resolution import ProfileRead

logger = structlog.get_logger()


@dataclass
class AuthResult:
    user: Any = None
    session: Any = None
    error: Optional[ServiceError] = None


@dataclass
class OAuthResult:
    url: Optional[str] = None
    error: Optional[ServiceError] = None


def create_supabase_client(url: str, anon_key: str, *, timeout_seconds: int = 30) -> Client:
    """Create a fresh anon-key client that keeps its session in memory only."""
    options = ClientOptions(
        postgrest_client_timeout=timeout_seconds,
        storage_client_timeout=timeout_seconds,
        auto_refresh_token=False,
        persist_session=False,
        flow_type="implicit",
    )
    return create_client(url, anon_key, options=options)


def _response_data(response: Any) -> Any:
    # maybe_single().execute() returns None for "no row" on some postgrest versions.
    if response is None:
        return None
    return getattr(response, "data", None)


class SupabaseService:
    """Auth and profile operations against one Supabase client."""

    def __init__(self, client: Any, *, profile_table: str = PROFILE_TABLE):
        self._client = client
        self._profile_table = profile_table

    @property
    def client(self) -> Any:
        return self._client

    # --- Auth ---------------------------------------------------------------------

    def sign_up(self, email: str, password: str, metadata: Optional[Mapping[str, Any]] = None) -> AuthResult:
        """Create an identity. `metadata` lands in the identity's user metadata."""
        payload: Dict[str, Any] = {"email": email, "password": password}
        if metadata:
            payload["options"] = {"data": dict(metadata)}
        try:
            response = self._client.auth.sign_up(payload)
        except Exception as exc:
            error = ServiceError.from_exception(exc)
            logger.warning("sign_up_failed", email=email, error=error.message, code=error.code)
            return AuthResult(error=error)
        if not getattr(response, "user", None):
            return AuthResult(error=ServiceError(message="Registration failed"))
        logger.info("user_signed_up", user_id=response.user.id, email=email)
        return AuthResult(user=response.user, session=getattr(response, "session", None))

    def sign_in(self, email: str, password: str) -> AuthResult:
        try:
            response = self._client.auth.sign_in_with_password({"email": email, "password": password})
        except Exception as exc:
            error = ServiceError.from_exception(exc)
            logger.warning("sign_in_failed", email=email, error=error.message, code=error.code)
            return AuthResult(error=error)
        if not getattr(response, "user", None) or not getattr(response, "session", None):
            return AuthResult(error=ServiceError(message="Invalid login credentials"))
        logger.info("user_signed_in", user_id=response.user.id, email=email)
        return AuthResult(user=response.user, session=response.session)

    def sign_in_with_oauth(
        self, provider: str, redirect_to: str, query_params: Optional[Mapping[str, str]] = None
    ) -> OAuthResult:
        """Ask the service for the provider's authorization URL."""
        options: Dict[str, Any] = {"redirect_to": redirect_to}
        if query_params:
            options["query_params"] = dict(query_params)
        try:
            response = self._client.auth.sign_in_with_oauth({"provider": provider, "options": options})
        except Exception as exc:
            error = ServiceError.from_exception(exc)
            logger.error("oauth_sign_in_failed", provider=provider, error=error.message)
            return OAuthResult(error=error)
        url = getattr(response, "url", None)
        if not url:
            return OAuthResult(error=ServiceError(message="No authorization URL returned"))
        return OAuthResult(url=url)

    def sign_out(self) -> Optional[ServiceError]:
        try:
            self._client.auth.sign_out()
        except Exception as exc:
            error = ServiceError.from_exception(exc)
            logger.warning("sign_out_failed", error=error.message)
            return error
        return None

    def get_session(self) -> Any:
        """Return the client's current session, or None."""
        try:
            return self._client.auth.get_session()
        except Exception as exc:
            logger.warning("get_session_failed", error=str(exc))
            return None

    def restore_session(self, access_token: str, refresh_token: str) -> AuthResult:
        """Load stored tokens into the client so table requests run as that user."""
        try:
            response = self._client.auth.set_session(access_token, refresh_token)
        except Exception as exc:
            error = ServiceError.from_exception(exc)
            logger.warning("restore_session_failed", error=error.message)
            return AuthResult(error=error)
        session = getattr(response, "session", None)
        user = getattr(response, "user", None) or getattr(session, "user", None)
        if not session or not user:
            return AuthResult(error=ServiceError(message="No active session"))
        return AuthResult(user=user, session=session)

    def reset_password_for_email(self, email: str, redirect_to: str) -> Optional[ServiceError]:
        try:
            self._client.auth.reset_password_for_email(email, {"redirect_to": redirect_to})
        except Exception as exc:
            error = ServiceError.from_exception(exc)
            logger.warning("password_reset_failed", email=email, error=error.message)
            return error
        logger.info("password_reset_requested", email=email)
        return None

    # --- Profile table --------------------------------------------------------------

    def _single(self, query: Any) -> ProfileRead:
        try:
            response = query.maybe_single().execute()
        except Exception as exc:
            error = ServiceError.from_exception(exc)
            if error.is_no_row:
                return ProfileRead()
            return ProfileRead(error=error)
        data = _response_data(response)
        if isinstance(data, list):
            data = data[0] if data else None
        return ProfileRead(row=data or None)

    def read_profile(self, user_id: str, columns: str = "*") -> ProfileRead:
        """Read the profile row for `user_id` (at most one row)."""
        query = self._client.table(self._profile_table).select(columns).eq("id", user_id)
        result = self._single(query)
        if result.error is not None:
            logger.error(
                "profile_fetch_error",
                user_id=user_id,
                code=result.error.code,
                error=result.error.message,
                hint=result.error.hint,
            )
        return result

    def find_parent_by_email(self, email: str) -> ProfileRead:
        query = (
            self._client.table(self._profile_table)
            .select("id, account_type")
            .eq("email", email)
            .eq("account_type", AccountType.PARENT.value)
        )
        return self._single(query)

    def insert_profile(self, row: Mapping[str, Any]) -> Optional[ServiceError]:
        """Insert a profile row. A duplicate comes back as a ServiceError with `is_duplicate`."""
        try:
            self._client.table(self._profile_table).insert(dict(row)).execute()
        except Exception as exc:
            return ServiceError.from_exception(exc)
        return None

    def update_profile(self, user_id: str, fields: Mapping[str, Any]) -> Optional[ServiceError]:
        try:
            self._client.table(self._profile_table).update(dict(fields)).eq("id", user_id).execute()
        except Exception as exc:
            error = ServiceError.from_exception(exc)
            logger.error("profile_update_failed", user_id=user_id, code=error.code, error=error.message)
            return error
        return None

    # --- RPC ------------------------------------------------------------------------

    def check_email_availability(self, email: str) -> bool:
        """True when no account uses `email`. Errors count as "not available"."""
        try:
            response = self._client.rpc("check_email_availability", {"check_email": email}).execute()
        except Exception as exc:
            logger.error("email_availability_check_failed", error=str(exc))
            return False
        return _response_data(response) is True


__all__ = ["AuthResult", "OAuthResult", "SupabaseService", "create_supabase_client"]
