"""
Auth page routes over ASGI: CSRF, status codes, banners and cookies.
"""
from __future__ import annotations

import httpx
import pytest

from sciquest.tests.utils.fake_supabase import FakeAPIError, FakeSupabase
from sciquest.tests.utils.html import extract_csrf, refresh_target


pytestmark = pytest.mark.anyio("asyncio")


async def _csrf(client: httpx.AsyncClient, path: str = "/auth") -> str:
    resp = await client.get(path)
    assert resp.status_code == 200
    return extract_csrf(resp.text)


async def test_auth_page_login_mode(client: httpx.AsyncClient):
    resp = await client.get("/auth")
    assert resp.status_code == 200
    assert "Welcome Back!" in resp.text
    assert 'id="forgotPasswordLink"' in resp.text
    assert 'action="/auth/google"' in resp.text
    assert resp.headers.get("X-Frame-Options") == "DENY"
    assert resp.cookies.get("csrf_token")


async def test_auth_page_signup_mode_for_student_hides_google_and_persists_hint(client: httpx.AsyncClient):
    resp = await client.get("/auth?mode=signup&type=student")
    assert resp.status_code == 200
    assert "Create a free account" in resp.text
    assert "Join SciQuest Heroes as a student" in resp.text
    assert 'action="/auth/google"' not in resp.text
    assert 'id="forgotPasswordLink"' not in resp.text
    assert resp.cookies.get("account_type") == "student"


async def test_unknown_type_is_not_persisted(client: httpx.AsyncClient):
    resp = await client.get("/auth?type=admin")
    assert resp.status_code == 200
    assert resp.cookies.get("account_type") is None
    assert 'action="/auth/google"' in resp.text


async def test_login_without_csrf_is_rejected(client: httpx.AsyncClient, backend: FakeSupabase):
    resp = await client.post("/auth/login", data={"email": "kid@example.com", "password": "secret1"})
    assert resp.status_code == 403
    assert backend.calls == []


async def test_login_validation_error_is_400(client: httpx.AsyncClient, backend: FakeSupabase):
    token = await _csrf(client)
    resp = await client.post("/auth/login", data={"email": "", "password": "", "csrf_token": token})
    assert resp.status_code == 400
    assert "Please fill in all fields" in resp.text
    assert backend.calls == []


async def test_login_redirects_to_stored_dashboard_after_delay(client: httpx.AsyncClient, backend: FakeSupabase):
    user = backend.add_user("pat@example.com", "secret1")
    backend.add_profile(id=user.id, email=user.email, account_type="Teacher")
    token = await _csrf(client)
    resp = await client.post(
        "/auth/login",
        data={"email": "pat@example.com", "password": "secret1", "type": "parent", "csrf_token": token},
    )
    assert resp.status_code == 200
    assert "Login successful! Redirecting..." in resp.text
    assert refresh_target(resp.text) == "/dashboards/teacher-dashboard.html"
    assert 'content="1.5;url=' in resp.text
    assert resp.cookies.get("sciquest_session")


async def test_login_uses_hint_cookie_when_profile_missing(client: httpx.AsyncClient, backend: FakeSupabase):
    backend.add_user("mum@example.com", "secret1")
    resp = await client.get("/auth?type=parent")
    token = extract_csrf(resp.text)
    resp = await client.post(
        "/auth/login", data={"email": "mum@example.com", "password": "secret1", "csrf_token": token}
    )
    assert resp.status_code == 200
    assert refresh_target(resp.text) == "/dashboards/parent-dashboard.html"


async def test_login_access_policy_error_is_403_without_navigation(client: httpx.AsyncClient, backend: FakeSupabase):
    backend.add_user("kid@example.com", "secret1")
    backend.select_error = FakeAPIError("permission denied for table user_profiles", code="42501")
    token = await _csrf(client)
    resp = await client.post(
        "/auth/login",
        data={"email": "kid@example.com", "password": "secret1", "type": "student", "csrf_token": token},
    )
    assert resp.status_code == 403
    assert "error code: RLS-" in resp.text
    assert refresh_target(resp.text) is None


async def test_login_wrong_password(client: httpx.AsyncClient, backend: FakeSupabase):
    backend.add_user("kid@example.com", "secret1")
    token = await _csrf(client)
    resp = await client.post(
        "/auth/login", data={"email": "kid@example.com", "password": "nope-nope", "csrf_token": token}
    )
    assert resp.status_code == 400
    assert "Invalid email or password. Please try again." in resp.text
    assert resp.cookies.get("sciquest_session") is None


async def test_signup_success_clears_hint(client: httpx.AsyncClient, backend: FakeSupabase):
    resp = await client.get("/auth?mode=signup&type=teacher")
    token = extract_csrf(resp.text)
    resp = await client.post(
        "/auth/signup",
        data={"email": "pat@example.com", "password": "secret1", "type": "teacher", "csrf_token": token},
    )
    assert resp.status_code == 200
    assert "Account created successfully! Redirecting..." in resp.text
    assert refresh_target(resp.text) == "/dashboards/teacher-dashboard.html"
    cleared = [h for h in resp.headers.get_list("set-cookie") if h.startswith("account_type=")]
    assert cleared and "Max-Age=0" in cleared[0]


async def test_signup_already_registered_switches_to_login(client: httpx.AsyncClient, backend: FakeSupabase):
    backend.add_user("kid@example.com", "secret1")
    token = await _csrf(client, "/auth?mode=signup")
    resp = await client.post(
        "/auth/signup", data={"email": "kid@example.com", "password": "secret1", "csrf_token": token}
    )
    assert resp.status_code == 400
    assert "This email is already registered. Please log in instead." in resp.text
    assert 'data-mode="login"' in resp.text


async def test_google_refused_for_student_hint(client: httpx.AsyncClient, backend: FakeSupabase):
    resp = await client.get("/auth?type=student")
    token = extract_csrf(resp.text)
    resp = await client.post("/auth/google", data={"csrf_token": token})
    assert resp.status_code == 400
    assert "Google sign-in is not available for student accounts." in resp.text
    assert not backend.called("sign_in_with_oauth")


async def test_google_redirects_to_provider(client: httpx.AsyncClient, backend: FakeSupabase):
    token = await _csrf(client, "/auth?type=parent")
    resp = await client.post("/auth/google", data={"type": "parent", "csrf_token": token}, follow_redirects=False)
    assert resp.status_code == 303
    assert resp.headers["location"].startswith("https://idp.example/authorize?provider=google")


async def test_forgot_password_flow(client: httpx.AsyncClient, backend: FakeSupabase):
    token = await _csrf(client, "/auth/forgot")
    resp = await client.post("/auth/forgot", data={"email": "", "csrf_token": token})
    assert resp.status_code == 400
    assert "Please enter your email address" in resp.text

    resp = await client.post("/auth/forgot", data={"email": "kid@example.com", "csrf_token": token})
    assert resp.status_code == 200
    assert "Password reset email sent! Check your inbox." in resp.text


async def test_logout_clears_session(client: httpx.AsyncClient, backend: FakeSupabase, web_app):
    user = backend.add_user("kid@example.com", "secret1")
    backend.add_profile(id=user.id, email=user.email, account_type="student")
    token = await _csrf(client)
    resp = await client.post(
        "/auth/login", data={"email": "kid@example.com", "password": "secret1", "csrf_token": token}
    )
    sid = resp.cookies.get("sciquest_session")
    assert web_app.state.test_sessions.get(sid) is not None

    resp = await client.post("/auth/logout", data={"csrf_token": token}, follow_redirects=False)
    assert resp.status_code == 303
    assert resp.headers["location"] == "/auth"
    assert web_app.state.test_sessions.get(sid) is None
    assert backend.called("sign_out")


async def test_health(client: httpx.AsyncClient):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"
