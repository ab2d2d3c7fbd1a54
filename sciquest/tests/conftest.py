"""
Pytest configuration for SciQuest tests.

Why: Force AnyIO to use the asyncio backend, and wire the app to an in-memory
Supabase fake plus fresh session/wizard stores for every test.
"""
from __future__ import annotations

import httpx
import pytest
from httpx import ASGITransport

from sciquest.identity_access.stores import SessionStore, WizardStore
from sciquest.identity_access.supabase_client import SupabaseService
from sciquest.tests.utils.fake_supabase import FakeSupabase
from sciquest.web import dependencies
from sciquest.web.main import app


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def backend() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def service(backend: FakeSupabase) -> SupabaseService:
    return SupabaseService(backend.client())


@pytest.fixture
def web_app(backend: FakeSupabase):
    sessions = SessionStore()
    wizards = WizardStore()
    # One fresh client per request, like production.
    app.dependency_overrides[dependencies.get_supabase_service] = lambda: SupabaseService(backend.client())
    app.dependency_overrides[dependencies.get_session_store] = lambda: sessions
    app.dependency_overrides[dependencies.get_wizard_store] = lambda: wizards
    app.state.test_sessions = sessions
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def client(web_app):
    async with httpx.AsyncClient(transport=ASGITransport(app=web_app), base_url="http://test") as c:
        yield c
