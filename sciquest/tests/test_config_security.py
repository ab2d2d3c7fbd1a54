"""
Startup guard: refuse insecure production configuration.
"""
from __future__ import annotations

import pytest

from sciquest.web.config import Settings, ensure_secure_config_on_startup


def _prod(**overrides) -> Settings:
    values = dict(
        ENVIRONMENT="production",
        SUPABASE_URL="https://project.supabase.co",
        SUPABASE_ANON_KEY="anon-key",
        COOKIE_SECURE=True,
        SITE_URL="https://sciquest.example",
    )
    values.update(overrides)
    return Settings(**values)


def test_dev_is_permissive():
    ensure_secure_config_on_startup(Settings(ENVIRONMENT="development", SUPABASE_URL="", COOKIE_SECURE=False))


def test_secure_prod_passes():
    ensure_secure_config_on_startup(_prod())


@pytest.mark.parametrize(
    "overrides,needle",
    [
        ({"SUPABASE_URL": ""}, "SUPABASE_URL"),
        ({"SUPABASE_ANON_KEY": "  "}, "SUPABASE_ANON_KEY"),
        ({"COOKIE_SECURE": False}, "COOKIE_SECURE"),
        ({"SITE_URL": "http://sciquest.example"}, "SITE_URL"),
    ],
)
def test_prod_misconfiguration_aborts(overrides, needle):
    with pytest.raises(SystemExit) as exc:
        ensure_secure_config_on_startup(_prod(**overrides))
    assert needle in str(exc.value)


def test_staging_counts_as_production():
    with pytest.raises(SystemExit):
        ensure_secure_config_on_startup(_prod(ENVIRONMENT="staging", COOKIE_SECURE=False))


def test_session_cookie_settings():
    opts = Settings(COOKIE_SECURE=True, SESSION_TIMEOUT_MINUTES=90).get_cookie_settings()
    assert opts["httponly"] is True
    assert opts["secure"] is True
    assert opts["max_age"] == 5400
    assert opts["samesite"] == "lax"


def test_settings_are_case_sensitive_and_ignore_unknown_keys(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("cookie_secure", "true")
    monkeypatch.setenv("SOMETHING_ELSE", "x")
    cfg = Settings(_env_file=None)
    assert cfg.COOKIE_SECURE is False
    assert Settings.model_config["extra"] == "ignore"
