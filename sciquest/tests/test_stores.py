from __future__ import annotations

import pytest

from sciquest.identity_access import stores
from sciquest.identity_access.stores import SessionStore, WizardStore
from sciquest.identity_access.wizard import Panel, WizardState


def test_session_roundtrip_and_delete():
    store = SessionStore()
    rec = store.create(user_id="u1", email="a@example.com", access_token="a", refresh_token="r")
    assert store.get(rec.session_id) is rec
    store.delete(rec.session_id)
    assert store.get(rec.session_id) is None


def test_session_expires(monkeypatch: pytest.MonkeyPatch):
    store = SessionStore()
    monkeypatch.setattr(stores, "_now", lambda: 1000)
    rec = store.create(user_id="u1", email="a@example.com", access_token="a", refresh_token="r", ttl_seconds=60)
    monkeypatch.setattr(stores, "_now", lambda: 1061)
    assert store.get(rec.session_id) is None


def test_session_ids_are_opaque_and_unique():
    store = SessionStore()
    ids = {store.create(user_id="u1", email="a", access_token="a", refresh_token="r").session_id for _ in range(20)}
    assert len(ids) == 20
    assert all("u1" not in sid for sid in ids)


def test_wizard_store(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(stores, "_now", lambda: 1000)
    store = WizardStore(ttl_seconds=30)
    wid = store.start(WizardState())
    store.save(wid, WizardState(panel=Panel.PANEL2, age=7, parent_email="mum@example.com"))
    assert store.get(wid).panel is Panel.PANEL2
    monkeypatch.setattr(stores, "_now", lambda: 1031)
    assert store.get(wid) is None
    assert store.get(None) is None


def test_abandoned_wizards_are_swept_on_start(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(stores, "_now", lambda: 1000)
    store = WizardStore(ttl_seconds=30)
    for _ in range(1000):
        store.start(WizardState())
    monkeypatch.setattr(stores, "_now", lambda: 1031)
    wid = store.start(WizardState())
    assert list(store._data) == [wid]


def test_expired_sessions_are_swept_on_create(monkeypatch: pytest.MonkeyPatch):
    store = SessionStore()
    monkeypatch.setattr(stores, "_now", lambda: 1000)
    old = store.create(user_id="u1", email="a", access_token="a", refresh_token="r", ttl_seconds=60)
    live = store.create(user_id="u2", email="b", access_token="a", refresh_token="r", ttl_seconds=600)
    monkeypatch.setattr(stores, "_now", lambda: 1061)
    new = store.create(user_id="u3", email="c", access_token="a", refresh_token="r")
    assert set(store._data) == {live.session_id, new.session_id}
    assert old.session_id not in store._data
