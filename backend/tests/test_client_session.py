"""
Tests for the client session store, its storage tiers, and the bearer
interceptor.
"""

import json

import httpx
import pytest

from marketplace.client.errors import AuthenticationError
from marketplace.client.session import SessionStore
from marketplace.client.storage import FileStorage, MemoryStorage
from marketplace.domain import Role

from conftest import user_json


def ok(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"success": True})


def test_login_remembered_goes_to_durable_tier():
    durable, ephemeral = MemoryStorage(), MemoryStorage()
    store = SessionStore(durable, ephemeral)
    ephemeral.set("token", "old")

    session = store.login("tok-1", user_json("organizer"), remember=True)

    assert session.durable is True
    assert session.role == Role.ORGANIZER
    assert durable.get("token") == "tok-1"
    assert json.loads(durable.get("user"))["role"] == "organizer"
    assert ephemeral.get("token") is None


def test_login_not_remembered_stays_in_session_tier():
    durable, ephemeral = MemoryStorage(), MemoryStorage()
    store = SessionStore(durable, ephemeral)

    store.login("tok-1", user_json(), remember=False)

    assert ephemeral.get("token") == "tok-1"
    assert durable.get("token") is None


@pytest.mark.asyncio
async def test_hydrate_authenticates_without_network(store, mock_api):
    api, sent = mock_api(ok)
    store.login("tok-1", user_json("admin"), remember=True)

    fresh = SessionStore(durable=store._durable, ephemeral=MemoryStorage())
    session = fresh.hydrate()

    assert session is not None
    assert session.role == Role.ADMIN
    assert fresh.is_authenticated
    assert sent == []


def test_hydrate_from_empty_storage_is_anonymous():
    store = SessionStore(MemoryStorage(), MemoryStorage())
    assert store.hydrate() is None
    assert not store.is_authenticated


def test_hydrate_discards_corrupt_user():
    durable = MemoryStorage()
    durable.set("token", "tok-1")
    durable.set("user", "{not json")
    store = SessionStore(durable, MemoryStorage())

    assert store.hydrate() is None
    assert durable.get("token") is None
    assert durable.get("user") is None


def test_hydrate_discards_unknown_role():
    durable = MemoryStorage()
    durable.set("token", "tok-1")
    durable.set("user", json.dumps({**user_json(), "role": "superuser"}))
    store = SessionStore(durable, MemoryStorage())

    assert store.hydrate() is None
    assert not store.is_authenticated


def test_file_storage_survives_restart(tmp_path):
    path = tmp_path / "session.json"
    store = SessionStore(FileStorage(path), MemoryStorage())
    store.login("tok-durable", user_json("organizer", user_id=5), remember=True)

    restarted = SessionStore(FileStorage(path), MemoryStorage())
    session = restarted.hydrate()
    assert session.token == "tok-durable"
    assert session.user.id == 5

    restarted.logout()
    assert not path.exists()


def test_file_storage_corrupt_file_reads_empty(tmp_path):
    path = tmp_path / "session.json"
    path.write_text("garbage", encoding="utf-8")
    assert FileStorage(path).get("token") is None


@pytest.mark.asyncio
async def test_requests_carry_bearer_token(store, mock_api):
    api, sent = mock_api(ok)
    store.login("tok-1", user_json(), remember=False)

    await api.get("/auth/me")

    assert sent[0].headers["Authorization"] == "Bearer tok-1"


@pytest.mark.asyncio
async def test_logout_clears_both_tiers_and_header(store, mock_api):
    api, sent = mock_api(ok)
    store.login("tok-1", user_json(), remember=True)
    store._ephemeral.set("token", "stray")

    store.logout()
    await api.get("/events")

    assert store._durable.get("token") is None
    assert store._ephemeral.get("token") is None
    assert "Authorization" not in sent[0].headers


@pytest.mark.asyncio
async def test_unauthorized_response_invalidates_session(store, mock_api):
    def expired(request):
        return httpx.Response(401, json={"success": False, "message": "Session expired, please sign in again"})

    api, sent = mock_api(expired)
    store.login("tok-1", user_json(), remember=True)

    with pytest.raises(AuthenticationError):
        await api.get("/auth/me")

    assert not store.is_authenticated
    assert store._durable.get("token") is None
