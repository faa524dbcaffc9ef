import json

import httpx
import pytest

from utils.auth_session import TOKEN_KEY, USER_KEY, AuthSession, FileTokenStore, MemoryTokenStore

ALICE = {"username": "alice", "email": "alice@caffinity.com", "password": "Secret123!"}


@pytest.fixture
def store():
    return MemoryTokenStore()


@pytest.fixture
def session(client, store):
    return AuthSession(client=client, store=store)


def test_register_signs_in(session, store):
    result = session.register(ALICE)

    assert result == {"success": True}
    assert session.is_authenticated
    assert session.user["name"] == "alice"
    assert session.user["email"] == "alice@caffinity.com"
    assert session.user["phone"] == ""
    assert store.get(TOKEN_KEY)
    assert json.loads(store.get(USER_KEY))["email"] == "alice@caffinity.com"


def test_register_duplicate_reports_message(session):
    session.register(ALICE)
    session.logout()

    result = session.register(ALICE)

    assert result["success"] is False
    assert "already exists" in result["message"]
    assert not session.is_authenticated


def test_login_with_wrong_password(session, store):
    session.register(ALICE)
    session.logout()

    result = session.login(ALICE["email"], "nope")

    assert result == {"success": False, "message": "Invalid email or password"}
    assert store.get(TOKEN_KEY) is None


def test_check_session_restores_saved_user(client, session, store):
    session.register(ALICE)

    restored = AuthSession(client=client, store=store)
    assert restored.loading is True
    user = restored.check_session()

    assert restored.loading is False
    assert user["email"] == ALICE["email"]
    assert restored.token == session.token


def test_check_session_without_token(client, store):
    store.set(USER_KEY, json.dumps({"id": 1, "name": "ghost"}))
    restored = AuthSession(client=client, store=store)

    assert restored.check_session() is None
    assert not restored.is_authenticated


def test_check_session_with_corrupt_user(client, store):
    store.set(USER_KEY, "{not json")
    store.set(TOKEN_KEY, "abc")
    restored = AuthSession(client=client, store=store)

    assert restored.check_session() is None
    assert restored.loading is False


def test_logout_clears_store(session, store):
    session.register(ALICE)

    session.logout()

    assert session.user is None
    assert store.get(USER_KEY) is None
    assert store.get(TOKEN_KEY) is None
    assert session.auth_headers() == {}


def test_token_is_accepted_by_the_api(client, session):
    session.register(ALICE)

    response = client.get("/api/auth/profile", headers=session.auth_headers())

    assert response.status_code == 200
    assert response.json()["data"]["email"] == ALICE["email"]


def test_update_profile_merges_into_user_record(session, store):
    session.register(ALICE)
    user_id = session.user["id"]

    result = session.update_profile({"phone": "0812345678", "address": "Jl. Kopi 7", "seat": "window"})

    assert result == {"success": True}
    assert session.user["phone"] == "0812345678"
    assert session.user["address"] == "Jl. Kopi 7"
    assert session.user["name"] == "alice"
    assert session.user["id"] == user_id
    assert session.user["seat"] == "window"
    assert json.loads(store.get(USER_KEY))["phone"] == "0812345678"


def test_update_profile_without_session(session):
    result = session.update_profile({"phone": "0812345678"})

    assert result["success"] is False
    assert result["message"] == "Access token required"


def test_network_error_is_reported():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = httpx.Client(base_url="http://caffinity.invalid", transport=httpx.MockTransport(refuse))
    session = AuthSession(client=client)

    assert session.login("a@b.com", "x") == {"success": False, "message": "Network error"}
    assert session.register(ALICE) == {"success": False, "message": "Network error"}
    session.close()


def test_file_store_survives_restart(client, tmp_path):
    path = tmp_path / "session.json"
    first = AuthSession(client=client, store=FileTokenStore(path))
    first.register(ALICE)

    second = AuthSession(client=client, store=FileTokenStore(path))

    assert second.check_session()["email"] == ALICE["email"]
    assert second.token == first.token

    second.logout()
    assert json.loads(path.read_text(encoding="utf-8")) == {}
