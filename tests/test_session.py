"""Auth state lifecycle and the session stores."""

import json

import pytest

from tiffin.schemas import Role, User
from tiffin.services.storage import (
    FileSessionStore,
    MemorySessionStore,
    ROLE_KEY,
    TOKEN_KEY,
    USER_KEY,
)
from tiffin.state import AuthState

ASHA = User(id="u1", email="asha@tiffinbuddy.in", name="Asha", role=Role.CUSTOMER)
ADMIN = User(id="u2", email="admin@tiffinbuddy.in", name="Admin", role=Role.ADMIN)


def test_starts_signed_out_on_empty_store():
    auth = AuthState(MemorySessionStore())
    assert not auth.is_authenticated
    assert auth.user is None
    assert auth.token is None
    assert auth.role is None


def test_login_persists_all_session_keys():
    store = MemorySessionStore()
    auth = AuthState(store)
    auth.login("tok-1", ADMIN)

    assert auth.is_authenticated
    assert auth.is_admin
    assert store.get(TOKEN_KEY) == "tok-1"
    assert store.get(ROLE_KEY) == "admin"
    assert json.loads(store.get(USER_KEY))["email"] == ADMIN.email


def test_login_rejects_empty_token():
    auth = AuthState(MemorySessionStore())
    with pytest.raises(ValueError):
        auth.login("", ASHA)
    assert not auth.is_authenticated


def test_session_is_restored_from_store():
    store = MemorySessionStore()
    AuthState(store).login("tok-1", ASHA)

    restored = AuthState(store)
    assert restored.token == "tok-1"
    assert restored.user == ASHA
    assert restored.role == Role.CUSTOMER


def test_token_without_user_is_discarded():
    store = MemorySessionStore({TOKEN_KEY: "tok-1", ROLE_KEY: "customer"})
    auth = AuthState(store)
    assert not auth.is_authenticated
    assert store.snapshot() == {}


def test_unreadable_user_is_discarded():
    store = MemorySessionStore({TOKEN_KEY: "tok-1", USER_KEY: "{not json"})
    auth = AuthState(store)
    assert not auth.is_authenticated
    assert store.get(TOKEN_KEY) is None


def test_legacy_user_role_reads_as_customer():
    raw = json.dumps({"_id": "u9", "email": "old@tiffinbuddy.in", "name": "Old", "role": "user"})
    auth = AuthState(MemorySessionStore({TOKEN_KEY: "tok", USER_KEY: raw}))
    assert auth.role == Role.CUSTOMER


@pytest.mark.parametrize("end", ["logout", "expire"])
def test_ending_a_session_clears_state_and_store(end):
    store = MemorySessionStore({"unrelated": "keep"})
    auth = AuthState(store)
    auth.login("tok-1", ASHA)

    getattr(auth, end)()

    assert not auth.is_authenticated
    assert auth.token is None
    assert store.snapshot() == {"unrelated": "keep"}


def test_file_store_survives_new_instance(tmp_path):
    path = tmp_path / "nested" / "session.json"
    AuthState(FileSessionStore(path)).login("tok-1", ASHA)

    assert path.exists()
    restored = AuthState(FileSessionStore(path))
    assert restored.user == ASHA


def test_file_store_clear_session_keeps_other_keys(tmp_path):
    store = FileSessionStore(tmp_path / "session.json")
    store.set("theme", "dark")
    store.set(TOKEN_KEY, "tok")
    store.clear_session()

    assert store.get(TOKEN_KEY) is None
    assert store.get("theme") == "dark"


def test_file_store_treats_corrupt_file_as_empty(tmp_path):
    path = tmp_path / "session.json"
    path.write_text("garbage", encoding="utf-8")
    store = FileSessionStore(path)

    assert store.get(TOKEN_KEY) is None
    store.set(TOKEN_KEY, "tok")
    assert json.loads(path.read_text(encoding="utf-8")) == {TOKEN_KEY: "tok"}


def test_file_store_remove_missing_key(tmp_path):
    store = FileSessionStore(tmp_path / "session.json")
    store.remove("nothing")
    assert store.get("nothing") is None
