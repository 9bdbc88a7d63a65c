"""Tests for the credential store"""

import pytest

from cms.auth.credentials import hash_password, verify_password
from cms.models.user import USER_DOC_TYPE, USERNAME_DOC_TYPE
from cms.utils.exceptions import ConflictError, ValidationError


def test_create_user_stores_hash_not_password(credentials, store):
    user = credentials.create_user("alice", "pw123")
    assert user.role == "editor"
    assert user.id.startswith("user-")

    doc = store.read(user.id, USER_DOC_TYPE)
    assert doc["username"] == "alice"
    assert doc["passwordHash"] != "pw123"
    assert doc["passwordHash"].startswith("$2")
    assert doc["docType"] == "user"
    assert "password" not in doc


def test_duplicate_username_conflicts(credentials, store):
    credentials.create_user("alice", "pw123")
    with pytest.raises(ConflictError, match="already exists"):
        credentials.create_user("alice", "other")
    assert len(store.query(USER_DOC_TYPE)) == 1


def test_usernames_are_case_sensitive(credentials):
    credentials.create_user("alice", "pw123")
    bob = credentials.create_user("Alice", "pw123")
    assert credentials.get_user_by_username("Alice").id == bob.id
    assert credentials.get_user_by_username("ALICE") is None


def test_invalid_role_rejected(credentials):
    with pytest.raises(ValidationError):
        credentials.create_user("alice", "pw123", role="owner")


@pytest.mark.parametrize("password", ["", "x" * 73])
def test_invalid_password_rejected(credentials, password):
    with pytest.raises(ValidationError):
        credentials.create_user("alice", password)


def test_validate_credentials(credentials):
    user = credentials.create_user("alice", "pw123")
    assert credentials.validate_credentials("alice", "pw123").id == user.id
    assert credentials.validate_credentials("alice", "wrong") is None
    assert credentials.validate_credentials("nobody", "pw123") is None
    assert credentials.validate_credentials("alice", "") is None


def test_hash_and_verify():
    hashed = hash_password("secret", rounds=4)
    assert verify_password("secret", hashed)
    assert not verify_password("Secret", hashed)
    assert not verify_password("secret", "not-a-hash")


def test_update_password_keeps_role(credentials):
    user = credentials.create_user("alice", "pw123", role="admin")
    credentials.update_password(user, "newpass")
    assert credentials.validate_credentials("alice", "pw123") is None
    refreshed = credentials.validate_credentials("alice", "newpass")
    assert refreshed.role == "admin"


def test_update_role(credentials, admin):
    user = credentials.create_user("alice", "pw123")
    credentials.update_role(user, "admin")
    assert credentials.get_user_by_id(user.id).role == "admin"


def test_last_admin_cannot_be_demoted_or_deleted(credentials, admin):
    with pytest.raises(ValidationError):
        credentials.update_role(admin, "editor")
    with pytest.raises(ValidationError):
        credentials.delete_user(admin.id)


def test_delete_user_releases_username(credentials, store, admin):
    user = credentials.create_user("alice", "pw123")
    assert credentials.delete_user(user.id) is True
    assert credentials.delete_user(user.id) is False
    assert store.query(USERNAME_DOC_TYPE, equals={"username": "alice"}) == []
    # Username can be reused
    credentials.create_user("alice", "pw456")


def test_list_users(credentials, admin):
    credentials.create_user("alice", "pw123")
    names = sorted(u.username for u in credentials.list_users())
    assert names == ["alice", "root"]


def test_bootstrap_admin_only_when_empty(credentials):
    user = credentials.bootstrap_admin_if_needed("admin", "admin123")
    assert user is not None and user.role == "admin"
    assert credentials.bootstrap_admin_if_needed("admin2", "admin123") is None
    assert len(credentials.list_users()) == 1


def test_update_user_is_all_or_nothing(credentials, admin):
    with pytest.raises(ValidationError):
        credentials.update_user(admin, new_password="changed", role="editor")
    assert credentials.validate_credentials("root", "rootpass") is not None
    assert credentials.get_user_by_id(admin.id).role == "admin"


def test_update_user_single_write(credentials, store, admin, monkeypatch):
    user = credentials.create_user("alice", "pw123")
    calls = []
    original = store.replace
    monkeypatch.setattr(store, "replace", lambda doc: calls.append(doc) or original(doc))

    updated = credentials.update_user(user, new_password="changed", role="admin")
    assert len(calls) == 1
    assert updated.role == "admin"
    assert credentials.validate_credentials("alice", "changed").role == "admin"


def test_existing_user_without_reservation_conflicts(credentials, store):
    store.create({
        "id": "user-1",
        "docType": USER_DOC_TYPE,
        "username": "alice",
        "passwordHash": hash_password("old", rounds=4),
        "role": "editor",
        "createdAt": "2024-01-01T00:00:00.000000Z",
    })

    with pytest.raises(ConflictError, match="User already exists"):
        credentials.create_user("alice", "pw123")
    assert len(store.query(USER_DOC_TYPE, equals={"username": "alice"})) == 1
    assert store.query(USERNAME_DOC_TYPE) == []
