"""Shared fixtures: temp JSON store, controllable clock, app client."""

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from cms.context import build_context
from cms.store import JsonDocumentStore
from cms.utils.config import AuthSettings, Settings, StoreSettings


class FakeClock:
    """Callable clock that only moves when told to"""

    def __init__(self, start: datetime = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        store=StoreSettings(
            connection_string=f"json://{tmp_path}",
            database_id="ledger1",
            container_id="cms",
        ),
        auth=AuthSettings(bcrypt_rounds=4, session_sweep_interval_seconds=0),
    )


@pytest.fixture
def store(tmp_path: Path) -> JsonDocumentStore:
    s = JsonDocumentStore(tmp_path, "ledger1", "cms")
    s.initialize()
    return s


@pytest.fixture
def cms(settings, store, clock):
    return build_context(settings, store=store, clock=clock)


@pytest.fixture
def credentials(cms):
    return cms.credentials


@pytest.fixture
def sessions(cms):
    return cms.sessions


@pytest.fixture
def content(cms):
    return cms.content


@pytest.fixture
def client(cms):
    from cms_web.main import create_app

    with TestClient(create_app(context=cms)) as test_client:
        yield test_client


@pytest.fixture
def admin(credentials):
    return credentials.create_user("root", "rootpass", role="admin")


@pytest.fixture
def editor(credentials):
    return credentials.create_user("alice", "pw123", role="editor")


def _login(client: TestClient, username: str, password: str) -> dict:
    res = client.post("/api/cms/auth", json={"username": username, "password": password})
    assert res.status_code == 200, res.text
    return {"Authorization": f"Bearer {res.json()['token']}"}


@pytest.fixture
def login():
    """Log in through the API and return bearer headers"""
    return _login


@pytest.fixture
def admin_headers(client, admin):
    return _login(client, "root", "rootpass")


@pytest.fixture
def editor_headers(client, editor):
    return _login(client, "alice", "pw123")
