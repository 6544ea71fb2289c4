"""Shared fixtures: in-memory SQLite database, recording push provider, TestClient."""
import time

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from lms_chat.core.config import Settings
from lms_chat.core.database import Database
from lms_chat.core.migrations import run_migrations
from lms_chat.main import create_app


class RecordingPushProvider:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent = []

    async def send(self, notification):
        if self.fail:
            raise RuntimeError("FCM unavailable")
        self.sent.append(notification)
        return f"projects/test/messages/{len(self.sent)}"


def make_database() -> Database:
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    return Database(engine)


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite+aiosqlite://",
        public_base_url="http://testserver",
        max_upload_bytes=1024,
        firebase_credentials_path=None,
        allowed_origins=["*"],
    )


@pytest.fixture
def make_push_provider():
    return RecordingPushProvider


@pytest.fixture
def push_provider(make_push_provider):
    return make_push_provider()


@pytest.fixture
def app(settings, push_provider):
    return create_app(settings=settings, database=make_database(), push_provider=push_provider)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
async def database():
    db = make_database()
    await run_migrations(db.engine)
    yield db
    await db.dispose()


@pytest.fixture
async def session(database):
    async with database.session() as db_session:
        yield db_session


@pytest.fixture
def sync_user(client):
    def _sync(firebase_uid, full_name=None, role="student", email=None):
        response = client.post("/api/sync-user", json={
            "firebase_uid": firebase_uid,
            "email": email or f"{firebase_uid}@example.com",
            "full_name": full_name or firebase_uid.upper(),
            "role": role,
        })
        assert response.status_code == 200, response.text
        return response.json()
    return _sync


@pytest.fixture
def wait_until():
    def _wait(predicate, timeout=2.0):
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if predicate():
                return True
            time.sleep(0.01)
        return predicate()
    return _wait


@pytest.fixture
def run_db(client, app):
    """Run `fn(session)` against the app's database on the client's event loop"""
    def _run(fn):
        async def runner():
            async with app.state.database.session() as db_session:
                return await fn(db_session)
        return client.portal.call(runner)
    return _run
