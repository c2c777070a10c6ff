"""Pytest fixtures — SQLite database per test, fake notifier, admin key."""
import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from rsvp_app.config import settings
from rsvp_app.database import Base, get_db
from rsvp_app.dependencies import get_notifier, memory_store
from rsvp_app.main import app

# Import all models so they register with Base.metadata
from rsvp_app.models.guest import Guest                 # noqa: F401
from rsvp_app.models.rsvp import RSVP, RSVPAttendee     # noqa: F401

SQLITE_URL = "sqlite:///./test.db"
ADMIN_KEY = "test-admin-key"
ADMIN_HEADERS = {"x-admin-key": ADMIN_KEY}


class FakeNotifier:
    """Records summaries instead of sending mail; can be told to fail."""

    enabled = True

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent = []

    def send_rsvp_notification(self, summary):
        if self.fail:
            raise RuntimeError("SMTP connection refused")
        self.sent.append(summary)


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})

    # Enable WAL mode for better concurrency
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(db_engine):
    """Yield a database session, closed after the test."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def app_settings(monkeypatch):
    """Known settings for every test: directory mode, SQL store, fixed admin key."""
    monkeypatch.setattr(settings, "ADMIN_KEY", ADMIN_KEY)
    monkeypatch.setattr(settings, "RSVP_MODE", "directory")
    monkeypatch.setattr(settings, "STORAGE_BACKEND", "sql")
    monkeypatch.setattr(settings, "MAX_ATTENDEES", 10)
    memory_store.clear()
    yield settings
    memory_store.clear()


@pytest.fixture
def open_mode(monkeypatch):
    monkeypatch.setattr(settings, "RSVP_MODE", "open")


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture(scope="function")
def client(db_engine, notifier):
    """FastAPI TestClient with database and notifier dependencies overridden."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def _override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def create_test_guest(client: TestClient, name: str = "Jane Doe", plus_ones: int = 0, kids: int = 0) -> dict:
    """Helper — POST /api/admin/guests and return response JSON."""
    resp = client.post("/api/admin/guests", headers=ADMIN_HEADERS, json={
        "full_name": name,
        "plus_ones_allowed": plus_ones,
        "kids_allowed": kids,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


def submit_rsvp(client: TestClient, primary_guest: str, attendees: list = None, guest_email: str = None):
    """Helper — POST /api/submit-rsvp and return the raw response."""
    body = {"primaryGuest": primary_guest, "attendees": attendees or []}
    if guest_email is not None:
        body["guestEmail"] = guest_email
    return client.post("/api/submit-rsvp", json=body)


def list_rsvps(client: TestClient) -> list:
    resp = client.get("/api/admin/rsvps", headers=ADMIN_HEADERS)
    assert resp.status_code == 200, resp.text
    return resp.json()["rsvps"]
