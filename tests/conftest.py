"""Pytest fixtures — file-backed SQLite database for fast, isolated tests."""
import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from ticketing.database import Base, get_db
from ticketing.main import app
from ticketing.services.email_service import EmailDeliveryError, EmailTransport, get_email_transport

# Import all models so they register with Base.metadata
from ticketing.models.user import User                               # noqa: F401
from ticketing.models.community import Community, CommunityMember    # noqa: F401
from ticketing.models.event import Event                             # noqa: F401
from ticketing.models.form import Form                               # noqa: F401
from ticketing.models.form_response import FormResponse              # noqa: F401
from ticketing.models.check_in import CheckIn                        # noqa: F401

SQLITE_URL = "sqlite:///./test.db"


class RecordingTransport(EmailTransport):
    """Keeps sent messages in memory; set ``fail`` to simulate an SMTP outage."""

    def __init__(self):
        self.outbox = []
        self.fail = False

    def send(self, message):
        if self.fail:
            raise EmailDeliveryError("SMTP server unavailable")
        self.outbox.append(message)


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False, "timeout": 30})

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
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def db(session_factory):
    """Yield a database session, closed after the test."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def transport():
    return RecordingTransport()


@pytest.fixture(scope="function")
def client(session_factory, transport):
    """FastAPI TestClient with the database and mail transport overridden."""

    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_email_transport] = lambda: transport
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers: create collaborators via the API, return the response JSON dict
# ---------------------------------------------------------------------------
def auth(user: dict) -> dict:
    """Request headers identifying ``user`` as the principal."""
    return {"X-User-Id": user["user_id"]}


def create_test_user(client: TestClient, name: str = "Test User", email: str = None) -> dict:
    """Helper — POST /api/users and return response JSON."""
    email = email or f"{name.lower().replace(' ', '.')}@example.com"
    resp = client.post("/api/users/", json={"display_name": name, "email": email})
    assert resp.status_code == 201, resp.text
    return resp.json()


def create_test_community(client: TestClient, creator: dict, handle: str = "test-community") -> dict:
    """Helper — POST /api/communities as ``creator`` (who becomes admin)."""
    resp = client.post("/api/communities/", json={"handle": handle, "name": "Test Community"}, headers=auth(creator))
    assert resp.status_code == 201, resp.text
    return resp.json()


def add_test_member(client: TestClient, community: dict, admin: dict, user: dict, role: str = "member") -> dict:
    resp = client.post(
        f"/api/communities/{community['community_id']}/members",
        json={"user_id": user["user_id"], "role": role},
        headers=auth(admin),
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


def create_test_event(client: TestClient, creator: dict, community: dict, title: str = "Launch Night",
                      start_time_utc: str = "2026-11-20T18:30:00+00:00", tz: str = "UTC") -> dict:
    resp = client.post("/api/events/", json={
        "community_id": community["community_id"],
        "title": title,
        "location": "Main Hall",
        "start_time_utc": start_time_utc,
        "timezone": tz,
    }, headers=auth(creator))
    assert resp.status_code == 201, resp.text
    return resp.json()


def create_test_form(client: TestClient, admin: dict, event: dict, fields: list = None, **extra) -> dict:
    payload = {"title": "Registration", "fields": fields if fields is not None else [], **extra}
    resp = client.post(f"/api/events/{event['event_id']}/forms/", json=payload, headers=auth(admin))
    assert resp.status_code == 201, resp.text
    return resp.json()


SIZE_FORM_FIELDS = [
    {"id": "Name", "label": "Name", "type": "text", "required": True},
    {"id": "Size", "label": "Size", "type": "select", "options": ["S", "M", "L"]},
]
