"""Pytest fixtures: throwaway SQLite database per test, plus API helpers."""
import os
import uuid
from datetime import datetime, timedelta, timezone

# Settings are read at import time; keep the app off PostgreSQL and SMTP
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SMTP_HOST"] = ""
os.environ["SUPER_ADMIN_EMAIL"] = ""

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from eventhub.database import Base, get_db
from eventhub.main import app
from eventhub.models.admin import Admin, AdminRole, Permission
from eventhub.services import admin_service

DEFAULT_PASSWORD = "secret123"
ADMIN_PASSWORD = "adminpass"


@pytest.fixture(scope="function")
def db_engine(tmp_path):
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(f"sqlite:///{tmp_path / 'test.db'}", connect_args={"check_same_thread": False})

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
    """Yield a database session bound to the test engine."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_engine):
    """FastAPI TestClient with the database dependency overridden to use SQLite."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def _override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def signup_user(client: TestClient, name: str = "Test User", email: str = None,
                password: str = DEFAULT_PASSWORD) -> dict:
    """Helper: POST /api/auth/signup; adds ready-made ``headers`` to the response JSON."""
    email = email or f"{uuid.uuid4().hex[:10]}@eventhub.dev"
    resp = client.post("/api/auth/signup", json={"name": name, "email": email, "password": password})
    assert resp.status_code == 201, resp.text
    data = resp.json()
    data["headers"] = auth_headers(data["token"])
    return data


def event_payload(start_offset_days: int = 7, duration_hours: int = 2, **overrides) -> dict:
    start = datetime.now(timezone.utc) + timedelta(days=start_offset_days)
    payload = {
        "title": "Python Meetup",
        "description": "Monthly meetup with talks and pizza",
        "location": {"address": "1 Main St", "city": "Berlin", "country": "Germany"},
        "start_time_utc": start.isoformat(),
        "end_time_utc": (start + timedelta(hours=duration_hours)).isoformat(),
        "timezone": "Europe/Berlin",
        "category": "Technology",
        "capacity": 50,
    }
    payload.update(overrides)
    return payload


def create_test_event(client: TestClient, headers: dict, **overrides) -> dict:
    """Helper: POST /api/events and return the event JSON."""
    resp = client.post("/api/events/", json=event_payload(**overrides), headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["event"]


def send_rsvp(client: TestClient, event_id: str, headers: dict, status: str = "attending", **extra):
    return client.post(f"/api/rsvps/events/{event_id}", json={"status": status, **extra}, headers=headers)


def create_test_admin(db, permissions: list[Permission] = None, role: AdminRole = AdminRole.admin,
                      email: str = None) -> Admin:
    """Helper: insert an admin directly; the API has no open admin signup."""
    return admin_service.create_admin(
        db,
        email or f"admin-{uuid.uuid4().hex[:8]}@eventhub.dev",
        ADMIN_PASSWORD,
        "Test Admin",
        role=role,
        permissions=permissions,
    )


def admin_headers(client: TestClient, admin: Admin, password: str = ADMIN_PASSWORD) -> dict:
    resp = client.post("/api/auth/admin/login", json={"email": admin.email, "password": password})
    assert resp.status_code == 200, resp.text
    return auth_headers(resp.json()["token"])
