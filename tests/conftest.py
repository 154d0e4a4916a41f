"""Shared fixtures: in-memory database and an API client per test."""

import os

# Must be set before the app (and its engine) is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_TO_FILE"] = "0"
os.environ.pop("ADMIN_EMAIL", None)
os.environ.pop("ADMIN_PASSWORD", None)

import pytest
from fastapi.testclient import TestClient

from life_organizer.main import app
from life_organizer.models.db import Base, SessionLocal, engine


@pytest.fixture
def client():
    """Fresh schema for every test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db_session(client):
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _register(client, email, role=None, full_name="Test User", password="secret123"):
    body = {"full_name": full_name, "email": email, "password": password}
    if role:
        body["role"] = role
    resp = client.post("/api/auth/register", json=body)
    assert resp.status_code == 201, resp.text
    data = resp.json()
    return {"Authorization": f"Bearer {data['token']}"}, data["user"]


@pytest.fixture
def newcomer(client):
    """(headers, user) for a freshly registered newcomer."""
    return _register(client, "newcomer@example.com", full_name="Nia Newcomer")


@pytest.fixture
def other_newcomer(client):
    return _register(client, "other@example.com", full_name="Omar Other")


@pytest.fixture
def admin(client):
    return _register(client, "admin@example.com", role="admin", full_name="Ada Admin")
