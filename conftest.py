"""Shared pytest fixtures: in-memory SQLite database and a TestClient per test."""

import os
import tempfile

# Settings are read at import time, so the environment must be ready first.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-bearer-secret"
os.environ["SESSION_SECRET_KEY"] = "test-session-secret"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="devforum-uploads-")
os.environ["SMTP_HOST"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient

from app.config import settings
from app.core.security import create_access_token, create_session_token
from app.crud import crud_user
from app.database import Base, SessionLocal, engine
from app.init_db import init_db
from app.main import app

PASSWORD = "correct-horse-battery"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture(scope="session", autouse=True)
def create_schema():
    init_db(engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def clean_tables():
    yield
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make_user(name=None, email=None, password=PASSWORD, role="user"):
        counter["n"] += 1
        n = counter["n"]
        return crud_user.create_user(
            db,
            name=name or f"User {n}",
            email=email or f"user{n}@example.com",
            password=password,
            role=role,
        )

    return _make_user


@pytest.fixture
def author(make_user):
    return make_user(name="Grace Hopper", email="grace@example.com")


@pytest.fixture
def reader(make_user):
    return make_user(name="Alan Turing", email="alan@example.com")


@pytest.fixture
def admin(make_user):
    return make_user(name="Admin", email="admin@example.com", role="admin")


def bearer(user):
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


def session_cookie(user):
    return {settings.SESSION_COOKIE_NAME: create_session_token(user.id)}


def create_post(client, user, **fields):
    data = {
        "headline": "KeyError when reading settings",
        "errorDescription": "KeyError: 'DATABASE_URL'",
        "solution": "Export the variable before starting the server.",
        "codeSnippet": "os.environ['DATABASE_URL']",
        "tags": '["python", "config"]',
    }
    data.update(fields)
    resp = client.post("/api/posts", data=data, headers=bearer(user))
    assert resp.status_code == 201, resp.text
    return resp.json()


def create_comment(client, user, post_id, content="Same here, thanks!", parent_id=None):
    data = {"content": content}
    if parent_id is not None:
        data["parentId"] = str(parent_id)
    resp = client.post(f"/api/comments/post/{post_id}", data=data, headers=bearer(user))
    assert resp.status_code == 201, resp.text
    return resp.json()
