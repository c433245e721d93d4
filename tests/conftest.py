import os
import tempfile
from typing import Generator

import pytest
from fastapi.testclient import TestClient

# Configure the app before importing it: in-memory SQLite shared across
# connections, a throwaway avatar directory and CSRF checks off (the CSRF
# tests switch them back on).
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="wikihub-avatars-")
os.environ["CSRF_ENABLED"] = "false"
os.environ.setdefault("SESSION_SECRET", "test-secret-key-long-enough-for-hmac-sha256")

from wikihub import crud  # noqa: E402
from wikihub.auth import hash_password  # noqa: E402
from wikihub.database import Base, SessionLocal, engine  # noqa: E402
from wikihub.main import app  # noqa: E402
from wikihub.models import User  # noqa: E402

DEFAULT_PASSWORD = "Secret123!"


@pytest.fixture(autouse=True)
def clean_db():
    """Reset schema for each test for isolation."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture()
def client(clean_db) -> Generator[TestClient, None, None]:
    """FastAPI test client that also triggers startup/shutdown hooks."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def db_session(client):
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def user_factory(db_session):
    """Create users directly in the database, bypassing the HTTP forms."""

    def _create_user(username: str, password: str = DEFAULT_PASSWORD) -> User:
        return crud.create_user(db_session, username, hash_password(password))

    return _create_user


@pytest.fixture()
def login(client):
    """Log the test client in through the real login form."""

    def _login(username: str, password: str = DEFAULT_PASSWORD):
        resp = client.post(
            "/login",
            data={"username": username, "password": password},
            follow_redirects=False,
        )
        assert resp.status_code == 303
        assert resp.headers["location"] == "/"
        return resp

    return _login


@pytest.fixture()
def logged_in_user(user_factory, login) -> User:
    user = user_factory("alice")
    login("alice")
    return user
