"""Pytest bootstrap: isolated settings, in-memory database and API client."""

import io
import itertools
import os
import sys
import tempfile
from pathlib import Path

# Ensure project root is on sys.path so `import socialpod` works without installing
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Settings are read at import time, so configure them before importing socialpod.
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="socialpod-media-")
os.environ["EMAIL_NOTIFICATIONS_ENABLED"] = "false"
os.environ["POD_URL"] = "http://pod.test"

import pytest
from PIL import Image
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from socialpod.crud import user as user_crud
from socialpod.database import Base, get_db
from socialpod.services import photo_service
from socialpod.utils.security import issue_user_token


def png_bytes(width: int = 120, height: int = 80, color=(200, 30, 30)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def client(db_session):
    from fastapi.testclient import TestClient
    from socialpod.main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    counter = itertools.count(1)

    def _make(username=None, first_name="Test", last_name=None):
        number = next(counter)
        username = username or f"user{number}"
        user = user_crud.create_user(
            db_session,
            username=username,
            email=f"{username}@example.org",
            password="password123",
            first_name=first_name,
            last_name=last_name or f"User{number}",
        )
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def make_photo(db_session):
    def _make(user, aspect_ids=None, pending=False):
        return photo_service.create_photo(
            db_session,
            user,
            content=png_bytes(),
            content_type="image/png",
            pending=pending,
            aspect_ids=aspect_ids,
        )

    return _make


def read_write_token(user) -> str:
    return issue_user_token(user, ["read", "write"])


def read_only_token(user) -> str:
    return issue_user_token(user, ["read"])
