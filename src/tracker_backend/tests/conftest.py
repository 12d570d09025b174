"""
Pytest configuration and fixtures for all tests.

Every test gets its own in-memory SQLite database, a fresh notification hub
and an in-memory blob store standing in for MinIO.
"""

import pytest
from typing import Optional
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tracker_backend.database import get_db
from tracker_backend.interface.users import UserCreate
from tracker_backend.model import Base
from tracker_backend.notifications.hub import NotificationHub
from tracker_backend.server import app
from tracker_backend.services.auth_service import AuthService
from tracker_backend.services.storage_service import get_storage_service
from tracker_backend.tests.fixtures import InMemoryStorageService


@pytest.fixture
def engine():
    """In-memory database shared by every session of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def SessionFactory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(SessionFactory):
    """Create a new database session for a test."""
    session = SessionFactory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def hub():
    return NotificationHub(queue_size=100)


@pytest.fixture
def storage():
    return InMemoryStorageService()


@pytest.fixture
def make_user(db):
    """Register a user directly through the service layer."""
    counter = {"n": 0}

    def _make_user(username: Optional[str] = None, email: Optional[str] = None, password: str = "password123"):
        counter["n"] += 1
        username = username or f"user{counter['n']:03d}"
        email = email or f"{username}@example.com"
        return AuthService(db).register(UserCreate(
            username=username,
            email=email,
            password=password,
            first_name="Test",
            last_name="User",
        ))

    return _make_user


@pytest.fixture
def client(SessionFactory, hub, storage):
    """TestClient wired to the per-test database, hub and blob store."""

    def override_get_db():
        session = SessionFactory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage_service] = lambda: storage
    previous_hub = app.state.notification_hub
    app.state.notification_hub = hub

    yield TestClient(app)

    app.dependency_overrides.clear()
    app.state.notification_hub = previous_hub
