import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from devevents.database.db import ConnectionManager, SessionLocal, get_db
from devevents.main import app

# Use an in-memory SQLite database for testing; each test gets a fresh one
TEST_DATABASE_URL = "sqlite://"


@pytest.fixture
def connection_manager():
    manager = ConnectionManager(TEST_DATABASE_URL)
    yield manager
    manager.close()


@pytest.fixture
def db_session(connection_manager: ConnectionManager):
    db: Session = SessionLocal(bind=connection_manager.acquire())
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client(connection_manager: ConnectionManager):
    # Override the database dependency
    def override_get_db():
        db: Session = SessionLocal(bind=connection_manager.acquire())
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def event_data() -> dict:
    return {
        "title": "React Summit 2025",
        "description": "A comprehensive conference about React and modern web development",
        "overview": "Join us for two days of React talks, workshops, and networking",
        "image": "https://example.com/event.jpg",
        "venue": "Convention Center",
        "location": "Amsterdam, Netherlands",
        "date": "2025-11-14",
        "time": "09:00",
        "mode": "In-person",
        "audience": "Developers, Tech Enthusiasts",
        "agenda": ["Keynote", "Workshop", "Networking"],
        "organizer": "React Foundation",
        "tags": ["react", "javascript", "web-development"],
    }


@pytest.fixture
def make_event_data(event_data: dict):
    """Build event drafts from the default one, overriding selected fields."""
    def _make(**overrides) -> dict:
        return {**event_data, **overrides}

    return _make
