import os
import tempfile
from datetime import datetime, timedelta

import fakeredis
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

# Point settings at a throwaway SQLite file before anything from eventhub is imported.
_TEST_DIR = tempfile.mkdtemp(prefix="eventhub-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TEST_DIR, 'test.db')}"
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from eventhub.database.db import Base, SessionLocal, engine, get_db  # noqa: E402
from eventhub.main import app  # noqa: E402
from eventhub.models.events import Event, EventStatus  # noqa: E402

# File-backed so that threads can each use their own connection
TestingSessionLocal = SessionLocal


@pytest.fixture(scope="session", autouse=True)
def setup_database():
    """Set up and tear down the database for the test session."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session():
    db: Session = TestingSessionLocal()
    try:
        for table in reversed(Base.metadata.sorted_tables):
            db.execute(table.delete())
        db.commit()
        yield db
    finally:
        db.close()


@pytest.fixture
def fake_redis():
    return fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)


@pytest.fixture(autouse=True)
def redis_client(fake_redis, monkeypatch: pytest.MonkeyPatch):
    """Route every event lock through an isolated in-memory Redis."""
    monkeypatch.setattr("eventhub.services.bookings.get_redis_client", lambda: fake_redis)
    return fake_redis


# Override the database dependency
def override_get_db():
    db: Session = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client(db_session):
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(user_id: int, status: str = "USER") -> dict[str, str]:
        return {
            "X-User-Id": str(user_id),
            "X-User-Email": f"user{user_id}@example.com",
            "X-User-Status": status,
        }

    return _headers


@pytest.fixture
def make_event(db_session: Session):
    """Insert an event row directly, VERIFIED with 10 free seats unless overridden."""

    def _make(**overrides) -> Event:
        start = overrides.pop("start_date", datetime(2030, 1, 10, 18, 0))
        values = {
            "name": "Test Event",
            "description": "",
            "event_type": "CONCERT",
            "target_audience": "ALL",
            "location": "Kyiv",
            "address": "Khreshchatyk 1",
            "is_online": False,
            "price": 0.0,
            "images": [],
            "start_date": start,
            "end_date": start + timedelta(hours=3),
            "total_seats": 10,
            "available_seats": None,
            "status": EventStatus.VERIFIED.value,
            "mood_score": 0,
            "owner_id": 1,
        }
        values.update(overrides)
        if values["available_seats"] is None:
            values["available_seats"] = values["total_seats"]

        event = Event(**values)
        db_session.add(event)
        db_session.commit()
        db_session.refresh(event)
        return event

    return _make
