from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import gigboard.models  # noqa: F401  (registers tables)
from gigboard.core.rate_limiter import rate_limiter
from gigboard.database import Base, get_db, _enable_sqlite_foreign_keys
from gigboard.dependencies import get_current_profile
from gigboard.main import app
from gigboard.repos import job_repo, profile_repo
from gigboard.services.notifications import close_all as close_inboxes
from gigboard.services.realtime import EventHub

T0 = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


@dataclass
class StubProfile:
    id: str = "user-1"
    full_name: str | None = "Asha Rao"
    username: str | None = "asha"
    avatar_url: str | None = None
    phone: str | None = "+91 98765 43210"
    bio: str | None = None

    @property
    def display_name(self) -> str:
        return self.full_name or self.username or "User"


@pytest.fixture
def stub_profile() -> StubProfile:
    return StubProfile()


@pytest.fixture
def client(stub_profile: StubProfile):
    def _db_override():
        yield object()

    app.dependency_overrides[get_db] = _db_override
    app.dependency_overrides[get_current_profile] = lambda: stub_profile
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def _reset_process_state():
    rate_limiter.reset()
    yield
    close_inboxes()
    rate_limiter.reset()


@pytest.fixture
def db_session():
    """Fresh in-memory SQLite database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = Session()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def hub() -> EventHub:
    return EventHub()


@pytest.fixture
def recorded(hub: EventHub) -> list:
    events: list = []
    hub.subscribe(None, events.append)
    return events


@pytest.fixture
def people(db_session):
    """Owner A, applicants B and D, outsider C."""
    return {
        "A": profile_repo.create(db_session, "A", full_name="Anil Owner", username="anil", phone="+91 90000 00001"),
        "B": profile_repo.create(db_session, "B", full_name="Bina Worker", username="bina"),
        "C": profile_repo.create(db_session, "C", full_name="Chetan Other", username="chetan"),
        "D": profile_repo.create(db_session, "D", full_name="Divya Worker", username="divya"),
    }


def make_job(db, owner_id: str, minutes: int = 0, **fields):
    fields.setdefault("title", "Event helper")
    fields.setdefault("amount", 500)
    return job_repo.create(db, owner_id, created_at=T0 + timedelta(minutes=minutes), **fields)
