"""Shared fixtures: in-memory database, API client, fake AI provider, time helpers."""

import os

# Must be set before config/database are imported anywhere
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SUPABASE_JWT_SECRET"] = "test-secret"
os.environ["GEMINI_API_KEYS"] = ""
os.environ["BADGE_TIMEZONE"] = "UTC"

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import models  # noqa: F401
from database import Base
from providers.base import BaseProvider


NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
DAY_MS = 24 * 60 * 60 * 1000
HOUR_MS = 60 * 60 * 1000


def ms(dt: datetime) -> int:
    return int(dt.timestamp() * 1000)


def days_ago(n: int, now: datetime = NOW) -> int:
    """Millisecond timestamp n calendar days before `now` (same time of day)."""
    return ms(now - timedelta(days=n))


class FakeProvider(BaseProvider):
    """Replays canned replies; None in the queue simulates a failed call."""

    def __init__(self, replies=None, provider_name="fake"):
        self.replies = list(replies or [])
        self.calls = []
        self._name = provider_name

    @property
    def name(self) -> str:
        return self._name

    async def chat(self, messages, model=None, image_base64=None, json_output=False):
        self.calls.append({"messages": messages, "image_base64": image_base64, "json_output": json_output})
        reply = self.replies.pop(0) if self.replies else None
        if reply is None:
            return self._result(model or "fake-model", error="boom")
        return self._result(model or "fake-model", text=reply)


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def fake_provider():
    return FakeProvider()


@pytest.fixture
def client(db, fake_provider):
    from fastapi.testclient import TestClient

    from database import get_db
    from main import app
    from services.coach_service import CoachService, get_coach

    def override_get_db():
        yield db

    coach = CoachService(providers=[fake_provider])
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_coach] = lambda: coach
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    from auth import create_token

    return {"Authorization": f"Bearer {create_token('user-1')}"}
