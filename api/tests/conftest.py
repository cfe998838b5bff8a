import os

# Configure the app before any studyloop imports
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import datetime, timedelta

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine
from starlette.testclient import TestClient

# Ensure all models are registered
from studyloop import models  # noqa: F401
from studyloop.core.database import get_session
from studyloop.main import app
from studyloop.services import topic_service
from studyloop.services.srs_service import get_progress

NOW = datetime(2026, 3, 10, 9, 0, 0)
TODAY = NOW.date()


class StepProjector:
    """Projector with explicit per-level intervals in days, for predictable tests."""

    def __init__(self, days_by_level, default_days=30):
        self.days_by_level = days_by_level
        self.default_days = default_days

    def project(self, due_at, level):
        return due_at + timedelta(days=self.days_by_level.get(level, self.default_days))


class StuckProjector:
    """Projector that never moves a date forward."""

    def project(self, due_at, level):
        return due_at


@pytest.fixture(name="engine")
def engine_fixture():
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(test_engine)
    yield test_engine
    SQLModel.metadata.drop_all(test_engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(engine):
    def override():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="alice")
def alice_fixture(session):
    return topic_service.create_user(session, "alice")


@pytest.fixture(name="bob")
def bob_fixture(session):
    return topic_service.create_user(session, "bob")


@pytest.fixture(name="make_topic")
def make_topic_fixture(session):
    """Create a topic with `n_cards` cards; optionally mark it as reviewing for its owner."""

    def make(user_id, title="Kanji", n_cards=2, reviewing=True):
        topic = topic_service.create_topic(session, user_id, title)
        cards = [
            topic_service.add_card(session, topic.id, f"front {i}", f"back {i}")
            for i in range(n_cards)
        ]
        if reviewing:
            topic_service.update_config(session, topic.id, user_id, reviewing=True)
        return topic, cards

    return make


@pytest.fixture(name="set_progress")
def set_progress_fixture(session):
    """Overwrite fields of a user's progress record on a card."""

    def set_fields(card_id, user_id, **fields):
        progress = get_progress(session, card_id, user_id)
        for name, value in fields.items():
            setattr(progress, name, value)
        session.add(progress)
        session.commit()
        session.refresh(progress)
        return progress

    return set_fields
