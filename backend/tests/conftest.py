"""Shared fixtures: in-memory database, stores and an offline gateway."""

import os
import sys

# Must be set before app.config is imported anywhere.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["GROQ_API_KEY"] = ""
os.environ["QWEN_API_KEY"] = ""

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401  registers every table on Base.metadata
from app.database import Base
from app.services.ai_client import AIGateway
from app.services.stores import (
    SqlChatSessionStore,
    SqlContentStore,
    SqlReadingStore,
    SqlScheduleStore,
)


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def content_store(db):
    return SqlContentStore(db)


@pytest.fixture
def reading_store(db):
    return SqlReadingStore(db)


@pytest.fixture
def schedule_store(db):
    return SqlScheduleStore(db)


@pytest.fixture
def chat_store(db):
    return SqlChatSessionStore(db)


@pytest.fixture
def mock_gateway():
    """Gateway with no providers configured, so the mock responder answers."""
    return AIGateway([])
