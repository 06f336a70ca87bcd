"""Shared fixtures for the pipeline tests."""

import pytest

from src.core.pipeline import CalendarPipeline
from src.core.react_agent import ReActAgent
from src.data.database import AuditLogStore, EventStore, init_db
from tests.fakes import TODAY, InMemoryStore, RecordingPublisher, counter_ids


@pytest.fixture
def agent():
    return ReActAgent(clock=lambda: TODAY, id_factory=counter_ids("evt"))


@pytest.fixture
def event_store():
    return InMemoryStore()


@pytest.fixture
def audit_store():
    return InMemoryStore()


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
def pipeline(agent, event_store, audit_store, publisher):
    return CalendarPipeline(
        event_store=event_store,
        audit_store=audit_store,
        publisher=publisher,
        agent=agent,
        id_factory=counter_ids("corr")
    )


@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "calendar.db"
    init_db(path)
    return path


@pytest.fixture
def sqlite_pipeline(db_path, agent, publisher):
    return CalendarPipeline(
        event_store=EventStore(db_path),
        audit_store=AuditLogStore(db_path),
        publisher=publisher,
        agent=agent
    )
