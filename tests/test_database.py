"""Tests for the sqlite event and audit stores."""

import sqlite3

import pytest

from src.core.pipeline import ReasoningTrace
from src.core.react_agent import CalendarEvent
from src.data.database import AuditLogStore, EventStore, get_db_connection, get_statistics, init_db


def make_event(event_id, email="ana@company.com", title="review meeting"):
    return CalendarEvent(
        id=event_id,
        email=email,
        title=title,
        date="2026-10-20",
        time="10:00 AM",
        attendees="team@company.com",
        description=f"Schedule a {title}"
    )


def make_trace(trace_id, email="ana@company.com"):
    return ReasoningTrace(
        id=trace_id,
        email=email,
        query="Schedule a review meeting",
        thought="Analyzing query",
        action="Creating calendar event: review meeting",
        observation="Successfully created calendar event: review meeting",
        result='{"success": true}',
        correlation_id=f"corr-{trace_id}"
    )


def test_init_db_creates_tables(db_path):
    conn = get_db_connection(db_path)
    try:
        tables = {row['name'] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
    finally:
        conn.close()
    assert {'calendar_events', 'react_logs'} <= tables


def test_init_db_is_idempotent_and_reset_clears(db_path):
    store = EventStore(db_path)
    store.insert(make_event("e1"))

    init_db(db_path)
    assert store.count() == 1

    init_db(db_path, reset=True)
    assert store.count() == 0


def test_init_db_creates_parent_directory(tmp_path):
    path = tmp_path / "nested" / "dir" / "calendar.db"
    init_db(path)
    assert path.exists()


def test_event_insert_and_query_newest_first(db_path):
    store = EventStore(db_path)
    for event_id in ("e1", "e2", "e3"):
        store.insert(make_event(event_id))
    store.insert(make_event("other", email="bo@company.com"))

    rows = store.query_by_identity("ana@company.com")

    assert [row['id'] for row in rows] == ["e3", "e2", "e1"]
    assert rows[0]['email'] == "ana@company.com"
    assert rows[0]['created_at']


def test_query_limit(db_path):
    store = AuditLogStore(db_path)
    for trace_id in range(5):
        store.insert(make_trace(str(trace_id)))

    rows = store.query_by_identity("ana@company.com", limit=2)

    assert [row['id'] for row in rows] == ["4", "3"]
    assert rows[0]['correlation_id'] == "corr-4"


def test_unknown_identity_returns_empty(db_path):
    assert EventStore(db_path).query_by_identity("nobody@company.com") == []


def test_duplicate_id_raises(db_path):
    store = EventStore(db_path)
    store.insert(make_event("e1"))
    with pytest.raises(sqlite3.IntegrityError):
        store.insert(make_event("e1"))


def test_missing_schema_raises(tmp_path):
    store = AuditLogStore(tmp_path / "empty.db")
    with pytest.raises(sqlite3.OperationalError):
        store.insert(make_trace("t1"))


def test_statistics(db_path):
    EventStore(db_path).insert(make_event("e1"))
    audit = AuditLogStore(db_path)
    audit.insert(make_trace("t1"))
    audit.insert(make_trace("t2", email="bo@company.com"))

    assert get_statistics(db_path) == {
        'total_events': 1,
        'total_logs': 2,
        'distinct_requesters': 2
    }
