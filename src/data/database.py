"""
Database Module - Calendar Events and ReAct Audit Logs

Both tables are append-only logs keyed by freshly generated ids. Each
operation opens its own connection, so the stores can be shared across
request threads.
"""

import sqlite3
import logging
from pathlib import Path
from typing import Optional, List, Dict, Any, Union

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0


def get_db_connection(db_path: Union[str, Path], timeout: float = DEFAULT_TIMEOUT) -> sqlite3.Connection:
    """Get database connection with row factory enabled."""
    conn = sqlite3.connect(str(db_path), timeout=timeout)
    conn.row_factory = sqlite3.Row
    return conn


def init_db(db_path: Union[str, Path], reset: bool = False) -> None:
    """
    Initialize database schema.

    Args:
        db_path: SQLite database file
        reset: If True, drops existing tables and recreates schema
    """
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = get_db_connection(db_path)

    try:
        if reset:
            conn.execute("DROP TABLE IF EXISTS calendar_events")
            conn.execute("DROP TABLE IF EXISTS react_logs")
            conn.commit()

        _create_tables(conn)
        conn.commit()
        logger.info(f"Database {db_path} initialized{' (reset mode)' if reset else ''}")
    except Exception as e:
        logger.error(f"Error initializing database: {e}")
        conn.rollback()
        raise
    finally:
        conn.close()


def _create_tables(conn: sqlite3.Connection) -> None:
    """Create tables if they don't exist."""
    c = conn.cursor()

    c.execute('''
        CREATE TABLE IF NOT EXISTS calendar_events (
            id TEXT PRIMARY KEY,
            email TEXT NOT NULL,
            title TEXT NOT NULL,
            date TEXT NOT NULL,
            time TEXT NOT NULL,
            attendees TEXT NOT NULL,
            description TEXT NOT NULL,
            created_at DATETIME DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    c.execute('''
        CREATE TABLE IF NOT EXISTS react_logs (
            id TEXT PRIMARY KEY,
            email TEXT NOT NULL,
            query TEXT NOT NULL,
            thought TEXT,
            action TEXT,
            observation TEXT,
            result TEXT,
            correlation_id TEXT,
            created_at DATETIME DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    c.execute('CREATE INDEX IF NOT EXISTS idx_calendar_events_email ON calendar_events(email)')
    c.execute('CREATE INDEX IF NOT EXISTS idx_react_logs_email ON react_logs(email)')


class _SqliteStore:
    """Shared connection handling for the append-only tables."""

    table = ""
    columns: tuple = ()

    def __init__(self, db_path: Union[str, Path], timeout: float = DEFAULT_TIMEOUT):
        self.db_path = db_path
        self.timeout = timeout

    def _insert_row(self, values: tuple) -> None:
        placeholders = ", ".join("?" for _ in self.columns)
        conn = get_db_connection(self.db_path, self.timeout)
        try:
            conn.execute(
                f"INSERT INTO {self.table} ({', '.join(self.columns)}) VALUES ({placeholders})",
                values
            )
            conn.commit()
        finally:
            conn.close()

    def query_by_identity(self, email: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Return the records owned by ``email``, newest first."""
        sql = f"SELECT * FROM {self.table} WHERE email = ? ORDER BY created_at DESC, rowid DESC"
        params: tuple = (email,)
        if limit is not None:
            sql += " LIMIT ?"
            params += (limit,)

        conn = get_db_connection(self.db_path, self.timeout)
        try:
            rows = conn.execute(sql, params).fetchall()
        finally:
            conn.close()
        return [dict(row) for row in rows]

    def count(self) -> int:
        conn = get_db_connection(self.db_path, self.timeout)
        try:
            return conn.execute(f"SELECT COUNT(*) FROM {self.table}").fetchone()[0]
        finally:
            conn.close()


class EventStore(_SqliteStore):
    """Durable record of accepted calendar events."""

    table = "calendar_events"
    columns = ("id", "email", "title", "date", "time", "attendees", "description")

    def insert(self, event) -> str:
        """
        Append a calendar event.

        Raises:
            sqlite3.Error: If the row cannot be written
        """
        self._insert_row((
            event.id,
            event.email,
            event.title,
            event.date,
            event.time,
            event.attendees,
            event.description
        ))
        return event.id


class AuditLogStore(_SqliteStore):
    """Durable record of every processed query and its reasoning trace."""

    table = "react_logs"
    columns = ("id", "email", "query", "thought", "action", "observation", "result", "correlation_id")

    def insert(self, trace) -> str:
        """
        Append a reasoning trace.

        Raises:
            sqlite3.Error: If the row cannot be written
        """
        self._insert_row((
            trace.id,
            trace.email,
            trace.query,
            trace.thought,
            trace.action,
            trace.observation,
            trace.result,
            trace.correlation_id
        ))
        return trace.id


def get_statistics(db_path: Union[str, Path]) -> Dict[str, Any]:
    """Get row counts for both tables."""
    conn = get_db_connection(db_path)
    c = conn.cursor()

    stats = {}
    try:
        c.execute('SELECT COUNT(*) FROM calendar_events')
        stats['total_events'] = c.fetchone()[0]

        c.execute('SELECT COUNT(*) FROM react_logs')
        stats['total_logs'] = c.fetchone()[0]

        c.execute('SELECT COUNT(DISTINCT email) FROM react_logs')
        stats['distinct_requesters'] = c.fetchone()[0]
    finally:
        conn.close()
    return stats
