"""
Data module - Event and audit storage, event stream.
"""

from .database import (
    init_db,
    get_db_connection,
    get_statistics,
    EventStore,
    AuditLogStore
)
from .stream import KafkaEventPublisher, EventStreamConsumer

__all__ = [
    'init_db',
    'get_db_connection',
    'get_statistics',
    'EventStore',
    'AuditLogStore',
    'KafkaEventPublisher',
    'EventStreamConsumer'
]
