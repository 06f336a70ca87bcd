"""
Pipeline Module - Request Orchestration

Coordinates the full pipeline for one scheduling request:
1. Validate the request
2. Run the ReAct agent (think / act / observe)
3. Store the accepted event
4. Store the reasoning trace
5. Queue the event on the stream (never waits for the broker)

Steps 3-5 are best-effort. Each is attempted once and its outcome is
recorded on the result as an effect status; none of them can change the
reported success of the request.
"""

import json
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from src.core.react_agent import AgentRun, CalendarEvent, ReActAgent

logger = logging.getLogger(__name__)

DEFAULT_TOPIC = "calendar-events"

EFFECT_EVENT_STORE = "event_store"
EFFECT_PUBLISH = "publish"
EFFECT_AUDIT_LOG = "audit_log"


class RequestValidationError(ValueError):
    """Raised when a request is missing its identity or query."""


@dataclass(frozen=True)
class ReasoningTrace:
    """Audit record of one processed request."""
    id: str
    email: str
    query: str
    thought: str
    action: str
    observation: str
    result: str
    correlation_id: str


@dataclass(frozen=True)
class EffectStatus:
    """Outcome of one auxiliary side effect."""
    name: str
    ok: bool
    error: Optional[str] = None


@dataclass
class PipelineResult:
    """
    Primary outcome of a request plus the status of its side effects.

    ``effects`` is a side channel for logging and tests; it is not part of
    the transport record.
    """
    thought: str
    action: str
    observation: str
    correlation_id: str
    success: bool
    event: Optional[CalendarEvent] = None
    effects: List[EffectStatus] = field(default_factory=list)

    def effect(self, name: str) -> Optional[EffectStatus]:
        for status in self.effects:
            if status.name == name:
                return status
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the transport record."""
        result: Dict[str, Any] = {
            'thought': self.thought,
            'action': self.action,
            'observation': self.observation,
            'correlationId': self.correlation_id,
            'success': self.success
        }
        if self.event is not None:
            result['event'] = self.event.to_dict()
        return result


def validate_request(email: Optional[str], query: Optional[str]) -> None:
    if not isinstance(email, str) or not email.strip():
        raise RequestValidationError("Email and query are required")
    if not isinstance(query, str) or not query.strip():
        raise RequestValidationError("Email and query are required")


class CalendarPipeline:
    """
    Runs scheduling requests through the agent and its side effects.

    Stores and publisher are injected; ``publisher=None`` disables
    streaming.
    """

    def __init__(self, event_store, audit_store, publisher=None,
                 agent: Optional[ReActAgent] = None, topic: str = DEFAULT_TOPIC,
                 id_factory: Callable[[], str] = lambda: str(uuid.uuid4())):
        self.event_store = event_store
        self.audit_store = audit_store
        self.publisher = publisher
        self.agent = agent or ReActAgent()
        self.topic = topic
        self.id_factory = id_factory

    def handle(self, email: str, query: str) -> PipelineResult:
        """
        Process one scheduling request.

        Raises:
            RequestValidationError: If email or query is missing or blank
        """
        validate_request(email, query)

        run = self.agent.run(email, query)
        correlation_id = self.id_factory()
        observation = run.observation

        result = PipelineResult(
            thought=run.thought,
            action=run.action.description,
            observation=observation.message,
            correlation_id=correlation_id,
            success=observation.success,
            event=observation.event
        )

        accepted = observation.success and observation.event is not None
        if accepted:
            result.effects.append(self._store_event(observation.event))

        result.effects.append(self._store_trace(email, query, run, correlation_id))

        if accepted:
            result.effects.append(self._publish_event(email, observation.event, correlation_id))

        logger.info(
            f"Processed query for {email}: success={result.success} "
            f"correlation_id={correlation_id} "
            f"effects={[(s.name, s.ok) for s in result.effects]}"
        )
        return result

    def _store_event(self, event: CalendarEvent) -> EffectStatus:
        try:
            self.event_store.insert(event)
        except Exception as e:
            logger.error(f"Database insert error for event {event.id}: {e}")
            return EffectStatus(EFFECT_EVENT_STORE, ok=False, error=str(e))
        return EffectStatus(EFFECT_EVENT_STORE, ok=True)

    def _publish_event(self, email: str, event: CalendarEvent, correlation_id: str) -> EffectStatus:
        if self.publisher is None:
            logger.info("Kafka streaming skipped (publisher disabled)")
            return EffectStatus(EFFECT_PUBLISH, ok=False, error="publisher disabled")

        payload = {
            'correlationId': correlation_id,
            'email': email,
            'event': event.to_dict(),
            'timestamp': datetime.now(timezone.utc).isoformat()
        }
        try:
            delivered = self.publisher.publish(self.topic, correlation_id, payload)
        except Exception as e:
            logger.warning(f"Kafka streaming failed for {correlation_id}: {e}")
            return EffectStatus(EFFECT_PUBLISH, ok=False, error=str(e))

        if not delivered:
            return EffectStatus(EFFECT_PUBLISH, ok=False, error="not delivered")
        return EffectStatus(EFFECT_PUBLISH, ok=True)

    def _store_trace(self, email: str, query: str, run: AgentRun, correlation_id: str) -> EffectStatus:
        trace = ReasoningTrace(
            id=self.id_factory(),
            email=email,
            query=query,
            thought=run.thought,
            action=run.action.description,
            observation=run.observation.message,
            result=json.dumps(dict(run.observation.to_dict(), iterations=run.iterations)),
            correlation_id=correlation_id
        )
        try:
            self.audit_store.insert(trace)
        except Exception as e:
            logger.error(f"Audit log insert error for {correlation_id}: {e}")
            return EffectStatus(EFFECT_AUDIT_LOG, ok=False, error=str(e))
        return EffectStatus(EFFECT_AUDIT_LOG, ok=True)


def build_pipeline(settings) -> CalendarPipeline:
    """Wire the pipeline to the sqlite stores and Kafka from settings."""
    from src.data.database import AuditLogStore, EventStore, init_db
    from src.data.stream import KafkaEventPublisher

    init_db(settings.db_path)
    publisher = None
    if settings.kafka_enabled:
        publisher = KafkaEventPublisher(
            bootstrap_servers=settings.kafka_bootstrap_servers,
            client_id=settings.kafka_client_id,
            timeout=settings.publish_timeout
        )

    return CalendarPipeline(
        event_store=EventStore(settings.db_path, timeout=settings.db_timeout),
        audit_store=AuditLogStore(settings.db_path, timeout=settings.db_timeout),
        publisher=publisher,
        topic=settings.kafka_topic
    )
