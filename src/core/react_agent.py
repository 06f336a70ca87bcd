"""
ReAct Agent Module - Think / Act / Observe Reasoning Trace

Wraps the field extractor in a fixed three-step narrative so that every
processed request leaves an auditable record of what was decided and why.
The steps always run once, in order, with no retries.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from src.core.field_extractor import EventFields, extract

logger = logging.getLogger(__name__)


class ActionKind(str, Enum):
    """Actions the agent can take. Only calendar event creation exists today."""
    CREATE_CALENDAR_EVENT = "CREATE_CALENDAR_EVENT"


@dataclass(frozen=True)
class CalendarEvent:
    """A calendar event accepted by the agent."""
    id: str
    email: str
    title: str
    date: str
    time: str
    attendees: str
    description: str

    def to_dict(self) -> Dict[str, str]:
        """Transport representation (the owner is carried alongside, not inside)."""
        return {
            'id': self.id,
            'title': self.title,
            'date': self.date,
            'time': self.time,
            'attendees': self.attendees,
            'description': self.description
        }


@dataclass(frozen=True)
class Action:
    kind: ActionKind
    details: EventFields
    description: str


@dataclass(frozen=True)
class Observation:
    success: bool
    message: str
    event: Optional[CalendarEvent] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {'success': self.success, 'message': self.message}
        if self.event is not None:
            result['event'] = self.event.to_dict()
        return result


@dataclass
class AgentRun:
    """Outcome of one think/act/observe pass."""
    thought: str
    action: Action
    observation: Observation
    iterations: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.observation.success


class ReActAgent:
    """
    Runs the think -> act -> observe sequence for a scheduling request.

    The clock and id generator are injectable so runs can be reproduced
    in tests.
    """

    def __init__(self, clock: Callable[[], date] = date.today,
                 id_factory: Callable[[], str] = lambda: str(uuid.uuid4())):
        self.clock = clock
        self.id_factory = id_factory

    def think(self, query: str) -> str:
        return (
            f'Analyzing query: "{query}". User wants to schedule an event. '
            f'I need to extract event details and create a calendar entry.'
        )

    def act(self, query: str, thought: str) -> Action:
        details = extract(query, today=self.clock())
        return Action(
            kind=ActionKind.CREATE_CALENDAR_EVENT,
            details=details,
            description=f"Creating calendar event: {details.title}"
        )

    def observe(self, action: Action, email: str) -> Observation:
        """
        Carry out the action and report the outcome.

        Unknown action kinds produce an unsuccessful observation without
        an event.
        """
        if action.kind == ActionKind.CREATE_CALENDAR_EVENT:
            details = action.details
            event = CalendarEvent(
                id=self.id_factory(),
                email=email,
                title=details.title,
                date=details.date,
                time=details.time,
                attendees=details.attendees,
                description=details.description
            )
            return Observation(
                success=True,
                event=event,
                message=f"Successfully created calendar event: {event.title}"
            )

        kind = getattr(action.kind, 'value', action.kind)
        logger.warning(f"Unknown action type: {kind}")
        return Observation(success=False, message=f"Unknown action type: {kind}")

    def run(self, email: str, query: str) -> AgentRun:
        thought = self.think(query)
        action = self.act(query, thought)
        observation = self.observe(action, email)

        return AgentRun(
            thought=thought,
            action=action,
            observation=observation,
            iterations=[
                {'step': 'think', 'content': thought},
                {'step': 'act', 'content': action.description},
                {'step': 'observe', 'content': observation.message},
            ]
        )
