"""
Core module - Field extraction, ReAct reasoning and pipeline orchestration.
"""

from .field_extractor import EventFields, extract
from .react_agent import ActionKind, Action, AgentRun, CalendarEvent, Observation, ReActAgent
from .pipeline import (
    CalendarPipeline,
    EffectStatus,
    PipelineResult,
    ReasoningTrace,
    RequestValidationError,
    build_pipeline
)

__all__ = [
    'EventFields',
    'extract',
    'ActionKind',
    'Action',
    'AgentRun',
    'CalendarEvent',
    'Observation',
    'ReActAgent',
    'CalendarPipeline',
    'EffectStatus',
    'PipelineResult',
    'ReasoningTrace',
    'RequestValidationError',
    'build_pipeline'
]
