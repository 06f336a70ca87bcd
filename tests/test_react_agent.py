"""Tests for the think / act / observe agent."""

from src.core.field_extractor import extract
from src.core.react_agent import Action, ActionKind, ReActAgent
from tests.fakes import TODAY, counter_ids

QUERY = "Schedule a quality review meeting friday at 2pm"


def test_think_embeds_query_without_extracting(agent):
    thought = agent.think(QUERY)
    assert f'"{QUERY}"' in thought
    assert thought.startswith("Analyzing query:")


def test_act_wraps_extracted_fields(agent):
    action = agent.act(QUERY, agent.think(QUERY))

    assert action.kind is ActionKind.CREATE_CALENDAR_EVENT
    assert action.details == extract(QUERY, TODAY)
    assert action.description == "Creating calendar event: quality review meeting"


def test_observe_creates_event_with_fresh_id(agent):
    action = agent.act(QUERY, "")
    first = agent.observe(action, "ana@company.com")
    second = agent.observe(action, "ana@company.com")

    assert first.success
    assert first.event.id == "evt-1"
    assert second.event.id == "evt-2"
    assert first.event.email == "ana@company.com"
    assert first.event.date == "2026-10-23"
    assert first.event.time == "2:00 PM"
    assert first.event.attendees == "quality@company.com"
    assert first.message == "Successfully created calendar event: quality review meeting"


def test_observe_rejects_unknown_action_kind(agent):
    details = extract(QUERY, TODAY)
    action = Action(kind="SEND_EMAIL", details=details, description="Sending email")

    observation = agent.observe(action, "ana@company.com")

    assert observation.success is False
    assert observation.event is None
    assert "Unknown action type" in observation.message
    assert observation.to_dict() == {'success': False, 'message': observation.message}


def test_run_records_three_steps_in_order(agent):
    run = agent.run("ana@company.com", QUERY)

    assert [step['step'] for step in run.iterations] == ['think', 'act', 'observe']
    assert run.success
    assert run.iterations[2]['content'] == run.observation.message


def test_event_transport_record_omits_owner(agent):
    event = agent.run("ana@company.com", QUERY).observation.event
    record = event.to_dict()

    assert set(record) == {'id', 'title', 'date', 'time', 'attendees', 'description'}
    assert record['description'] == QUERY


def test_default_collaborators_produce_unique_ids():
    agent = ReActAgent()
    ids = {agent.run("ana@company.com", QUERY).observation.event.id for _ in range(5)}
    assert len(ids) == 5


def test_clock_is_consulted_on_each_run():
    days = iter([TODAY, TODAY.replace(day=22)])
    agent = ReActAgent(clock=lambda: next(days), id_factory=counter_ids("e"))

    assert agent.run("a@b.c", "sync").observation.event.date == "2026-10-20"
    assert agent.run("a@b.c", "sync").observation.event.date == "2026-10-23"
