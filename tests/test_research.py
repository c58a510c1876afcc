"""Tests for the concurrent research phase."""

import asyncio

import pytest

from rostrum.debate_engine.models import Participant
from rostrum.debate_engine.types import DebatePhase, MessageType
from rostrum.models.providers import ProviderRateLimitError
from tests.conftest import RecordingConnection


@pytest.mark.unit
def test_research_streams_every_participant(make_engine, two_participants, store) -> None:
    recorder = RecordingConnection()
    engine = make_engine(two_participants, DebatePhase.RESEARCH, recorder=recorder)

    asyncio.run(engine.run_research_phase())

    session = store.get(engine.session_id)
    assert session.phase is DebatePhase.OPENING_READY
    assert session.research_complete == {"p1", "p2"}
    assert sorted(m.participant_id for m in session.messages) == ["p1", "p2"]
    assert all(m.message_type is MessageType.RESEARCH for m in session.messages)
    assert all(m.content == "Hello world" for m in session.messages)

    completes = recorder.of_type("stream-complete")
    assert {event["participantId"] for event in completes} == {"p1", "p2"}
    assert all(event["messageType"] == "research" for event in completes)
    assert len(recorder.of_type("stream-chunk")) == 4
    assert recorder.events[-1] == {"type": "phase-change", "phase": "opening-ready"}


@pytest.mark.unit
def test_chunks_within_a_stream_keep_order(make_engine, fake_provider, store) -> None:
    fake_provider.chunks["solo/model"] = ["a", "b", "c", "d"]
    recorder = RecordingConnection()
    participants = [
        Participant(id="p1", model="solo/model", position="Pro", name="Solo"),
        Participant(id="p2", model="debater/con", position="Con", name="Other"),
    ]
    engine = make_engine(participants, DebatePhase.RESEARCH, recorder=recorder)

    asyncio.run(engine.run_research_phase())

    solo_chunks = [e["chunk"] for e in recorder.of_type("stream-chunk") if e["participantId"] == "p1"]
    assert solo_chunks == ["a", "b", "c", "d"]


@pytest.mark.unit
def test_one_failure_fails_phase_but_keeps_finished_research(make_engine, fake_provider, store) -> None:
    fake_provider.failing_models = {"broken/model"}
    recorder = RecordingConnection()
    participants = [
        Participant(id="p1", model="debater/pro", position="Pro", name="Alice"),
        Participant(id="p2", model="broken/model", position="Con", name="Bob"),
        Participant(id="p3", model="debater/con", position="Con", name="Carol"),
    ]
    engine = make_engine(participants, DebatePhase.RESEARCH, recorder=recorder)

    with pytest.raises(ProviderRateLimitError):
        asyncio.run(engine.run_research_phase())

    session = store.get(engine.session_id)
    assert session.phase is DebatePhase.RESEARCH
    assert session.research_complete == {"p1", "p3"}
    assert sorted(m.participant_id for m in session.messages) == ["p1", "p3"]
    assert recorder.of_type("phase-change") == []


@pytest.mark.unit
def test_custom_system_prompt_overrides_default(make_engine, two_participants, fake_provider, store) -> None:
    engine = make_engine(two_participants, DebatePhase.RESEARCH)
    store.update(engine.session_id, custom_system_prompt="Argue like a pirate.")

    asyncio.run(engine.run_research_phase())

    assert {call["system"] for call in fake_provider.calls_of("stream")} == {"Argue like a pirate."}


@pytest.mark.unit
def test_rerun_only_researches_unfinished_participants(make_engine, two_participants, fake_provider, store) -> None:
    engine = make_engine(two_participants, DebatePhase.RESEARCH)
    store.update(engine.session_id, research_complete={"p1"})

    asyncio.run(engine.run_research_phase())

    assert [call["model"] for call in fake_provider.calls_of("stream")] == ["debater/con"]
    session = store.get(engine.session_id)
    assert session.research_complete == {"p1", "p2"}
    assert session.phase is DebatePhase.OPENING_READY
