"""Tests for the three-judge panel, vote tallying and winner matching."""

import asyncio
import json

import pytest

from rostrum.debate_engine.models import DebateMessage, JudgeVerdict
from rostrum.debate_engine.types import DebatePhase, MessageType
from rostrum.judges import SUMMARY_FALLBACK, create_judges, match_position, tally_votes
from rostrum.models.providers import ProviderError, ProviderSchemaError
from tests.conftest import JUDGE_MODELS, RecordingConnection

POSITIONS = ["Pro-X", "Con-X"]


def verdict(index: int, winner: str) -> JudgeVerdict:
    return JudgeVerdict(
        judge_id=f"judge-{index}",
        judge_name=f"Judge {index}",
        model=f"judge/{index}",
        winner=winner,
        reasoning="Because.",
        raw_response="{}",
    )


def script_votes(fake_provider, *winners: str) -> None:
    for model, winner in zip(JUDGE_MODELS, winners):
        fake_provider.structured[model] = {"winner": winner, "reasoning": f"{model} says {winner}"}


@pytest.mark.unit
def test_majority_wins() -> None:
    result = tally_votes([verdict(1, "A"), verdict(2, "A"), verdict(3, "B")])

    assert result.winner == "A"
    assert result.is_tie is False
    assert result.vote_counts == {"A": 2, "B": 1}


@pytest.mark.unit
def test_three_way_split_is_tie() -> None:
    result = tally_votes([verdict(1, "A"), verdict(2, "B"), verdict(3, "C")])

    assert result.winner is None
    assert result.is_tie is True
    assert sum(result.vote_counts.values()) == 3


@pytest.mark.unit
@pytest.mark.parametrize(
    ("reported", "expected"),
    [
        ("Pro-X", "Pro-X"),
        ("pro-x", "Pro-X"),
        ("  CON-X ", "Con-X"),
        ("the pro-X side", "Pro-X"),
        ("Con", "Con-X"),
        ("Neither", None),
        ("", None),
    ],
)
def test_match_position(reported: str, expected: str | None) -> None:
    assert match_position(reported, POSITIONS) == expected


@pytest.mark.unit
def test_create_judges_requires_three_models(model_manager) -> None:
    with pytest.raises(ValueError):
        create_judges(["only/one"], model_manager)

    judges = create_judges(JUDGE_MODELS, model_manager)
    assert [j.judge_id for j in judges] == ["judge-1", "judge-2", "judge-3"]
    assert [j.name for j in judges] == ["Judge 1", "Judge 2", "Judge 3"]


def judged_engine(make_engine, two_participants, store, recorder=None):
    engine = make_engine(two_participants, DebatePhase.JUDGING, recorder=recorder)
    store.get(engine.session_id).messages.extend(
        [
            DebateMessage("p1", "X is great", DebatePhase.OPENING_STATEMENTS, MessageType.STATEMENT),
            DebateMessage("p2", "X is terrible", DebatePhase.DEBATE, MessageType.STATEMENT),
        ]
    )
    return engine


@pytest.mark.integration
def test_run_judging_completes_debate(make_engine, two_participants, store, fake_provider) -> None:
    script_votes(fake_provider, "Pro-X", "pro-x", "Con-X")
    fake_provider.responses["judge/a"] = "The panel favoured Pro-X."
    recorder = RecordingConnection()
    engine = judged_engine(make_engine, two_participants, store, recorder)

    asyncio.run(engine.run_judging())

    session = store.get(engine.session_id)
    result = session.voting_result
    assert session.phase is DebatePhase.COMPLETE
    assert result.winner == "Pro-X"
    assert result.vote_counts == {"Pro-X": 2, "Con-X": 1}
    assert result.summary == "The panel favoured Pro-X."
    assert [v.judge_id for v in result.verdicts] == ["judge-1", "judge-2", "judge-3"]
    assert json.loads(result.verdicts[1].raw_response)["winner"] == "pro-x"

    assert len(recorder.of_type("judge-complete")) == 3
    assert [e["type"] for e in recorder.events[-2:]] == ["debate-complete", "phase-change"]
    assert recorder.events[-2]["votingResult"]["winner"] == "Pro-X"
    assert recorder.events[-1]["phase"] == "complete"

    judge_prompt = fake_provider.calls_of("structured")[0]["prompt"]
    assert "Alice (Pro-X): X is great\n\n---\n\nBob (Con-X): X is terrible" in judge_prompt


@pytest.mark.integration
def test_unmatched_winner_forms_own_bucket(make_engine, two_participants, store, fake_provider) -> None:
    script_votes(fake_provider, "Pro-X", "Nobody won", "Con-X")
    engine = judged_engine(make_engine, two_participants, store)

    asyncio.run(engine.run_judging())

    result = store.get(engine.session_id).voting_result
    assert result.is_tie is True
    assert result.winner is None
    assert result.vote_counts == {"Pro-X": 1, "Nobody won": 1, "Con-X": 1}


@pytest.mark.integration
def test_summary_failure_uses_fallback(make_engine, two_participants, store, fake_provider) -> None:
    script_votes(fake_provider, "Con-X", "Con-X", "Con-X")
    fake_provider.responses["judge/a"] = ProviderError("fake", "judge/a", "unavailable")
    engine = judged_engine(make_engine, two_participants, store)

    asyncio.run(engine.run_judging())

    result = store.get(engine.session_id).voting_result
    assert result.winner == "Con-X"
    assert result.summary == SUMMARY_FALLBACK


@pytest.mark.integration
def test_verdicts_keep_judge_order_when_finishing_out_of_order(
    make_engine, two_participants, store, fake_provider
) -> None:
    script_votes(fake_provider, "Pro-X", "Con-X", "Con-X")
    original = fake_provider.generate_structured
    delays = {"judge/a": 0.03, "judge/b": 0.02, "judge/c": 0.0}

    async def slow_structured(model, system_prompt, user_prompt, schema, *, temperature=0.7):
        await asyncio.sleep(delays[model])
        return await original(model, system_prompt, user_prompt, schema, temperature=temperature)

    fake_provider.generate_structured = slow_structured
    recorder = RecordingConnection()
    engine = judged_engine(make_engine, two_participants, store, recorder)

    asyncio.run(engine.run_judging())

    result = store.get(engine.session_id).voting_result
    assert [v.judge_id for v in result.verdicts] == ["judge-1", "judge-2", "judge-3"]
    # Announcements follow completion order
    assert [e["judgeId"] for e in recorder.of_type("judge-complete")] == [
        "judge-3",
        "judge-2",
        "judge-1",
    ]


@pytest.mark.integration
def test_schema_failure_fails_judging(make_engine, two_participants, store, fake_provider) -> None:
    script_votes(fake_provider, "Pro-X", "Pro-X", "Pro-X")
    fake_provider.structured["judge/b"] = ProviderSchemaError("fake", "judge/b", "bad json")
    engine = judged_engine(make_engine, two_participants, store)

    with pytest.raises(ProviderSchemaError):
        asyncio.run(engine.run_judging())

    session = store.get(engine.session_id)
    assert session.phase is DebatePhase.JUDGING
    assert session.voting_result is None
