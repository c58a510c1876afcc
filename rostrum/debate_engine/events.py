"""Push-channel event payloads sent from server to clients."""

from typing import Any, Literal, NotRequired, TypedDict

from .types import DebatePhase, MessageType


class PhaseChangeEvent(TypedDict):
    type: Literal["phase-change"]
    phase: str


class PositionsGeneratedEvent(TypedDict):
    type: Literal["positions-generated"]
    positions: list[str]
    topic: str


class TurnChangeEvent(TypedDict):
    type: Literal["turn-change"]
    participantId: str


class StreamChunkEvent(TypedDict):
    type: Literal["stream-chunk"]
    participantId: str
    chunk: str


class StreamCompleteEvent(TypedDict):
    type: Literal["stream-complete"]
    participantId: str
    messageType: NotRequired[str]


class JudgeCompleteEvent(TypedDict):
    type: Literal["judge-complete"]
    judgeId: str
    winner: str
    reasoning: str


class DebateCompleteEvent(TypedDict):
    type: Literal["debate-complete"]
    votingResult: dict[str, Any]


class ErrorEvent(TypedDict):
    type: Literal["error"]
    message: str


type DebateEvent = (
    PhaseChangeEvent
    | PositionsGeneratedEvent
    | TurnChangeEvent
    | StreamChunkEvent
    | StreamCompleteEvent
    | JudgeCompleteEvent
    | DebateCompleteEvent
    | ErrorEvent
)


def phase_change(phase: DebatePhase) -> PhaseChangeEvent:
    return {"type": "phase-change", "phase": phase.value}


def positions_generated(positions: list[str], topic: str) -> PositionsGeneratedEvent:
    return {"type": "positions-generated", "positions": list(positions), "topic": topic}


def turn_change(participant_id: str) -> TurnChangeEvent:
    return {"type": "turn-change", "participantId": participant_id}


def stream_chunk(participant_id: str, chunk: str) -> StreamChunkEvent:
    return {"type": "stream-chunk", "participantId": participant_id, "chunk": chunk}


def stream_complete(
    participant_id: str, message_type: MessageType | None = None
) -> StreamCompleteEvent:
    event: StreamCompleteEvent = {"type": "stream-complete", "participantId": participant_id}
    if message_type is not None:
        event["messageType"] = message_type.value
    return event


def judge_complete(judge_id: str, winner: str, reasoning: str) -> JudgeCompleteEvent:
    return {
        "type": "judge-complete",
        "judgeId": judge_id,
        "winner": winner,
        "reasoning": reasoning,
    }


def debate_complete(voting_result: dict[str, Any]) -> DebateCompleteEvent:
    return {"type": "debate-complete", "votingResult": voting_result}


def error(message: str) -> ErrorEvent:
    return {"type": "error", "message": message}
