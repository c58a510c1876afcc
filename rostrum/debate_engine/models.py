"""Data models for the debate engine."""

from typing import Any
from dataclasses import dataclass, field
from datetime import datetime
import uuid

from .types import DebatePhase, MessageType

PARTICIPANT_COLORS: tuple[str, ...] = (
    "blue",
    "red",
    "green",
    "purple",
    "orange",
    "pink",
    "cyan",
    "teal",
    "indigo",
    "amber",
)


def color_for_index(index: int) -> str:
    """Cycle through the fixed palette."""
    return PARTICIPANT_COLORS[index % len(PARTICIPANT_COLORS)]


@dataclass(frozen=True)
class Participant:
    """A model-backed debater bound to one position."""

    id: str
    model: str
    position: str
    name: str
    color: str = "blue"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "model": self.model,
            "position": self.position,
            "name": self.name,
            "color": self.color,
        }


@dataclass(frozen=True)
class DebateMessage:
    """A single message in the debate log."""

    participant_id: str
    content: str
    phase: DebatePhase
    message_type: MessageType
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "participantId": self.participant_id,
            "content": self.content,
            "timestamp": self.timestamp.isoformat(),
            "phase": self.phase.value,
            "messageType": self.message_type.value,
        }


@dataclass(frozen=True)
class JudgeVerdict:
    """One judge's vote and reasoning."""

    judge_id: str
    judge_name: str
    model: str
    winner: str
    reasoning: str
    raw_response: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "judgeId": self.judge_id,
            "judgeName": self.judge_name,
            "model": self.model,
            "winner": self.winner,
            "reasoning": self.reasoning,
            "rawResponse": self.raw_response,
        }


@dataclass
class VotingResult:
    """Aggregated panel outcome."""

    winner: str | None
    is_tie: bool
    vote_counts: dict[str, int]
    verdicts: list[JudgeVerdict]
    summary: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "winner": self.winner,
            "isTie": self.is_tie,
            "voteCounts": dict(self.vote_counts),
            "verdicts": [verdict.to_dict() for verdict in self.verdicts],
            "judgeSummary": self.summary,
        }


@dataclass
class DebateSession:
    """Full mutable state of one debate."""

    session_id: str
    phase: DebatePhase = DebatePhase.TOPIC_PROPOSAL
    topic: str = ""
    suggested_positions: list[str] = field(default_factory=list)
    confirmed_positions: list[str] = field(default_factory=list)
    participants: list[Participant] = field(default_factory=list)
    messages: list[DebateMessage] = field(default_factory=list)
    current_turn: int = 0
    round_number: int = 1
    max_rounds: int = 3
    research_complete: set[str] = field(default_factory=set)
    judge_models: list[str] = field(default_factory=list)
    custom_system_prompt: str | None = None
    voting_result: VotingResult | None = None
    created_at: datetime = field(default_factory=datetime.now)

    def get_participant(self, participant_id: str) -> Participant | None:
        for participant in self.participants:
            if participant.id == participant_id:
                return participant
        return None

    def messages_in_phases(self, phases: frozenset[DebatePhase]) -> list[DebateMessage]:
        """Messages produced during any of ``phases``, oldest first."""
        return [message for message in self.messages if message.phase in phases]

    def to_dict(self) -> dict[str, Any]:
        """Snapshot for the HTTP API (camelCase keys)."""
        return {
            "sessionId": self.session_id,
            "phase": self.phase.value,
            "topic": self.topic,
            "suggestedPositions": list(self.suggested_positions),
            "confirmedPositions": list(self.confirmed_positions),
            "participants": [p.to_dict() for p in self.participants],
            "messages": [m.to_dict() for m in self.messages],
            "currentTurn": self.current_turn,
            "roundNumber": self.round_number,
            "maxRounds": self.max_rounds,
            "researchComplete": sorted(self.research_complete),
            "judgeModels": list(self.judge_models),
            "customSystemPrompt": self.custom_system_prompt,
            "votingResult": self.voting_result.to_dict() if self.voting_result else None,
            "createdAt": self.created_at.isoformat(),
        }
