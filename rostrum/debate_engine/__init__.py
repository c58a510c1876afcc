"""Debate orchestration and flow management."""

from .broadcaster import EventBroadcaster
from .core import DebateEngine, parse_positions
from .exceptions import DebateError, PhaseTransitionError, SessionNotFoundError
from .models import (
    DebateMessage,
    DebateSession,
    JudgeVerdict,
    Participant,
    VotingResult,
)
from .session_store import SessionStore
from .types import DebatePhase, MessageType

__all__ = [
    "EventBroadcaster",
    "DebateEngine",
    "parse_positions",
    "DebateError",
    "PhaseTransitionError",
    "SessionNotFoundError",
    "DebateMessage",
    "DebateSession",
    "JudgeVerdict",
    "Participant",
    "VotingResult",
    "SessionStore",
    "DebatePhase",
    "MessageType",
]
