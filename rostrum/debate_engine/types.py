"""Shared enums and phase ordering for the debate engine."""

from enum import Enum


class DebatePhase(str, Enum):
    """Phases of a debate session, in lifecycle order."""

    TOPIC_PROPOSAL = "topic-proposal"
    POSITION_GENERATION = "position-generation"
    POSITION_CONFIRMATION = "position-confirmation"
    RESEARCH_READY = "research-ready"
    RESEARCH = "research"
    OPENING_READY = "opening-ready"
    OPENING_STATEMENTS = "opening-statements"
    DEBATE_READY = "debate-ready"
    DEBATE = "debate"
    JUDGING_READY = "judging-ready"
    JUDGING = "judging"
    COMPLETE = "complete"


class MessageType(str, Enum):
    """Kinds of messages in a session's log."""

    RESEARCH = "research"
    STATEMENT = "statement"
    QUESTION = "question"
    RESPONSE = "response"
    JUDGMENT = "judgment"


PHASE_ORDER: tuple[DebatePhase, ...] = tuple(DebatePhase)

# Checkpoints that wait for an operator, mapped to the phase they unlock
READY_CHECKPOINTS: dict[DebatePhase, DebatePhase] = {
    DebatePhase.RESEARCH_READY: DebatePhase.RESEARCH,
    DebatePhase.OPENING_READY: DebatePhase.OPENING_STATEMENTS,
    DebatePhase.DEBATE_READY: DebatePhase.DEBATE,
    DebatePhase.JUDGING_READY: DebatePhase.JUDGING,
}

# Message phases that make up the spoken transcript
TRANSCRIPT_PHASES: frozenset[DebatePhase] = frozenset(
    {DebatePhase.OPENING_STATEMENTS, DebatePhase.DEBATE}
)


def is_forward_transition(current: DebatePhase, target: DebatePhase) -> bool:
    """Return True if moving from ``current`` to ``target`` goes forward."""
    return PHASE_ORDER.index(target) > PHASE_ORDER.index(current)


def checkpoint_for(active_phase: DebatePhase) -> DebatePhase:
    """Return the ready checkpoint that must precede ``active_phase``."""
    for checkpoint, unlocked in READY_CHECKPOINTS.items():
        if unlocked == active_phase:
            return checkpoint
    raise ValueError(f"{active_phase.value} is not started from a ready checkpoint")
