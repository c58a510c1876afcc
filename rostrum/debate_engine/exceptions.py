"""Exceptions raised by the debate engine and mapped to HTTP statuses."""

from .types import DebatePhase


class DebateError(Exception):
    """Base class for debate errors surfaced to API callers."""

    status_code: int = 400


class SessionNotFoundError(DebateError):
    """Raised when a session id is unknown."""

    status_code = 404

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__("Session not found")


class PhaseTransitionError(DebateError):
    """Raised when an operation is requested in the wrong phase."""

    status_code = 409

    def __init__(self, current: DebatePhase, expected: DebatePhase):
        self.current = current
        self.expected = expected
        super().__init__(
            f"Session is in phase '{current.value}', expected '{expected.value}'"
        )
