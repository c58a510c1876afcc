"""In-memory store of debate sessions."""

import dataclasses
import logging
import uuid
from typing import Any

from rostrum.config.settings import DebateConfig

from .models import DebateSession

logger = logging.getLogger(__name__)


class SessionStore:
    """Holds one mutable DebateSession per session id.

    Sessions live for the lifetime of the process; nothing evicts them.
    All mutation is expected to happen on the event loop thread, so there
    is no locking.
    """

    def __init__(self, defaults: DebateConfig | None = None):
        self._defaults = defaults or DebateConfig()
        self._sessions: dict[str, DebateSession] = {}
        self._field_names = {f.name for f in dataclasses.fields(DebateSession)}

    def create(self) -> str:
        """Create a new session in the topic-proposal phase and return its id."""
        session_id = str(uuid.uuid4())
        self._sessions[session_id] = DebateSession(
            session_id=session_id,
            max_rounds=self._defaults.max_rounds,
            judge_models=list(self._defaults.judge_models),
        )
        logger.info(f"Created session {session_id}")
        return session_id

    def get(self, session_id: str) -> DebateSession | None:
        return self._sessions.get(session_id)

    def update(self, session_id: str, **fields: Any) -> None:
        """Shallow-merge ``fields`` into the session; no-op if it does not exist."""
        unknown = set(fields) - self._field_names
        if unknown:
            raise ValueError(f"Unknown session field(s): {sorted(unknown)}")

        session = self._sessions.get(session_id)
        if session is None:
            logger.debug(f"Ignoring update for unknown session {session_id}")
            return

        for name, value in fields.items():
            setattr(session, name, value)

    def session_ids(self) -> list[str]:
        return list(self._sessions)

    def __len__(self) -> int:
        return len(self._sessions)
