"""Fan-out of debate events to the push-channel subscribers of a session."""

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class Connection(Protocol):
    """Anything that can receive a text frame, e.g. a Starlette WebSocket."""

    async def send_text(self, data: str) -> None: ...


class EventBroadcaster:
    """Maintains subscribers per session and delivers events best-effort."""

    def __init__(self) -> None:
        self._subscribers: dict[str, list[Connection]] = {}

    def subscribe(self, session_id: str, connection: Connection) -> None:
        connections = self._subscribers.setdefault(session_id, [])
        if connection not in connections:
            connections.append(connection)

    def unsubscribe(self, session_id: str, connection: Connection) -> None:
        connections = self._subscribers.get(session_id)
        if connections and connection in connections:
            connections.remove(connection)
        if connections == []:
            del self._subscribers[session_id]

    def subscriber_count(self, session_id: str) -> int:
        return len(self._subscribers.get(session_id, []))

    async def publish(self, session_id: str, event: Mapping[str, Any]) -> None:
        """Send ``event`` to every current subscriber of ``session_id``.

        Events published with no subscribers are dropped. A failed send is
        logged and the connection pruned; it never reaches the caller.
        """
        connections = self._subscribers.get(session_id)
        if not connections:
            return

        message = json.dumps(event)
        dead_connections = []

        # Copy so subscribe/unsubscribe during an await cannot break iteration
        for connection in list(connections):
            try:
                await connection.send_text(message)
            except Exception as e:
                logger.debug(f"WebSocket send failed for session {session_id}: {e}")
                dead_connections.append(connection)

        for connection in dead_connections:
            self.unsubscribe(session_id, connection)
