"""WebSocket push channel for live debate events."""

import json
import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from rostrum.debate_engine.broadcaster import EventBroadcaster
from rostrum.web.debate_manager import get_broadcaster

logger = logging.getLogger(__name__)

ws_router = APIRouter()


@ws_router.websocket("/ws")
async def websocket_endpoint(
    websocket: WebSocket, broadcaster: EventBroadcaster = Depends(get_broadcaster)
):
    """Bind a connection to a session with a ``connect`` message, then push events."""
    await websocket.accept()
    session_id: str | None = None

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                message = json.loads(raw)
            except json.JSONDecodeError:
                logger.debug(f"Ignoring non-JSON WebSocket message: {raw[:100]}")
                continue

            if not isinstance(message, dict) or message.get("type") != "connect":
                continue

            requested = message.get("sessionId")
            if not isinstance(requested, str) or not requested:
                continue

            if session_id is not None:
                broadcaster.unsubscribe(session_id, websocket)
            session_id = requested
            broadcaster.subscribe(session_id, websocket)
            logger.info(f"WebSocket subscribed to session {session_id}")
    except WebSocketDisconnect:
        pass
    finally:
        if session_id is not None:
            broadcaster.unsubscribe(session_id, websocket)
            logger.info(f"WebSocket unsubscribed from session {session_id}")
