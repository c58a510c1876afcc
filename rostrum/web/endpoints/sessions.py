"""Debate session lifecycle endpoints."""

import logging

from fastapi import APIRouter, Depends

from rostrum.debate_engine.types import DebatePhase
from rostrum.web.debate_manager import DebateManager, get_debate_manager
from rostrum.web.session_requests import ConfirmRequest, TopicRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/session")


@router.post("")
async def create_session(debate_manager: DebateManager = Depends(get_debate_manager)):
    """Create a new debate session."""
    return {"sessionId": debate_manager.create_session()}


@router.get("/{session_id}")
async def get_session(
    session_id: str, debate_manager: DebateManager = Depends(get_debate_manager)
):
    """Get a full snapshot of the session."""
    return debate_manager.get_session(session_id).to_dict()


@router.post("/{session_id}/topic")
async def submit_topic(
    session_id: str,
    request: TopicRequest,
    debate_manager: DebateManager = Depends(get_debate_manager),
):
    """Submit the topic and generate suggested positions."""
    positions = await debate_manager.submit_topic(session_id, request.topic)
    return {"positions": positions}


@router.post("/{session_id}/confirm")
async def confirm_positions(
    session_id: str,
    request: ConfirmRequest,
    debate_manager: DebateManager = Depends(get_debate_manager),
):
    """Confirm participants, positions and judges."""
    await debate_manager.confirm(session_id, request)
    return {"success": True}


@router.post("/{session_id}/start-research")
async def start_research(
    session_id: str, debate_manager: DebateManager = Depends(get_debate_manager)
):
    await debate_manager.start_phase(session_id, DebatePhase.RESEARCH)
    return {"success": True}


@router.post("/{session_id}/start-opening")
async def start_opening(
    session_id: str, debate_manager: DebateManager = Depends(get_debate_manager)
):
    await debate_manager.start_phase(session_id, DebatePhase.OPENING_STATEMENTS)
    return {"success": True}


@router.post("/{session_id}/start-debate")
async def start_debate(
    session_id: str, debate_manager: DebateManager = Depends(get_debate_manager)
):
    await debate_manager.start_phase(session_id, DebatePhase.DEBATE)
    return {"success": True}


@router.post("/{session_id}/start-judging")
async def start_judging(
    session_id: str, debate_manager: DebateManager = Depends(get_debate_manager)
):
    await debate_manager.start_phase(session_id, DebatePhase.JUDGING)
    return {"success": True}
