"""System health endpoints."""

from fastapi import APIRouter, Depends

from rostrum.web.debate_manager import DebateManager, get_debate_manager

router = APIRouter(prefix="/api")


@router.get("/health")
async def health_check(debate_manager: DebateManager = Depends(get_debate_manager)):
    """Health check endpoint to verify API is running."""
    return {"isAlive": True, "activeSessions": len(debate_manager.store)}
