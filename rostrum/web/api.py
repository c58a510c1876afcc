"""FastAPI web application for the Rostrum debate arena."""

import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from rostrum import __version__
from rostrum.config.settings import AppConfig, get_default_config
from rostrum.debate_engine.broadcaster import EventBroadcaster
from rostrum.debate_engine.exceptions import DebateError
from rostrum.debate_engine.session_store import SessionStore
from rostrum.models.manager import ModelManager
from rostrum.web.debate_manager import DebateManager
from rostrum.web.endpoints.models import router as models_router
from rostrum.web.endpoints.sessions import router as sessions_router
from rostrum.web.endpoints.system import router as system_router
from rostrum.web.endpoints.websocket import ws_router

logger: logging.Logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifespan - startup and shutdown."""
    logger.info("Rostrum API started")

    yield

    # Shutdown: cancel phase tasks still running
    await app.state.debate_manager.shutdown()
    logger.info("Rostrum API stopped")


def get_allowed_origins() -> list[str] | None:
    """Get CORS origins from environment or use development defaults."""
    env_origins: str | None = os.environ.get("ALLOWED_ORIGINS")
    if env_origins:
        origins = [origin.strip() for origin in env_origins.split(",")]
        return origins
    return None


async def debate_error_handler(_: Request, exc: DebateError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})


async def unhandled_error_handler(_: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error: {exc}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(
    config: AppConfig | None = None, model_manager: ModelManager | None = None
) -> FastAPI:
    """Build the application with its own store, broadcaster and managers."""
    app_config = config or get_default_config()

    app: FastAPI = FastAPI(
        title="Rostrum Debate Arena",
        description="Live multi-phase debates between AI models",
        version=__version__,
        lifespan=lifespan,
    )

    allowed_origins: list[str] | None = get_allowed_origins()

    if allowed_origins:
        logger.info(f"Setting CORS allowed origins: {allowed_origins}")

        # Production: Use specific origins
        app.add_middleware(
            CORSMiddleware,
            allow_origins=allowed_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    else:
        logger.info("No ALLOWED_ORIGINS set, using development CORS settings")

        # Development: Allow any localhost/127.0.0.1
        app.add_middleware(
            CORSMiddleware,
            allow_origin_regex=r"https?://(localhost|127\.0\.0\.1)(:\d+)?",
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    store = SessionStore(app_config.debate)
    broadcaster = EventBroadcaster()
    manager = model_manager or ModelManager(app_config.system)

    app.state.config = app_config
    app.state.store = store
    app.state.broadcaster = broadcaster
    app.state.model_manager = manager
    app.state.debate_manager = DebateManager(
        store, broadcaster, manager, app_config.debate
    )

    app.add_exception_handler(DebateError, debate_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(sessions_router)
    app.include_router(models_router)
    app.include_router(system_router)
    app.include_router(ws_router)

    return app
