"""Phase validation and background task management for debate sessions."""

import asyncio
import logging

from fastapi.requests import HTTPConnection

from rostrum.config.settings import DebateConfig
from rostrum.debate_engine import events
from rostrum.debate_engine.broadcaster import EventBroadcaster
from rostrum.debate_engine.core import DebateEngine
from rostrum.debate_engine.exceptions import PhaseTransitionError, SessionNotFoundError
from rostrum.debate_engine.models import DebateSession, Participant, color_for_index
from rostrum.debate_engine.session_store import SessionStore
from rostrum.debate_engine.types import DebatePhase, checkpoint_for
from rostrum.models.manager import ModelManager
from rostrum.web.session_requests import ConfirmRequest

logger = logging.getLogger(__name__)

PHASE_HANDLERS: dict[DebatePhase, str] = {
    DebatePhase.RESEARCH: "run_research_phase",
    DebatePhase.OPENING_STATEMENTS: "run_opening_statements",
    DebatePhase.DEBATE: "run_debate_rounds",
    DebatePhase.JUDGING: "run_judging",
}


class DebateManager:
    """Validates requested transitions and runs phase handlers in the background."""

    def __init__(
        self,
        store: SessionStore,
        broadcaster: EventBroadcaster,
        model_manager: ModelManager,
        config: DebateConfig | None = None,
    ):
        self.store = store
        self.broadcaster = broadcaster
        self.model_manager = model_manager
        self.config = config or DebateConfig()
        self._engines: dict[str, DebateEngine] = {}
        # At most one running phase task per session
        self._tasks: dict[str, asyncio.Task[None]] = {}

    @property
    def active_tasks(self) -> int:
        return len(self._tasks)

    def is_running(self, session_id: str) -> bool:
        task = self._tasks.get(session_id)
        return task is not None and not task.done()

    def create_session(self) -> str:
        return self.store.create()

    def get_session(self, session_id: str) -> DebateSession:
        session = self.store.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def engine_for(self, session_id: str) -> DebateEngine:
        """Return the engine bound to ``session_id``, creating it on first use."""
        engine = self._engines.get(session_id)
        if engine is None:
            engine = DebateEngine(
                session_id, self.store, self.broadcaster, self.model_manager, self.config
            )
            self._engines[session_id] = engine
        return engine

    def _require_phase(self, session: DebateSession, expected: DebatePhase) -> None:
        if session.phase != expected:
            raise PhaseTransitionError(session.phase, expected)

    async def _move_to(self, session_id: str, phase: DebatePhase, **fields) -> None:
        self.store.update(session_id, phase=phase, **fields)
        await self.broadcaster.publish(session_id, events.phase_change(phase))

    async def submit_topic(self, session_id: str, topic: str) -> list[str]:
        """Store the topic, generate positions and wait for confirmation."""
        session = self.get_session(session_id)
        self._require_phase(session, DebatePhase.TOPIC_PROPOSAL)

        await self._move_to(session_id, DebatePhase.POSITION_GENERATION, topic=topic)
        positions = await self.engine_for(session_id).generate_positions(topic)

        self.store.update(
            session_id,
            suggested_positions=positions,
            phase=DebatePhase.POSITION_CONFIRMATION,
        )
        await self.broadcaster.publish(
            session_id, events.positions_generated(positions, topic)
        )
        await self.broadcaster.publish(
            session_id, events.phase_change(DebatePhase.POSITION_CONFIRMATION)
        )
        return positions

    async def confirm(self, session_id: str, request: ConfirmRequest) -> None:
        """Fix participants and debate settings, then wait at research-ready."""
        session = self.get_session(session_id)
        self._require_phase(session, DebatePhase.POSITION_CONFIRMATION)

        participants = [
            Participant(
                id=item.id or f"participant-{index + 1}",
                model=item.model,
                position=item.position,
                name=item.name or f"Participant {index + 1}",
                color=item.color or color_for_index(index),
            )
            for index, item in enumerate(request.participants)
        ]

        await self._move_to(
            session_id,
            DebatePhase.RESEARCH_READY,
            participants=participants,
            confirmed_positions=request.resolved_positions(),
            max_rounds=request.max_rounds or session.max_rounds,
            judge_models=list(request.judge_models or session.judge_models),
            custom_system_prompt=request.custom_system_prompt,
        )
        logger.info(
            f"[{session_id}] Confirmed {len(participants)} participants "
            f"for {request.max_rounds or session.max_rounds} rounds"
        )

    async def start_phase(self, session_id: str, active_phase: DebatePhase) -> None:
        """Leave the matching ready checkpoint and run the phase in the background.

        A phase whose task failed stays in its active phase; starting it
        again re-runs the handler once no task for the session is running.
        """
        session = self.get_session(session_id)
        checkpoint = checkpoint_for(active_phase)

        if self.is_running(session_id):
            raise PhaseTransitionError(session.phase, checkpoint)

        if session.phase == active_phase:
            logger.info(f"[{session_id}] Retrying {active_phase.value} phase")
        else:
            self._require_phase(session, checkpoint)
            await self._move_to(session_id, active_phase)

        task = asyncio.create_task(self._run_phase(session_id, active_phase))
        self._tasks[session_id] = task
        task.add_done_callback(lambda done: self._forget_task(session_id, done))

    def _forget_task(self, session_id: str, task: asyncio.Task[None]) -> None:
        if self._tasks.get(session_id) is task:
            del self._tasks[session_id]

    async def _run_phase(self, session_id: str, active_phase: DebatePhase) -> None:
        engine = self.engine_for(session_id)
        handler = getattr(engine, PHASE_HANDLERS[active_phase])
        try:
            await handler()
        except Exception as e:
            logger.exception(f"[{session_id}] {active_phase.value} phase failed")
            await self.broadcaster.publish(
                session_id, events.error(f"{active_phase.value} failed: {e}")
            )

    async def shutdown(self) -> None:
        """Cancel outstanding phase tasks."""
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.info(f"Cancelled {len(tasks)} running phase task(s)")


def get_debate_manager(connection: HTTPConnection) -> DebateManager:
    """FastAPI dependency returning the application's debate manager."""
    return connection.app.state.debate_manager


def get_model_manager(connection: HTTPConnection) -> ModelManager:
    return connection.app.state.model_manager


def get_broadcaster(connection: HTTPConnection) -> EventBroadcaster:
    return connection.app.state.broadcaster
