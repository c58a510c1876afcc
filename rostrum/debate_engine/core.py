"""Core debate engine for orchestrating AI model debates."""

import asyncio
import json
import logging
import re
import time

from rostrum.config.settings import DebateConfig
from rostrum.models.manager import ModelManager
from . import events
from . import prompts
from .broadcaster import EventBroadcaster
from .exceptions import SessionNotFoundError
from .models import DebateMessage, DebateSession, JudgeVerdict, Participant
from .session_store import SessionStore
from .types import DebatePhase, MessageType, TRANSCRIPT_PHASES

logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"^```[a-zA-Z]*\s*(.*?)\s*```$", re.DOTALL)
_QUOTED = re.compile(r'"([^"\n]+)"')

TRANSCRIPT_SEPARATOR = "\n\n---\n\n"


def parse_positions(text: str, topic: str) -> list[str]:
    """Extract position strings from a model reply.

    Tries a JSON array first, then quoted substrings, and finally falls
    back to a generic support/oppose pair. Never returns an empty list.
    """
    cleaned = text.strip()
    fenced = _CODE_FENCE.match(cleaned)
    if fenced:
        cleaned = fenced.group(1).strip()

    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError:
        parsed = None

    if isinstance(parsed, list):
        positions = [item.strip() for item in parsed if isinstance(item, str) and item.strip()]
        if positions:
            return positions

    quoted = [match.strip() for match in _QUOTED.findall(text) if match.strip()]
    if quoted:
        return quoted

    return [f"Support {topic}", f"Oppose {topic}"]


class DebateEngine:
    """Drives one session through its phases.

    Each ``run_*`` method is the body of one active phase. Handlers mutate
    the session in place, push events as they go, and finish by moving the
    session to the next "-ready" checkpoint. Provider failures propagate to
    the caller with the phase left unchanged.
    """

    def __init__(
        self,
        session_id: str,
        store: SessionStore,
        broadcaster: EventBroadcaster,
        model_manager: ModelManager,
        config: DebateConfig | None = None,
    ):
        self.session_id = session_id
        self.store = store
        self.broadcaster = broadcaster
        self.model_manager = model_manager
        self.config = config or DebateConfig()

    def _session(self) -> DebateSession:
        session = self.store.get(self.session_id)
        if session is None:
            raise SessionNotFoundError(self.session_id)
        return session

    async def _publish(self, event: events.DebateEvent) -> None:
        await self.broadcaster.publish(self.session_id, event)

    async def _set_phase(self, phase: DebatePhase, **fields) -> None:
        self.store.update(self.session_id, phase=phase, **fields)
        logger.info(f"[{self.session_id}] Phase -> {phase.value}")
        await self._publish(events.phase_change(phase))

    def _system_prompt(self, session: DebateSession, default: str) -> str:
        return session.custom_system_prompt or default

    async def generate_positions(self, topic: str | None = None) -> list[str]:
        """Ask the position model for two opposing positions on the topic."""
        debate_topic = (topic if topic is not None else self._session().topic).strip()
        if not debate_topic:
            raise ValueError("A topic is required to generate positions")

        logger.info(f"[{self.session_id}] Generating positions for: {debate_topic}")
        try:
            response = await self.model_manager.generate_response(
                self.config.position_model,
                prompts.POSITIONS_SYSTEM_PROMPT,
                prompts.positions_prompt(debate_topic),
                temperature=self.config.temperature,
            )
        except Exception as e:
            logger.error(f"[{self.session_id}] Position generation failed: {e}")
            response = ""

        positions = parse_positions(response, debate_topic)
        logger.info(f"[{self.session_id}] Suggested positions: {positions}")
        return positions

    async def _stream_turn(
        self,
        participant: Participant,
        system_prompt: str,
        user_prompt: str,
        phase: DebatePhase,
        message_type: MessageType,
        announce_type: bool = False,
    ) -> DebateMessage:
        """Stream one reply to subscribers and append it to the session log."""
        start_time = time.time()
        parts: list[str] = []

        async for chunk in self.model_manager.stream_response(
            participant.model,
            system_prompt,
            user_prompt,
            temperature=self.config.temperature,
        ):
            parts.append(chunk)
            await self._publish(events.stream_chunk(participant.id, chunk))

        message = DebateMessage(
            participant_id=participant.id,
            content="".join(parts),
            phase=phase,
            message_type=message_type,
        )
        self._session().messages.append(message)

        await self._publish(
            events.stream_complete(participant.id, message_type if announce_type else None)
        )
        logger.debug(
            f"[{self.session_id}] {participant.name} finished {phase.value} turn "
            f"in {int((time.time() - start_time) * 1000)}ms"
        )
        return message

    async def run_research_phase(self) -> None:
        """Let every participant prepare concurrently, then wait at opening-ready."""
        session = self._session()
        # Participants who finished an earlier, failed attempt are not re-run
        pending = [p for p in session.participants if p.id not in session.research_complete]
        logger.info(
            f"[{self.session_id}] Research started for {len(pending)} participants"
        )

        async def research(participant: Participant) -> None:
            await self._stream_turn(
                participant,
                self._system_prompt(session, prompts.RESEARCH_SYSTEM_PROMPT),
                prompts.research_prompt(session.topic, participant.position),
                DebatePhase.RESEARCH,
                MessageType.RESEARCH,
                announce_type=True,
            )
            session.research_complete.add(participant.id)

        # Wait for every participant before surfacing the first failure
        results = await asyncio.gather(
            *(research(participant) for participant in pending),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result

        logger.info(f"[{self.session_id}] Research complete")
        await self._set_phase(DebatePhase.OPENING_READY)

    async def run_opening_statements(self) -> None:
        """Give each participant an opening statement, strictly in order."""
        session = self._session()
        logger.info(f"[{self.session_id}] Opening statements started")

        for index, participant in enumerate(session.participants):
            self.store.update(self.session_id, current_turn=index)
            await self._publish(events.turn_change(participant.id))
            await self._stream_turn(
                participant,
                self._system_prompt(session, prompts.OPENING_SYSTEM_PROMPT),
                prompts.opening_prompt(session.topic, participant.position),
                DebatePhase.OPENING_STATEMENTS,
                MessageType.STATEMENT,
            )

        logger.info(f"[{self.session_id}] Opening statements complete")
        await self._set_phase(DebatePhase.DEBATE_READY, round_number=1, current_turn=0)

    async def run_debate_rounds(self) -> None:
        """Run max_rounds rounds with one turn per participant each round."""
        session = self._session()
        logger.info(f"[{self.session_id}] Debate started: {session.max_rounds} rounds")

        for round_number in range(1, session.max_rounds + 1):
            for index, participant in enumerate(session.participants):
                self.store.update(
                    self.session_id, round_number=round_number, current_turn=index
                )
                await self._publish(events.turn_change(participant.id))
                await self._stream_turn(
                    participant,
                    self._system_prompt(session, prompts.DEBATE_SYSTEM_PROMPT),
                    prompts.debate_turn_prompt(
                        session.topic,
                        participant.position,
                        round_number,
                        session.max_rounds,
                        self.build_turn_context(session),
                    ),
                    DebatePhase.DEBATE,
                    MessageType.STATEMENT,
                )
            logger.info(f"[{self.session_id}] Round {round_number} complete")

        await self._set_phase(DebatePhase.JUDGING_READY)

    def _format_message(self, session: DebateSession, message: DebateMessage) -> str:
        participant = session.get_participant(message.participant_id)
        if participant is None:
            return prompts.format_message_line(message.participant_id, "unknown", message.content)
        return prompts.format_message_line(
            participant.name, participant.position, message.content
        )

    def build_turn_context(self, session: DebateSession) -> str:
        """Most recent spoken messages, oldest first, for the next debater."""
        recent = session.messages_in_phases(TRANSCRIPT_PHASES)[-self.config.context_window :]
        return "\n\n".join(self._format_message(session, message) for message in recent)

    def format_transcript(self, session: DebateSession) -> str:
        """Full opening and debate transcript handed to the judges."""
        return TRANSCRIPT_SEPARATOR.join(
            self._format_message(session, message)
            for message in session.messages_in_phases(TRANSCRIPT_PHASES)
        )

    def _debate_positions(self, session: DebateSession) -> list[str]:
        if session.confirmed_positions:
            return list(session.confirmed_positions)
        return list(dict.fromkeys(p.position for p in session.participants))

    async def run_judging(self) -> None:
        """Collect the panel's verdicts, store the result and complete the debate."""
        # Import here to avoid circular imports
        from rostrum.judges.factory import create_panel

        session = self._session()
        transcript = self.format_transcript(session)
        logger.info(
            f"[{self.session_id}] Judging started with models {session.judge_models}"
        )

        panel = create_panel(
            session.judge_models,
            self.model_manager,
            summary_model=self.config.summary_model,
            temperature=self.config.temperature,
        )

        async def announce(verdict: JudgeVerdict) -> None:
            await self._publish(
                events.judge_complete(verdict.judge_id, verdict.winner, verdict.reasoning)
            )

        voting_result = await panel.evaluate_debate(
            session.topic,
            transcript,
            self._debate_positions(session),
            on_verdict=announce,
        )

        self.store.update(
            self.session_id, voting_result=voting_result, phase=DebatePhase.COMPLETE
        )
        logger.info(
            f"[{self.session_id}] Debate complete: "
            f"{'tie' if voting_result.is_tie else voting_result.winner}"
        )
        await self._publish(events.debate_complete(voting_result.to_dict()))
        await self._publish(events.phase_change(DebatePhase.COMPLETE))
