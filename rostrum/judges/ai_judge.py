"""AI-powered debate judges and the three-judge voting panel."""

import asyncio
import logging
from collections import Counter

from rostrum.debate_engine.models import JudgeVerdict, VotingResult
from rostrum.models.manager import ModelManager
from .base import BaseJudge, VerdictCallback, VerdictSchema

logger = logging.getLogger(__name__)

SUMMARY_FALLBACK = (
    "The judges' summary could not be generated. "
    "See the individual verdicts for each judge's reasoning."
)


def match_position(reported: str, positions: list[str]) -> str | None:
    """Map a judge's reported winner onto a confirmed position.

    Tries a case-insensitive exact match first, then substring containment
    in either direction. Returns None when nothing matches.
    """
    cleaned = reported.strip().lower()
    if not cleaned:
        return None

    for position in positions:
        if position.strip().lower() == cleaned:
            return position

    for position in positions:
        candidate = position.strip().lower()
        if candidate and (candidate in cleaned or cleaned in candidate):
            return position

    return None


def tally_votes(verdicts: list[JudgeVerdict]) -> VotingResult:
    """Count votes per winner; a strict majority of the panel is required to win."""
    vote_counts = dict(Counter(verdict.winner for verdict in verdicts))
    majority = len(verdicts) // 2 + 1

    winner = None
    for position, count in vote_counts.items():
        if count >= majority:
            winner = position
            break

    return VotingResult(
        winner=winner,
        is_tie=winner is None,
        vote_counts=vote_counts,
        verdicts=list(verdicts),
    )


class AIJudge(BaseJudge):
    """AI judge using a dedicated language model for evaluation."""

    def __init__(
        self,
        model_manager: ModelManager,
        judge_id: str,
        judge_model_name: str,
        display_name: str | None = None,
        temperature: float = 0.7,
    ):
        self.model_manager = model_manager
        self.judge_id = judge_id
        self.judge_model_name = judge_model_name
        self.temperature = temperature
        self._display_name = display_name or judge_id

    @property
    def name(self) -> str:
        return self._display_name

    async def evaluate_debate(
        self, topic: str, transcript: str, positions: list[str]
    ) -> JudgeVerdict:
        """Ask the judge model for a structured verdict and normalize the winner."""
        logger.info(f"{self.name} ({self.judge_model_name}) evaluating debate: {topic}")

        result = await self.model_manager.generate_structured(
            self.judge_model_name,
            self._get_judge_system_prompt(),
            self._create_evaluation_prompt(topic, transcript, positions),
            VerdictSchema,
            temperature=self.temperature,
        )

        winner = match_position(result.winner, positions)
        if winner is None:
            winner = result.winner.strip()
            logger.warning(
                f"{self.name} voted for '{winner}', which matches none of {positions}"
            )

        return JudgeVerdict(
            judge_id=self.judge_id,
            judge_name=self.name,
            model=self.judge_model_name,
            winner=winner,
            reasoning=result.reasoning,
            raw_response=result.model_dump_json(),
        )

    def _get_judge_system_prompt(self) -> str:
        return (
            "You are a neutral, experienced debate judge. Evaluate debates based on "
            "argument quality, evidence, and persuasiveness. Judge the arguments, "
            "not the participants."
        )

    def _create_evaluation_prompt(
        self, topic: str, transcript: str, positions: list[str]
    ) -> str:
        positions_list = "\n".join(f"- {position}" for position in positions)
        return f"""Topic: {topic}

Positions:
{positions_list}

Debate Transcript:
{transcript}

As a neutral judge, evaluate this debate and determine which position won. Consider:
- Strength and clarity of arguments
- Use of evidence and reasoning
- Persuasiveness and rhetoric
- Responses to counterarguments

Set "winner" to exactly one of the positions listed above, copied verbatim.
Set "reasoning" to a detailed explanation of your decision in complete sentences."""


class PanelJudge:
    """Runs several judges concurrently and aggregates their votes."""

    def __init__(
        self,
        judges: list[AIJudge],
        model_manager: ModelManager,
        summary_model: str | None = None,
    ):
        if not judges:
            raise ValueError("A judging panel needs at least one judge")
        self.judges = judges
        self.model_manager = model_manager
        self.summary_model = summary_model or judges[0].judge_model_name

    @property
    def name(self) -> str:
        judge_names = [judge.judge_model_name for judge in self.judges]
        return f"Judging Panel ({', '.join(judge_names)})"

    async def evaluate_debate(
        self,
        topic: str,
        transcript: str,
        positions: list[str],
        on_verdict: VerdictCallback | None = None,
    ) -> VotingResult:
        """Collect every verdict, tally them and attach a narrative summary.

        Judges run concurrently; the verdict list keeps panel order. Any
        judge failure propagates and fails the whole evaluation.
        """
        logger.info(f"Panel evaluating with {len(self.judges)} judges")

        async def evaluate(judge: AIJudge) -> JudgeVerdict:
            verdict = await judge.evaluate_debate(topic, transcript, positions)
            logger.info(f"{judge.name} voted for: {verdict.winner}")
            if on_verdict is not None:
                await on_verdict(verdict)
            return verdict

        verdicts = await asyncio.gather(*(evaluate(judge) for judge in self.judges))

        voting_result = tally_votes(list(verdicts))
        if voting_result.is_tie:
            logger.info(f"Panel tied: {voting_result.vote_counts}")
        else:
            logger.info(
                f"Panel winner: {voting_result.winner} ({voting_result.vote_counts})"
            )

        voting_result.summary = await self.synthesize_summary(topic, voting_result)
        return voting_result

    async def synthesize_summary(self, topic: str, voting_result: VotingResult) -> str:
        """Weave the verdicts into one narrative, or return the fixed fallback."""
        try:
            return await self.model_manager.generate_response(
                self.summary_model,
                "You are the chief judge writing the panel's majority opinion.",
                self._create_summary_prompt(topic, voting_result),
            )
        except Exception as e:
            logger.error(f"Panel summary generation failed: {e}")
            return SUMMARY_FALLBACK

    def _create_summary_prompt(self, topic: str, voting_result: VotingResult) -> str:
        verdict_blocks = "\n\n".join(
            f"{verdict.judge_name} ({verdict.model})\n"
            f"Vote: {verdict.winner}\n"
            f"Reasoning: {verdict.reasoning}"
            for verdict in voting_result.verdicts
        )
        outcome = (
            "The panel is tied; no position received a majority."
            if voting_result.is_tie
            else f"The majority winner is: {voting_result.winner}"
        )
        return f"""Topic: {topic}

{outcome}

Individual verdicts:
{verdict_blocks}

Write a cohesive majority opinion that weaves these verdicts into a single narrative.
Explain why the outcome was reached, where the judges agreed, and where they differed.
Do not simply list the judges one by one."""
