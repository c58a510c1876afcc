"""Base classes and interfaces for judging systems."""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable

from pydantic import BaseModel, ConfigDict, Field

from rostrum.debate_engine.models import JudgeVerdict


class VerdictSchema(BaseModel):
    """Structured output a judge model must return."""

    model_config = ConfigDict(extra="forbid")

    winner: str = Field(
        description="The winning position, copied exactly from the list of positions"
    )
    reasoning: str = Field(description="Natural-language explanation of the decision")


type VerdictCallback = Callable[[JudgeVerdict], Awaitable[None]]


class BaseJudge(ABC):
    """Abstract base class for all judges."""

    @abstractmethod
    async def evaluate_debate(
        self, topic: str, transcript: str, positions: list[str]
    ) -> JudgeVerdict:
        """Evaluate a completed debate and return a verdict."""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Judge name/identifier."""
        pass
