"""Factory for creating the judging panel."""

import logging

from rostrum.config.settings import JUDGE_PANEL_SIZE
from rostrum.models.manager import ModelManager
from .ai_judge import AIJudge, PanelJudge

logger = logging.getLogger(__name__)


def create_judges(
    judge_models: list[str],
    model_manager: ModelManager,
    temperature: float = 0.7,
) -> list[AIJudge]:
    """Create one AIJudge per model with ids judge-1..judge-N."""
    if len(judge_models) != JUDGE_PANEL_SIZE:
        raise ValueError(
            f"Exactly {JUDGE_PANEL_SIZE} judge models are required, got {len(judge_models)}"
        )

    return [
        AIJudge(
            model_manager=model_manager,
            judge_id=f"judge-{index}",
            judge_model_name=model_name,
            display_name=f"Judge {index}",
            temperature=temperature,
        )
        for index, model_name in enumerate(judge_models, start=1)
    ]


def create_panel(
    judge_models: list[str],
    model_manager: ModelManager,
    summary_model: str | None = None,
    temperature: float = 0.7,
) -> PanelJudge:
    """Create the three-judge voting panel."""
    logger.info(f"Creating judging panel with models: {judge_models}")
    judges = create_judges(judge_models, model_manager, temperature)
    return PanelJudge(judges, model_manager, summary_model=summary_model)
