"""Judging system implementations."""

from .base import BaseJudge, VerdictSchema
from .ai_judge import AIJudge, PanelJudge, SUMMARY_FALLBACK, match_position, tally_votes
from .factory import create_judges, create_panel

__all__ = [
    "BaseJudge",
    "VerdictSchema",
    "AIJudge",
    "PanelJudge",
    "SUMMARY_FALLBACK",
    "match_position",
    "tally_votes",
    "create_judges",
    "create_panel",
]
