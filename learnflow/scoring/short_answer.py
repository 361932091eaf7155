"""
Short answer scorer: normalized text equality with the stored answer.
"""

from __future__ import annotations

from typing import Any

from learnflow.core.models import QuestionType

from . import register
from .base import ScoreResult, ScoringContext
from .option_based import score_text_equality


@register(QuestionType.SHORT_ANSWER)
class ShortAnswerScorer:
    """Scorer for free-text answers."""

    def score(self, ctx: ScoringContext, user_answer: Any) -> ScoreResult:
        return score_text_equality(ctx.correct_raw, user_answer)
