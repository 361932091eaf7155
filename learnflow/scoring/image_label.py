"""
Image label scorer.

The correct answer maps target ids to label text, e.g. ``{"t1": "Nucleus"}``.
It is read from the answer field, falling back to ``assets.answer``.
"""

from __future__ import annotations

from typing import Any

from learnflow.core.models import QuestionType

from . import register
from .base import ScoreResult, ScoringContext
from .normalizer import normalize_text, parse_object


@register(QuestionType.IMAGE_LABEL)
class ImageLabelScorer:
    """Scorer for label-the-image questions."""

    def score(self, ctx: ScoringContext, user_answer: Any) -> ScoreResult:
        correct = parse_object(ctx.correct_raw)
        if correct is None and ctx.assets is not None:
            correct = parse_object(ctx.assets.get("answer"))
        if correct is None:
            return ScoreResult.unresolvable("correct_mapping_missing")
        if not correct:
            return ScoreResult.unresolvable("correct_mapping_empty")

        submitted = user_answer if isinstance(user_answer, dict) else parse_object(user_answer)
        if submitted is None:
            return ScoreResult.correct_if(False, correct)

        # Extra submitted targets are ignored; every required one must match
        matched = all(
            normalize_text(submitted.get(target)) == normalize_text(label)
            for target, label in correct.items()
        )
        return ScoreResult.correct_if(matched, correct)
