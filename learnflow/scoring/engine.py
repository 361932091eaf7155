"""
Scoring entry point.

Decodes a stored question's loosely-encoded fields once, dispatches to the
scorer registered for its type and returns a ScoreResult. Never raises:
unresolvable stored data comes back as ``ok=False`` with a reason.
"""

from __future__ import annotations

from typing import Any

from loguru import logger
from pydantic import ValidationError

from learnflow.core.models import Question, coerce_question

from . import get_scorer
from .base import ScoreResult, ScoringConfig, ScoringContext
from .normalizer import parse_json_loose, parse_source_meta


def build_context(question: Question, config: ScoringConfig | None = None) -> ScoringContext:
    """Decode the JSON-or-text fields of a question."""
    assets = parse_json_loose(question.assets)
    return ScoringContext(
        question=question,
        options=parse_json_loose(question.options),
        correct_raw=question.answer,
        assets=assets if isinstance(assets, dict) else None,
        meta=parse_source_meta(question.source_meta),
        config=config or ScoringConfig(),
    )


def score_question_answer(
    question: Question | dict,
    user_answer: Any,
    config: ScoringConfig | None = None,
) -> ScoreResult:
    """
    Score a learner's submission.

    Args:
        question: Stored question (model or raw mapping)
        user_answer: Arbitrary JSON-compatible submission
        config: Scoring constants (defaults if None)

    Returns:
        ScoreResult with ok/is_correct/correct_answer
    """
    try:
        question = coerce_question(question)
    except ValidationError as e:
        logger.warning(f"Question record failed validation: {e.error_count()} error(s)")
        return ScoreResult.unresolvable("invalid_question_record")

    question_type = question.question_type
    scorer = get_scorer(question_type) if question_type is not None else None
    if scorer is None:
        result = ScoreResult.unresolvable("unknown_question_type")
    else:
        result = scorer.score(build_context(question, config), user_answer)

    result.question_id = question.id
    if not result.ok:
        logger.warning(
            f"Question {question.id} ({question.type}) has unresolvable answer data: {result.reason}"
        )
    return result
