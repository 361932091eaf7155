"""
Option-based scorer (mcq, true_false, scenario).

The stored answer may be an index, a boolean, option text, or option text
wrapped in stray quotes; it is resolved through the normalizer's resolver
stages before any comparison. Learners may submit either the option index
or the option text.
"""

from __future__ import annotations

from typing import Any

from learnflow.core.models import QuestionType

from . import register
from .base import ScoreResult, ScoringContext
from .normalizer import (
    find_option_index,
    is_digit_string,
    normalize_text,
    parse_json_loose,
    resolve_option_text,
    strip_quotes,
)


def _as_index(value: Any) -> int | None:
    """A numeric submission interpreted as an option index."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _text_matches(user_answer: Any, correct_text: Any) -> bool:
    expected = normalize_text(correct_text)
    if normalize_text(user_answer) == expected:
        return True
    if isinstance(user_answer, str):
        return normalize_text(strip_quotes(user_answer.strip())) == expected
    return False


def score_option_based(options: list, correct_raw: Any, user_answer: Any) -> ScoreResult:
    """
    Score a submission against an option list.

    Args:
        options: Decoded option list
        correct_raw: Decoded stored answer (index, bool, text...)
        user_answer: Index or option text submitted by the learner

    Returns:
        ScoreResult; ok=False when the stored answer cannot be resolved
    """
    resolved = resolve_option_text(options, correct_raw)
    if not resolved.ok:
        return ScoreResult.unresolvable(resolved.reason or "unresolved_correct_answer")

    index = _as_index(user_answer)
    if index is not None:
        return ScoreResult.correct_if(index == resolved.index, resolved.text)

    if _text_matches(user_answer, resolved.text):
        return ScoreResult.correct_if(True, resolved.text)

    if isinstance(user_answer, str):
        candidate = strip_quotes(user_answer.strip()).strip()
        # Digits are only an index when no option reads that way literally
        if is_digit_string(candidate) and find_option_index(options, candidate) < 0:
            return ScoreResult.correct_if(int(candidate) == resolved.index, resolved.text)

    return ScoreResult.correct_if(False, resolved.text)


def score_text_equality(correct_raw: Any, user_answer: Any) -> ScoreResult:
    """Normalized text equality against the decoded stored answer."""
    correct = parse_json_loose(correct_raw)
    return ScoreResult.correct_if(_text_matches(user_answer, correct), correct)


@register(QuestionType.MCQ, QuestionType.TRUE_FALSE, QuestionType.SCENARIO)
class OptionScorer:
    """Scorer for single-answer option questions."""

    def score(self, ctx: ScoringContext, user_answer: Any) -> ScoreResult:
        if isinstance(ctx.options, list) and ctx.options:
            return score_option_based(ctx.options, parse_json_loose(ctx.correct_raw), user_answer)
        # Scenario prompts without options are free text
        return score_text_equality(ctx.correct_raw, user_answer)
