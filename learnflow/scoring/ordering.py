"""
Ordering scorer.

The stored answer is either a list of option indices or a list of option
values. The learner submits the sequence of values, as a list or a
JSON-encoded list.
"""

from __future__ import annotations

from typing import Any

from learnflow.core.models import QuestionType

from . import register
from .base import ScoreResult, ScoringContext
from .normalizer import normalize_text, parse_json_loose, safe_parse, to_text


def _correct_sequence(options: list[str], correct_raw: Any) -> list[str] | ScoreResult:
    parsed = parse_json_loose(correct_raw)
    if not isinstance(parsed, list) or not parsed:
        return ScoreResult.unresolvable("correct_order_invalid")

    is_index_list = all(isinstance(v, int) and not isinstance(v, bool) for v in parsed)
    if not is_index_list:
        return [to_text(v) for v in parsed]

    values = []
    for index in parsed:
        if not 0 <= index < len(options):
            return ScoreResult.unresolvable("correct_index_out_of_range")
        values.append(options[index])
    return values


def _submitted_sequence(user_answer: Any) -> list[str] | None:
    if isinstance(user_answer, str):
        parsed = safe_parse(user_answer)
        user_answer = parsed.value if parsed.ok else None
    if isinstance(user_answer, (list, tuple)):
        return [to_text(v) for v in user_answer]
    return None


@register(QuestionType.ORDERING)
class OrderingScorer:
    """Scorer for sequence ordering questions."""

    def score(self, ctx: ScoringContext, user_answer: Any) -> ScoreResult:
        options = [to_text(o) for o in ctx.options] if isinstance(ctx.options, list) else []
        if len(options) < 2:
            return ScoreResult.unresolvable("options_missing")

        correct = _correct_sequence(options, ctx.correct_raw)
        if isinstance(correct, ScoreResult):
            return correct

        submitted = _submitted_sequence(user_answer)
        if submitted is None or len(submitted) != len(correct):
            return ScoreResult.correct_if(False, correct)

        matched = all(
            normalize_text(given) == normalize_text(expected)
            for given, expected in zip(submitted, correct)
        )
        return ScoreResult.correct_if(matched, correct)
