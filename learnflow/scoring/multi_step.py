"""
Multi-step scorer.

Two sub-modes:
- Scaffolded: ``assets.steps`` holds an ordered list of sub-questions, each
  with its own options/answer/explanation. The learner submits
  ``{"stepAnswers": {stepIndex: answerText}}`` and every step must match.
- Plain: no scaffold but options present, scored like an MCQ.

Older clients submit the sentinel "Completed" instead of step answers; that is
only accepted when the stored top-level answer is itself "Completed".
"""

from __future__ import annotations

from typing import Any

from learnflow.core.models import QuestionType

from . import register
from .base import ScoreResult, ScoringContext
from .normalizer import normalize_text, parse_json_loose, resolve_option_text, safe_parse
from .option_based import score_option_based, score_text_equality

LEGACY_COMPLETED = "completed"


def scaffold_steps(assets: dict | None) -> list | None:
    """The step list of a scaffolded question, or None."""
    if assets is None:
        return None
    steps = assets.get("steps")
    if isinstance(steps, list) and steps:
        return steps
    return None


def _step_correct_answer(step: Any) -> Any:
    if not isinstance(step, dict):
        return None
    answer = parse_json_loose(step.get("answer"))
    options = parse_json_loose(step.get("options"))
    if isinstance(options, list) and options:
        resolved = resolve_option_text(options, answer)
        if resolved.ok:
            return resolved.text
    return answer


def _step_answers(user_answer: Any) -> dict | list | None:
    payload = user_answer
    if isinstance(payload, str):
        parsed = safe_parse(payload)
        payload = parsed.value if parsed.ok else None
    if not isinstance(payload, dict):
        return None
    answers = payload.get("stepAnswers")
    if isinstance(answers, (dict, list)):
        return answers
    return None


def _answer_for_step(answers: dict | list, index: int) -> Any:
    if isinstance(answers, list):
        return answers[index] if index < len(answers) else None
    if index in answers:
        return answers[index]
    return answers.get(str(index))


@register(QuestionType.MULTI_STEP)
class MultiStepScorer:
    """Scorer for scaffolded and plain multi-step questions."""

    def score(self, ctx: ScoringContext, user_answer: Any) -> ScoreResult:
        correct = parse_json_loose(ctx.correct_raw)
        steps = scaffold_steps(ctx.assets)

        if steps is None:
            if isinstance(ctx.options, list) and ctx.options:
                return score_option_based(ctx.options, correct, user_answer)
            return score_text_equality(ctx.correct_raw, user_answer)

        if isinstance(user_answer, str) and normalize_text(user_answer) == LEGACY_COMPLETED:
            return ScoreResult.correct_if(normalize_text(correct) == LEGACY_COMPLETED, correct)

        expected = [_step_correct_answer(step) for step in steps]
        if any(not normalize_text(answer) for answer in expected):
            return ScoreResult.unresolvable("step_answer_missing")

        answers = _step_answers(user_answer)
        if answers is None:
            return ScoreResult.correct_if(False, correct, steps=expected)

        matched = all(
            normalize_text(_answer_for_step(answers, index)) == normalize_text(answer)
            for index, answer in enumerate(expected)
        )
        return ScoreResult.correct_if(matched, correct, steps=expected)
