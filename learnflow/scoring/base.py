"""
Base protocol and types for question scorers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

from learnflow.core.models import Question
from learnflow.exceptions import ContentIntegrityError


@dataclass
class ScoringConfig:
    """Tunable scoring constants."""

    slider_range_fraction: float = 0.02
    slider_epsilon: float = 1e-9
    slider_default_min: float = 0.0
    slider_default_max: float = 100.0
    slider_default_step: float = 1.0


@dataclass
class ScoreResult:
    """
    Result of scoring a submission.

    ``ok=False`` means the stored question could not be resolved to a definite
    correct answer (content needs repair). ``ok=True, is_correct=False`` means
    the learner was simply wrong.
    """

    ok: bool
    is_correct: bool = False
    correct_answer: Any = None
    reason: str | None = None
    details: dict[str, Any] | None = None
    question_id: str | int | None = field(default=None, repr=False)

    @classmethod
    def correct_if(cls, matched: bool, correct_answer: Any, **details: Any) -> ScoreResult:
        return cls(ok=True, is_correct=bool(matched), correct_answer=correct_answer, details=details or None)

    @classmethod
    def unresolvable(cls, reason: str) -> ScoreResult:
        return cls(ok=False, is_correct=False, reason=reason)

    def raise_for_integrity(self) -> ScoreResult:
        """Raise ContentIntegrityError when the stored data was unresolvable."""
        if not self.ok:
            raise ContentIntegrityError(self.reason or "unknown", self.question_id)
        return self

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "ok": self.ok,
            "isCorrect": self.is_correct,
            "correctAnswer": self.correct_answer,
        }
        if self.reason is not None:
            payload["reason"] = self.reason
        if self.details is not None:
            payload["details"] = self.details
        return payload


@dataclass
class ScoringContext:
    """A question with its loosely-encoded fields already decoded."""

    question: Question
    options: Any
    correct_raw: Any
    assets: dict | None
    meta: dict
    config: ScoringConfig


class QuestionScorer(Protocol):
    """Protocol for question type scorers."""

    def score(self, ctx: ScoringContext, user_answer: Any) -> ScoreResult:
        """Score the learner's submission against the stored question."""
        ...
