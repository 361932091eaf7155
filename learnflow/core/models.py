"""
Core domain records.

Inbound records (questions, attempts, per-question stats) arrive from the
surrounding application as JSON-compatible payloads. They are validated with
Pydantic and accept both snake_case and the camelCase names the platform
stores (``sourceMeta``, ``createdAt``, ``isCorrect``...).

Design:
- QuestionType: closed enum of interaction modalities
- Question: one stored question, raw fields left unparsed
- AttemptRecord: one historical attempt (rolling difficulty target)
- PerQuestionStat: aggregate attempts per question (novelty / reinforcement)
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator


class QuestionType(str, Enum):
    """Supported question modalities."""

    MCQ = "mcq"
    TRUE_FALSE = "true_false"
    SCENARIO = "scenario"
    SHORT_ANSWER = "short_answer"
    ORDERING = "ordering"
    SLIDER = "slider"
    IMAGE_LABEL = "image_label"
    MULTI_STEP = "multi_step"

    @classmethod
    def parse(cls, value: Any) -> QuestionType | None:
        """Resolve a stored type string, or None when it is not a known modality."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


# Types whose stored answer points into an option list.
OPTION_TYPES = frozenset({QuestionType.MCQ, QuestionType.TRUE_FALSE, QuestionType.SCENARIO})


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    # Unusable metadata (null difficulty, free-form dates) takes the field default
    @field_validator(
        "id", "difficulty", "created_at", "last_attempt_at", mode="wrap", check_fields=False
    )
    @classmethod
    def _default_when_invalid(cls, value, handler, info):
        try:
            return handler(value)
        except ValidationError:
            return cls.model_fields[info.field_name].default


class Question(_Record):
    """
    A stored question.

    ``options``, ``answer``, ``assets`` and ``source_meta`` are kept exactly as
    persisted: JSON-encoded strings, already-decoded values, or plain text,
    depending on which content script wrote them.
    """

    id: str | int | None = None
    type: Any = "mcq"
    options: Any = None
    answer: Any = None
    assets: Any = None
    source_meta: Any = Field(
        default=None, validation_alias=AliasChoices("source_meta", "sourceMeta")
    )
    difficulty: int = 3
    created_at: datetime | None = Field(
        default=None, validation_alias=AliasChoices("created_at", "createdAt")
    )
    explanation: Any = None

    @property
    def question_type(self) -> QuestionType | None:
        return QuestionType.parse(self.type or "mcq")


class AttemptRecord(_Record):
    """A learner's attempt, used for the rolling difficulty target."""

    is_correct: bool = Field(validation_alias=AliasChoices("is_correct", "isCorrect"))
    difficulty: int = 3
    created_at: datetime | None = Field(
        default=None, validation_alias=AliasChoices("created_at", "createdAt")
    )
    question_id: str | int | None = Field(
        default=None, validation_alias=AliasChoices("question_id", "questionId")
    )


class PerQuestionStat(_Record):
    """Aggregate attempt counts for one question."""

    question_id: str | int = Field(validation_alias=AliasChoices("question_id", "questionId"))
    attempts: int = 0
    correct: int = 0
    last_attempt_at: datetime | None = Field(
        default=None, validation_alias=AliasChoices("last_attempt_at", "lastAttemptAt")
    )

    @property
    def wrong(self) -> int:
        return max(0, self.attempts - self.correct)


def as_utc(moment: datetime) -> datetime:
    """Timezone-aware UTC copy of a timestamp; naive values are taken as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def coerce_question(question: Question | dict) -> Question:
    """Accept either a validated Question or a raw mapping."""
    if isinstance(question, Question):
        return question
    return Question.model_validate(question)
