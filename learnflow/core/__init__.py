"""
Core Module - Shared domain records.

All scoring, scheduling and selection modules import their inbound record
types from here rather than redefining them.
"""

from learnflow.core.models import (
    OPTION_TYPES,
    AttemptRecord,
    PerQuestionStat,
    Question,
    QuestionType,
    as_utc,
    coerce_question,
)

__all__ = [
    "OPTION_TYPES",
    "AttemptRecord",
    "PerQuestionStat",
    "Question",
    "QuestionType",
    "as_utc",
    "coerce_question",
]
