"""
Question scorers.

Each question modality (mcq, ordering, slider...) has a scorer class with a
single ``score(ctx, user_answer)`` method. Scorers register themselves for
one or more QuestionType values with the @register decorator; the dispatcher
in ``engine`` looks them up by type.
"""

from typing import TYPE_CHECKING

from learnflow.core.models import QuestionType

if TYPE_CHECKING:
    from .base import QuestionScorer

# Scorer registry - populated by @register decorator
SCORERS: dict[QuestionType, "QuestionScorer"] = {}


def register(*question_types: QuestionType):
    """Decorator to register a scorer for one or more question types."""
    def decorator(cls):
        instance = cls()
        for question_type in question_types:
            SCORERS[question_type] = instance
        return cls
    return decorator


def get_scorer(question_type: str | QuestionType) -> "QuestionScorer | None":
    """Get the scorer for a question type."""
    resolved = QuestionType.parse(question_type)
    if resolved is None:
        return None
    return SCORERS.get(resolved)


# Import scorers to trigger registration
from . import option_based
from . import ordering
from . import slider
from . import image_label
from . import multi_step
from . import short_answer

from .audit import AuditFinding, AuditReport, audit_question, audit_questions
from .base import ScoreResult, ScoringConfig, ScoringContext
from .engine import build_context, score_question_answer

__all__ = [
    "SCORERS",
    "AuditFinding",
    "AuditReport",
    "QuestionType",
    "ScoreResult",
    "ScoringConfig",
    "ScoringContext",
    "audit_question",
    "audit_questions",
    "build_context",
    "get_scorer",
    "register",
    "score_question_answer",
]
