"""
learnflow - answer scoring and adaptive learning core.

Public surface:
- score_question_answer: decide correctness for any question modality
- calculate_sm2: next spaced-repetition schedule state
- select_adaptive_batch: rank a topic's questions for the next session

Everything here is pure: no I/O, no shared mutable state. Persistence,
HTTP and auth belong to the calling application.
"""

from learnflow.adaptive.selector import AdaptiveBatch, select_adaptive_batch
from learnflow.core.models import AttemptRecord, PerQuestionStat, Question, QuestionType
from learnflow.scheduling.sm2 import ReviewItem, SM2Result, calculate_sm2
from learnflow.scoring import ScoreResult, score_question_answer

__version__ = "1.0.0"

__all__ = [
    "AdaptiveBatch",
    "AttemptRecord",
    "PerQuestionStat",
    "Question",
    "QuestionType",
    "ReviewItem",
    "SM2Result",
    "ScoreResult",
    "calculate_sm2",
    "score_question_answer",
    "select_adaptive_batch",
]
