"""
Spaced repetition scheduling.

- sm2: SM-2 interval/ease calculation and the ReviewItem record
- review: review queue lifecycle (eligibility, create/reset, due list, stats)
"""

from learnflow.scheduling.review import (
    DueReview,
    ReviewStats,
    due_reviews,
    is_review_eligible,
    record_incorrect_attempt,
    review_stats,
)
from learnflow.scheduling.sm2 import (
    ReviewItem,
    SM2Config,
    SM2Result,
    SM2Scheduler,
    calculate_sm2,
    round_half_up,
)

__all__ = [
    "DueReview",
    "ReviewItem",
    "ReviewStats",
    "SM2Config",
    "SM2Result",
    "SM2Scheduler",
    "calculate_sm2",
    "due_reviews",
    "is_review_eligible",
    "record_incorrect_attempt",
    "review_stats",
    "round_half_up",
]
