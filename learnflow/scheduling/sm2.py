"""
SM-2 Spaced Repetition Scheduler.

Implements the SuperMemo 2 algorithm for review intervals of missed
questions. Interval growth must be reproducible exactly: intervals use
half-up rounding of ``interval * EF`` with the ease factor the item had
*before* this review.

SM-2 Grade Scale:
0 - Complete blackout, wrong response
1 - Incorrect, but upon seeing answer remembered
2 - Incorrect, but answer seemed easy to recall
3 - Correct, but with significant difficulty
4 - Correct, with some hesitation
5 - Correct, with perfect recall
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone

from loguru import logger

from learnflow.core.models import as_utc

# =============================================================================
# SM-2 Algorithm
# =============================================================================


@dataclass
class SM2Config:
    """Configuration for SM-2 algorithm."""

    initial_easiness: float = 2.5
    minimum_easiness: float = 1.3
    first_interval: int = 1  # Days for first review
    second_interval: int = 6  # Days for second review
    passing_grade: int = 3
    initial_delay_days: int = 1  # Days before a newly missed question is due


@dataclass(frozen=True)
class SM2Result:
    """Schedule state after one review."""

    ease_factor: float
    interval: int
    repetitions: int

    def to_dict(self) -> dict:
        return {
            "easeFactor": self.ease_factor,
            "interval": self.interval,
            "repetitions": self.repetitions,
        }


@dataclass
class ReviewItem:
    """Spaced-repetition record for one (user, question) pair."""

    user_id: str | int
    question_id: str | int
    due_date: datetime
    ease_factor: float = 2.5
    interval: int = 1  # Days until next review
    repetitions: int = 0  # Consecutive correct recalls
    last_reviewed: datetime | None = None

    def is_due(self, now: datetime) -> bool:
        return as_utc(self.due_date) <= as_utc(now)

    def days_overdue(self, now: datetime) -> int:
        """Whole days past the due date (0 when not yet due)."""
        return max(0, (as_utc(now) - as_utc(self.due_date)).days)


def round_half_up(value: float) -> int:
    """Round to nearest integer with .5 going up."""
    return math.floor(value + 0.5)


def calculate_sm2(
    quality: int,
    repetitions: int,
    ease_factor: float,
    interval: int,
    config: SM2Config | None = None,
) -> SM2Result:
    """
    Calculate the next SM-2 schedule state.

    Args:
        quality: Recall quality 0-5 (clamped)
        repetitions: Consecutive correct recalls so far
        ease_factor: Current ease factor
        interval: Current interval in days

    Returns:
        SM2Result with new ease factor, interval and repetitions
    """
    config = config or SM2Config()
    quality = max(0, min(5, int(quality)))

    if quality >= config.passing_grade:
        if repetitions == 0:
            new_interval = config.first_interval
        elif repetitions == 1:
            new_interval = config.second_interval
        else:
            new_interval = round_half_up(interval * ease_factor)
        new_repetitions = repetitions + 1
    else:
        # Failed - restart from the beginning
        new_repetitions = 0
        new_interval = config.first_interval

    # EF' = EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02))
    ef_delta = 0.1 - (5 - quality) * (0.08 + (5 - quality) * 0.02)
    new_ef = max(config.minimum_easiness, ease_factor + ef_delta)

    return SM2Result(
        ease_factor=new_ef,
        interval=max(1, new_interval),
        repetitions=new_repetitions,
    )


class SM2Scheduler:
    """
    Applies SM-2 reviews to ReviewItem records.

    Each item has:
    - Ease Factor (EF): How quickly intervals grow (2.5 default, min 1.3)
    - Interval: Days until next review
    - Repetitions: Consecutive correct recalls
    """

    def __init__(self, config: SM2Config | None = None):
        """
        Initialize SM-2 scheduler.

        Args:
            config: Custom configuration (uses defaults if None)
        """
        self.config = config or SM2Config()

    def review(self, item: ReviewItem, quality: int, now: datetime | None = None) -> ReviewItem:
        """
        Apply one review to an item.

        Args:
            item: Current review record
            quality: Recall quality 0-5
            now: Review time (defaults to current UTC time)

        Returns:
            Updated copy of the item with the new due date
        """
        now = now or datetime.now(timezone.utc)
        result = calculate_sm2(
            quality, item.repetitions, item.ease_factor, item.interval, self.config
        )
        logger.debug(
            f"SM-2 review of question {item.question_id}: q={quality} "
            f"interval {item.interval}->{result.interval}, EF {item.ease_factor:.2f}->{result.ease_factor:.2f}"
        )
        return replace(
            item,
            ease_factor=result.ease_factor,
            interval=result.interval,
            repetitions=result.repetitions,
            due_date=now + timedelta(days=result.interval),
            last_reviewed=now,
        )
