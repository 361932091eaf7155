"""
Review queue lifecycle.

A missed question enters the learner's review queue as a ReviewItem. There
is exactly one item per (user, question); repeated misses reset its schedule
instead of creating another record. Storage is the caller's concern: these
helpers take and return in-memory items.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, time, timedelta, timezone
from typing import Iterable

from loguru import logger

from learnflow.core.models import OPTION_TYPES, Question, QuestionType, as_utc, coerce_question

from .sm2 import ReviewItem, SM2Config


@dataclass
class DueReview:
    """A review item that is due, with how late it is."""

    item: ReviewItem
    days_overdue: int


@dataclass
class ReviewStats:
    """Queue counts for one learner."""

    due_now: int = 0
    due_this_week: int = 0
    total_in_queue: int = 0
    reviewed_today: int = 0

    def to_dict(self) -> dict:
        return {
            "dueNow": self.due_now,
            "dueThisWeek": self.due_this_week,
            "totalInQueue": self.total_in_queue,
            "reviewedToday": self.reviewed_today,
        }


def _has_value(value) -> bool:
    return value is not None and value != ""


def is_review_eligible(question: Question | dict) -> bool:
    """
    Whether a missed question can be re-served from the review queue.

    Review replays questions as plain option questions, so only option types
    with options qualify, plus multi-step questions that are really MCQs
    (options present, no scaffold assets).
    """
    question = coerce_question(question)
    question_type = question.question_type
    if question_type in OPTION_TYPES:
        return _has_value(question.options)
    if question_type == QuestionType.MULTI_STEP:
        return _has_value(question.options) and not _has_value(question.assets)
    return False


def record_incorrect_attempt(
    existing: ReviewItem | None,
    user_id: str | int,
    question_id: str | int,
    now: datetime | None = None,
    config: SM2Config | None = None,
) -> ReviewItem:
    """
    Create or reset the review item after a missed question.

    Args:
        existing: The learner's current item for this question, if any
        user_id: Learner id
        question_id: Question id
        now: Time of the attempt (defaults to current UTC time)
        config: SM-2 configuration for initial values

    Returns:
        A fresh schedule due after the initial delay
    """
    config = config or SM2Config()
    now = now or datetime.now(timezone.utc)
    due = now + timedelta(days=config.initial_delay_days)

    if existing is None:
        logger.debug(f"Adding question {question_id} to review queue for user {user_id}")
        return ReviewItem(
            user_id=user_id,
            question_id=question_id,
            due_date=due,
            ease_factor=config.initial_easiness,
            interval=config.first_interval,
            repetitions=0,
        )

    logger.debug(f"Resetting review schedule for question {question_id}, user {user_id}")
    return replace(
        existing,
        due_date=due,
        ease_factor=config.initial_easiness,
        interval=config.first_interval,
        repetitions=0,
    )


def due_reviews(
    items: Iterable[ReviewItem],
    now: datetime | None = None,
    limit: int = 10,
) -> list[DueReview]:
    """Due items, most overdue first."""
    now = now or datetime.now(timezone.utc)
    due = sorted(
        (item for item in items if item.is_due(now)),
        key=lambda item: as_utc(item.due_date),
    )
    return [DueReview(item=item, days_overdue=item.days_overdue(now)) for item in due[: max(0, limit)]]


def review_stats(items: Iterable[ReviewItem], now: datetime | None = None) -> ReviewStats:
    now = as_utc(now or datetime.now(timezone.utc))
    week_from_now = now + timedelta(days=7)
    today_start = datetime.combine(now.date(), time.min, tzinfo=timezone.utc)

    stats = ReviewStats()
    for item in items:
        stats.total_in_queue += 1
        due_date = as_utc(item.due_date)
        if due_date <= now:
            stats.due_now += 1
        elif due_date <= week_from_now:
            stats.due_this_week += 1
        if item.last_reviewed is not None and as_utc(item.last_reviewed) >= today_start:
            stats.reviewed_today += 1
    return stats
