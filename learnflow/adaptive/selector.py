"""
Adaptive question selection for practice sessions.

Ranks a topic's question pool for one learner so a session stays in the
learner's flow zone:
- Novelty: unseen questions dominate everything else
- Error reinforcement: questions the learner keeps missing resurface,
  mastered ones sink
- Recency: questions attempted in the last hours/days are held back
- Difficulty fit: questions near the learner's rolling target rank higher

This is a weighted ranking, not a constraint system; the default weights are
ordered novelty > reinforcement > recency > difficulty fit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, TypeVar

from loguru import logger
from pydantic import ValidationError

from learnflow.core.models import AttemptRecord, PerQuestionStat, Question, as_utc
from learnflow.scheduling.sm2 import round_half_up


@dataclass
class SelectorConfig:
    """Configuration for adaptive selection."""

    history_window: int = 30  # Recent attempts used for the target
    min_samples: int = 5  # Attempts before accuracy nudges the target
    high_accuracy: float = 0.8
    low_accuracy: float = 0.5
    default_difficulty: int = 3
    min_difficulty: int = 1
    max_difficulty: int = 5
    unseen_bonus: float = 1000.0
    wrong_weight: float = 120.0
    correct_weight: float = 15.0
    difficulty_weight: float = 10.0
    # (hours since last attempt, penalty) - first bucket with hours < limit applies
    recency_penalties: tuple[tuple[float, float], ...] = (
        (6, 300.0),
        (24, 150.0),
        (72, 60.0),
        (168, 15.0),
    )
    default_limit: int = 10


@dataclass(frozen=True)
class DifficultyTarget:
    """Rolling difficulty target derived from recent attempts."""

    target: int
    recent_accuracy: float | None
    samples: int


@dataclass(frozen=True)
class CandidateScore:
    """Score breakdown for one candidate question."""

    novelty: float = 0.0
    reinforcement: float = 0.0
    recency: float = 0.0
    difficulty_fit: float = 0.0

    @property
    def total(self) -> float:
        return self.novelty + self.reinforcement + self.recency + self.difficulty_fit


@dataclass
class RankedQuestion:
    question: Question
    score: CandidateScore


@dataclass
class AdaptiveBatch:
    """Ordered selection plus the difficulty target it was ranked against."""

    ranked: list[RankedQuestion] = field(default_factory=list)
    target_difficulty: int = 3
    recent_accuracy: float | None = None
    samples: int = 0

    @property
    def questions(self) -> list[Question]:
        return [entry.question for entry in self.ranked]

    def to_dict(self) -> dict[str, Any]:
        return {
            "questions": [q.model_dump(mode="json") for q in self.questions],
            "targetDifficulty": self.target_difficulty,
            "recentAccuracy": self.recent_accuracy,
            "samples": self.samples,
        }


def _newest_first_key(moment: datetime | None) -> tuple[bool, float]:
    if moment is None:
        return (True, 0.0)
    return (False, -as_utc(moment).timestamp())


RecordT = TypeVar("RecordT", Question, PerQuestionStat, AttemptRecord)


def _valid_records(records: Iterable[Any], model: type[RecordT]) -> list[RecordT]:
    """Validated records; malformed entries are logged and skipped."""
    valid = []
    for record in records:
        if isinstance(record, model):
            valid.append(record)
            continue
        try:
            valid.append(model.model_validate(record))
        except ValidationError as e:
            logger.warning(f"Skipping malformed {model.__name__} record: {e.error_count()} error(s)")
    return valid


def _key(value: str | int | None) -> str | None:
    return None if value is None else str(value)


def compute_target_difficulty(
    recent_attempts: Iterable[AttemptRecord],
    config: SelectorConfig | None = None,
) -> DifficultyTarget:
    """
    Rolling difficulty target from the learner's latest attempts.

    Averages the difficulty of up to ``history_window`` most recent attempts,
    then nudges it up for high accuracy or down for low accuracy once enough
    samples exist. Clamped to the difficulty scale.
    """
    config = config or SelectorConfig()
    window = sorted(recent_attempts, key=lambda a: _newest_first_key(a.created_at))
    window = window[: config.history_window]

    samples = len(window)
    if samples == 0:
        return DifficultyTarget(target=config.default_difficulty, recent_accuracy=None, samples=0)

    accuracy = sum(1 for a in window if a.is_correct) / samples
    target = round_half_up(sum(a.difficulty for a in window) / samples)

    if samples >= config.min_samples:
        if accuracy >= config.high_accuracy:
            target += 1
        elif accuracy <= config.low_accuracy:
            target -= 1

    target = max(config.min_difficulty, min(config.max_difficulty, target))
    return DifficultyTarget(target=target, recent_accuracy=accuracy, samples=samples)


def recency_penalty(
    last_attempt_at: datetime | None,
    now: datetime,
    config: SelectorConfig | None = None,
) -> float:
    config = config or SelectorConfig()
    if last_attempt_at is None:
        return 0.0
    hours = (as_utc(now) - as_utc(last_attempt_at)).total_seconds() / 3600
    for limit_hours, penalty in config.recency_penalties:
        if hours < limit_hours:
            return -penalty
    return 0.0


def score_candidate(
    question: Question,
    stat: PerQuestionStat | None,
    target_difficulty: int,
    now: datetime,
    config: SelectorConfig | None = None,
) -> CandidateScore:
    """Score one candidate question for this learner."""
    config = config or SelectorConfig()

    if stat is None or stat.attempts <= 0:
        novelty, reinforcement = config.unseen_bonus, 0.0
    else:
        novelty = 0.0
        reinforcement = config.wrong_weight * stat.wrong - config.correct_weight * stat.correct

    return CandidateScore(
        novelty=novelty,
        reinforcement=reinforcement,
        recency=recency_penalty(stat.last_attempt_at if stat else None, now, config),
        difficulty_fit=-config.difficulty_weight * abs(question.difficulty - target_difficulty),
    )


def select_adaptive_batch(
    question_pool: Iterable[Question | dict],
    per_question_stats: Iterable[PerQuestionStat | dict] = (),
    recent_attempts: Iterable[AttemptRecord | dict] = (),
    limit: int | None = None,
    now: datetime | None = None,
    config: SelectorConfig | None = None,
) -> AdaptiveBatch:
    """
    Rank a topic's question pool and return the next batch to serve.

    Args:
        question_pool: All candidate questions for the topic
        per_question_stats: Learner's aggregate attempts per question
        recent_attempts: Learner's attempt history in the topic
        limit: Batch size (config default if None)
        now: Reference time for recency (defaults to current UTC time)
        config: Selection weights and thresholds

    Returns:
        AdaptiveBatch ordered best-first
    """
    config = config or SelectorConfig()
    now = now or datetime.now(timezone.utc)
    limit = config.default_limit if limit is None else limit

    pool = _valid_records(question_pool, Question)
    if not pool:
        return AdaptiveBatch(target_difficulty=config.default_difficulty)

    stats = _valid_records(per_question_stats, PerQuestionStat)
    attempts = _valid_records(recent_attempts, AttemptRecord)

    pool_ids = {_key(q.id) for q in pool}
    in_topic = [a for a in attempts if a.question_id is None or _key(a.question_id) in pool_ids]
    target = compute_target_difficulty(in_topic, config)

    stats_by_id = {_key(s.question_id): s for s in stats}
    ranked = [
        RankedQuestion(q, score_candidate(q, stats_by_id.get(_key(q.id)), target.target, now, config))
        for q in pool
    ]
    ranked.sort(key=lambda r: (-r.score.total, _newest_first_key(r.question.created_at)))

    logger.debug(
        f"Adaptive selection: pool={len(pool)} target={target.target} "
        f"accuracy={target.recent_accuracy} samples={target.samples}"
    )

    return AdaptiveBatch(
        ranked=ranked[: max(0, limit)],
        target_difficulty=target.target,
        recent_accuracy=target.recent_accuracy,
        samples=target.samples,
    )
