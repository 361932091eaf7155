"""
Unit tests for adaptive question selection.

Tests the rolling difficulty target, per-candidate scoring and the
final ranking.
"""

from datetime import datetime, timedelta

import pytest

from learnflow.adaptive import (
    SelectorConfig,
    compute_target_difficulty,
    recency_penalty,
    score_candidate,
    select_adaptive_batch,
)
from learnflow.core.models import AttemptRecord, PerQuestionStat, Question


def attempts(*outcomes, difficulty=3, start=None):
    """Attempts newest first, one minute apart."""
    start = start or datetime(2024, 3, 1, 11, 0)
    return [
        AttemptRecord(is_correct=correct, difficulty=difficulty, created_at=start - timedelta(minutes=i))
        for i, correct in enumerate(outcomes)
    ]


class TestTargetDifficulty:
    """Test the rolling difficulty target."""

    def test_no_history(self):
        target = compute_target_difficulty([])
        assert target.target == 3
        assert target.recent_accuracy is None
        assert target.samples == 0

    def test_high_accuracy_raises_target(self):
        target = compute_target_difficulty(attempts(True, True, True, True, True))
        assert target.target == 4
        assert target.recent_accuracy == 1.0

    def test_low_accuracy_lowers_target(self):
        target = compute_target_difficulty(attempts(False, False, True, False, True, difficulty=2))
        assert target.target == 1

    def test_clamped_to_scale(self):
        assert compute_target_difficulty(attempts(*[False] * 5, difficulty=1)).target == 1
        assert compute_target_difficulty(attempts(*[True] * 5, difficulty=5)).target == 5

    def test_too_few_samples_for_nudge(self):
        target = compute_target_difficulty(attempts(True, True, True, True))
        assert target.target == 3
        assert target.samples == 4

    def test_middle_accuracy_keeps_average(self):
        target = compute_target_difficulty(attempts(True, True, True, False, False, difficulty=2))
        assert target.target == 2
        assert target.recent_accuracy == pytest.approx(0.6)

    def test_average_rounds_half_up(self):
        history = attempts(True, difficulty=2) + attempts(False, difficulty=3, start=datetime(2024, 2, 1))
        assert compute_target_difficulty(history).target == 3

    def test_window_keeps_most_recent(self):
        recent = attempts(True, True, True, difficulty=1)
        older = attempts(False, False, False, difficulty=5, start=datetime(2024, 1, 1))
        target = compute_target_difficulty(older + recent, SelectorConfig(history_window=3))
        assert target.target == 1
        assert target.samples == 3


class TestCandidateScoring:
    """Test per-question score components."""

    @pytest.mark.parametrize("hours_ago,expected", [
        (2, -300.0),
        (10, -150.0),
        (48, -60.0),
        (100, -15.0),
        (200, 0.0),
    ])
    def test_recency_buckets(self, now, hours_ago, expected):
        assert recency_penalty(now - timedelta(hours=hours_ago), now) == expected

    def test_no_previous_attempt(self, now):
        assert recency_penalty(None, now) == 0.0

    def test_naive_timestamps_are_utc(self, now):
        assert recency_penalty(datetime(2024, 3, 1, 10, 0), now) == -300.0

    def test_unseen_question(self, now):
        score = score_candidate(Question(id="q", difficulty=3), None, 3, now)
        assert score.novelty == 1000.0
        assert score.reinforcement == 0.0
        assert score.total == 1000.0

    def test_zero_attempts_counts_as_unseen(self, now):
        stat = PerQuestionStat(question_id="q", attempts=0)
        assert score_candidate(Question(id="q"), stat, 3, now).novelty == 1000.0

    def test_reinforcement_and_difficulty_fit(self, now):
        stat = PerQuestionStat(question_id="q", attempts=3, correct=1)
        score = score_candidate(Question(id="q", difficulty=5), stat, 3, now)
        assert score.novelty == 0.0
        assert score.reinforcement == 225.0
        assert score.difficulty_fit == -20.0
        assert score.total == 205.0


class TestSelectAdaptiveBatch:
    """Test ranking a question pool."""

    @pytest.fixture
    def pool(self):
        return [
            Question(id="mastered", difficulty=3),
            Question(id="missed", difficulty=3),
            Question(id="unseen", difficulty=3),
        ]

    @pytest.fixture
    def stats(self, now):
        return [
            PerQuestionStat(question_id="missed", attempts=2, correct=0, last_attempt_at=now - timedelta(hours=100)),
            PerQuestionStat(question_id="mastered", attempts=5, correct=5, last_attempt_at=now - timedelta(hours=200)),
        ]

    def test_ranking_order(self, pool, stats, now):
        batch = select_adaptive_batch(pool, stats, now=now)
        assert [q.id for q in batch.questions] == ["unseen", "missed", "mastered"]
        assert [r.score.total for r in batch.ranked] == [1000.0, 225.0, -75.0]

    def test_unseen_beats_mastered(self, now):
        pool = [Question(id="mastered", difficulty=3), Question(id="unseen", difficulty=3)]
        stats = [PerQuestionStat(question_id="mastered", attempts=5, correct=5)]
        batch = select_adaptive_batch(pool, stats, now=now)
        assert batch.target_difficulty == 3
        assert batch.questions[0].id == "unseen"

    def test_recent_attempt_is_held_back(self, pool, stats, now):
        stats.append(PerQuestionStat(question_id="unseen", attempts=1, correct=0, last_attempt_at=now - timedelta(hours=1)))
        batch = select_adaptive_batch(pool, stats, now=now)
        # 120 wrong - 300 recency
        assert [q.id for q in batch.questions] == ["missed", "mastered", "unseen"]

    def test_limit(self, pool, stats, now):
        assert len(select_adaptive_batch(pool, stats, limit=2, now=now).questions) == 2
        assert select_adaptive_batch(pool, stats, limit=0, now=now).questions == []

    def test_default_limit(self, now):
        pool = [Question(id=i) for i in range(15)]
        assert len(select_adaptive_batch(pool, now=now).questions) == 10
        config = SelectorConfig(default_limit=4)
        assert len(select_adaptive_batch(pool, now=now, config=config).questions) == 4

    def test_ties_prefer_newer_questions(self, now):
        pool = [
            Question(id="undated"),
            Question(id="old", created_at=datetime(2023, 1, 1)),
            Question(id="new", created_at=datetime(2024, 1, 1)),
        ]
        batch = select_adaptive_batch(pool, now=now)
        assert [q.id for q in batch.questions] == ["new", "old", "undated"]

    def test_empty_pool(self, now):
        batch = select_adaptive_batch([], now=now)
        assert batch.questions == []
        assert batch.target_difficulty == 3
        assert batch.samples == 0

    def test_attempts_outside_pool_are_ignored(self, pool, now):
        history = [
            AttemptRecord(is_correct=True, difficulty=5, question_id="other-topic"),
            AttemptRecord(is_correct=False, difficulty=2, question_id="missed"),
            AttemptRecord(is_correct=False, difficulty=2),
        ]
        batch = select_adaptive_batch(pool, recent_attempts=history, now=now)
        assert batch.samples == 2
        assert batch.target_difficulty == 2
        assert batch.recent_accuracy == 0.0

    def test_accepts_raw_records(self, now):
        batch = select_adaptive_batch(
            [{"id": 1, "difficulty": 2, "createdAt": "2024-01-01T00:00:00Z"}, {"id": 2, "difficulty": 2}],
            [{"questionId": 1, "attempts": 1, "correct": 1, "lastAttemptAt": "2024-02-01T00:00:00Z"}],
            [{"isCorrect": True, "difficulty": 2, "questionId": 1}],
            now=now,
        )
        assert [q.id for q in batch.questions] == [2, 1]
        assert batch.target_difficulty == 2

    def test_to_dict(self, pool, now):
        payload = select_adaptive_batch(pool, now=now).to_dict()
        assert [q["id"] for q in payload["questions"]] == ["mastered", "missed", "unseen"]
        assert payload["targetDifficulty"] == 3
        assert payload["recentAccuracy"] is None
        assert payload["samples"] == 0

    def test_null_difficulty_uses_default(self, now):
        batch = select_adaptive_batch([{"id": "q", "difficulty": None}], now=now)
        assert batch.questions[0].difficulty == 3

    def test_malformed_records_are_skipped(self, now):
        batch = select_adaptive_batch(
            ["junk", {"id": "kept", "difficulty": 2}],
            [{"attempts": 4, "correct": 0}, {"questionId": "kept", "attempts": "many"}],
            [{"difficulty": 5}, None, {"isCorrect": False, "difficulty": 2}],
            now=now,
        )
        assert [q.id for q in batch.questions] == ["kept"]
        assert batch.ranked[0].score.novelty == 1000.0
        assert batch.samples == 1

    def test_only_malformed_pool_entries(self, now):
        batch = select_adaptive_batch(["junk", 42], now=now)
        assert batch.questions == []
        assert batch.target_difficulty == 3
