"""
Exception types.

Scoring, scheduling and selection never raise on stored data; these exist
for callers that prefer exceptions over checking ``ScoreResult.ok``.
"""

from __future__ import annotations


class LearnflowError(Exception):
    """Base class for learnflow errors."""
    pass


class ContentIntegrityError(LearnflowError):
    """Raised when a stored question cannot be resolved to a definite answer."""

    def __init__(self, reason: str, question_id: str | int | None = None):
        self.reason = reason
        self.question_id = question_id
        label = f"question {question_id}" if question_id is not None else "question"
        super().__init__(f"{label} has unresolvable answer data: {reason}")
