"""
Content integrity audit.

Runs every question through its scorer with an empty submission. Learner
input can only ever make a result incorrect, so any ``ok=False`` here is a
problem in the stored question itself.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from loguru import logger

from learnflow.core.models import Question

from .base import ScoringConfig
from .engine import score_question_answer
from .normalizer import normalize_text


@dataclass
class AuditFinding:
    """An integrity problem found in one stored question."""

    question_id: str | int | None
    question_type: str | None
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.question_id, "type": self.question_type, "reason": self.reason}


@dataclass
class AuditReport:
    """Summary of an integrity audit run."""

    total: int = 0
    findings: list[AuditFinding] = field(default_factory=list)

    @property
    def invalid(self) -> int:
        return len(self.findings)

    @property
    def valid(self) -> int:
        return self.total - self.invalid

    @property
    def health(self) -> int:
        """Percentage of questions without findings."""
        if self.total == 0:
            return 100
        return round(self.valid / self.total * 100)

    def to_dict(self) -> dict[str, Any]:
        return {
            "findings": [f.to_dict() for f in self.findings],
            "summary": {
                "total": self.total,
                "valid": self.valid,
                "invalid": self.invalid,
                "health": self.health,
            },
        }


def audit_question(
    question: Question | dict,
    config: ScoringConfig | None = None,
) -> AuditFinding | None:
    """Return a finding when the question's stored answer data is unusable."""
    result = score_question_answer(question, None, config)
    if isinstance(question, Question):
        question_id, question_type = question.id, question.type
    elif isinstance(question, dict):
        question_id, question_type = question.get("id"), question.get("type")
    else:
        question_id, question_type = None, None

    if not result.ok:
        return AuditFinding(question_id, question_type, result.reason or "unknown")

    scaffolded = bool(result.details and "steps" in result.details)
    if not scaffolded and not normalize_text(result.correct_answer):
        return AuditFinding(question_id, question_type, "empty_correct_answer")

    return None


def audit_questions(
    questions: Iterable[Question | dict],
    config: ScoringConfig | None = None,
) -> AuditReport:
    report = AuditReport()
    for question in questions:
        report.total += 1
        finding = audit_question(question, config)
        if finding is not None:
            report.findings.append(finding)

    logger.info(f"Audited {report.total} questions: {report.invalid} with issues ({report.health}% healthy)")
    return report
