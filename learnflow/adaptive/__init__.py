"""
Adaptive Learning Module.

Per-session question ranking balancing novelty, error reinforcement,
recency avoidance and difficulty fit.
"""

from learnflow.adaptive.selector import (
    AdaptiveBatch,
    CandidateScore,
    DifficultyTarget,
    RankedQuestion,
    SelectorConfig,
    compute_target_difficulty,
    recency_penalty,
    score_candidate,
    select_adaptive_batch,
)

__all__ = [
    "AdaptiveBatch",
    "CandidateScore",
    "DifficultyTarget",
    "RankedQuestion",
    "SelectorConfig",
    "compute_target_difficulty",
    "recency_penalty",
    "score_candidate",
    "select_adaptive_batch",
]
