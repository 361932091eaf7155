"""
Configuration settings for learnflow.

Uses Pydantic Settings for environment variable management with .env file support.
Each component takes a plain dataclass config; Settings builds those from
LEARNFLOW_* environment variables.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from learnflow.adaptive.selector import SelectorConfig
from learnflow.scheduling.sm2 import SM2Config
from learnflow.scoring.base import ScoringConfig


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="LEARNFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Minimum level for the CLI log sink",
    )

    # ========================================
    # Scoring
    # ========================================
    slider_range_fraction: float = Field(
        default=0.02,
        description="Slider tolerance as a fraction of (max - min)",
    )
    slider_epsilon: float = Field(
        default=1e-9,
        description="Absolute slack added to slider tolerance for float boundaries",
    )

    # ========================================
    # SM-2 Scheduling
    # ========================================
    sm2_initial_ease: float = Field(default=2.5, description="Ease factor for new review items")
    sm2_minimum_ease: float = Field(default=1.3, description="Ease factor floor")
    sm2_first_interval: int = Field(default=1, description="Days after first correct recall")
    sm2_second_interval: int = Field(default=6, description="Days after second correct recall")
    review_initial_delay_days: int = Field(
        default=1,
        description="Days until a newly missed question is first due",
    )

    # ========================================
    # Adaptive Selection
    # ========================================
    selector_history_window: int = Field(default=30, description="Recent attempts considered")
    selector_min_samples: int = Field(
        default=5,
        description="Attempts needed before accuracy nudges the target",
    )
    selector_high_accuracy: float = Field(default=0.8, description="Accuracy that raises target")
    selector_low_accuracy: float = Field(default=0.5, description="Accuracy that lowers target")
    selector_unseen_bonus: float = Field(default=1000.0, description="Score for unseen questions")
    selector_wrong_weight: float = Field(default=120.0, description="Score per wrong attempt")
    selector_correct_weight: float = Field(default=15.0, description="Penalty per correct attempt")
    selector_difficulty_weight: float = Field(
        default=10.0,
        description="Penalty per difficulty step away from target",
    )
    selector_default_limit: int = Field(default=10, description="Default batch size")

    def scoring_config(self) -> ScoringConfig:
        return ScoringConfig(
            slider_range_fraction=self.slider_range_fraction,
            slider_epsilon=self.slider_epsilon,
        )

    def sm2_config(self) -> SM2Config:
        return SM2Config(
            initial_easiness=self.sm2_initial_ease,
            minimum_easiness=self.sm2_minimum_ease,
            first_interval=self.sm2_first_interval,
            second_interval=self.sm2_second_interval,
            initial_delay_days=self.review_initial_delay_days,
        )

    def selector_config(self) -> SelectorConfig:
        return SelectorConfig(
            history_window=self.selector_history_window,
            min_samples=self.selector_min_samples,
            high_accuracy=self.selector_high_accuracy,
            low_accuracy=self.selector_low_accuracy,
            unseen_bonus=self.selector_unseen_bonus,
            wrong_weight=self.selector_wrong_weight,
            correct_weight=self.selector_correct_weight,
            difficulty_weight=self.selector_difficulty_weight,
            default_limit=self.selector_default_limit,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
