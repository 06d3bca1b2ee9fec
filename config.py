"""
Configuration settings for the Aristotle tutoring engine.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Judgment Service (Gemini generateContent)
    # ========================================
    judgment_api_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Base URL of the judgment service",
    )
    judgment_api_key: str | None = Field(
        default=None,
        description="API key for the judgment service (unset = always use local heuristics)",
    )
    judgment_model: str = Field(
        default="gemini-1.5-flash",
        description="Model used to judge answers",
    )
    judgment_timeout_ms: int = Field(
        default=8000,
        description="Timeout for a single judgment request",
    )
    evaluation_budget_ms: int = Field(
        default=10000,
        description="Upper bound for one full evaluation, oracle call included",
    )
    judgment_history_window: int = Field(
        default=5,
        description="Number of previous attempts sent along as context",
    )

    # ========================================
    # Answer Validation
    # ========================================
    min_free_form_length: int = Field(
        default=3,
        description="Shorter free-form answers are rejected as syntax errors",
    )

    # ========================================
    # Adaptation
    # ========================================
    difficulty_upper_threshold: float = Field(
        default=0.8,
        description="Cumulative accuracy above which the tier escalates",
    )
    difficulty_lower_threshold: float = Field(
        default=0.6,
        description="Cumulative accuracy below which the tier de-escalates",
    )
    remediation_threshold: int = Field(
        default=2,
        description="Consecutive trusted conceptual errors that trigger remediation",
    )

    # ========================================
    # Sessions
    # ========================================
    timer_tick_seconds: float = Field(
        default=1.0,
        description="Interval of the session countdown",
    )
    default_item_count: int = Field(
        default=10,
        description="Items per practice session when not specified",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    def has_judgment_configured(self) -> bool:
        """Check if the judgment service can be called at all."""
        return bool(self.judgment_api_key and self.judgment_api_url)

    def get_judgment_config(self) -> dict[str, any]:
        """Get judgment service configuration as a dictionary."""
        return {
            "api_url": self.judgment_api_url,
            "api_key": self.judgment_api_key,
            "model": self.judgment_model,
            "timeout_ms": self.judgment_timeout_ms,
            "evaluation_budget_ms": self.evaluation_budget_ms,
            "history_window": self.judgment_history_window,
        }

    def get_adaptation_config(self) -> dict[str, any]:
        """Get difficulty and remediation thresholds as a dictionary."""
        return {
            "upper_threshold": self.difficulty_upper_threshold,
            "lower_threshold": self.difficulty_lower_threshold,
            "remediation_threshold": self.remediation_threshold,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
