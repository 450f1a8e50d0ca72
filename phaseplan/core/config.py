"""
Engine configuration using Pydantic Settings.

Values are read from environment variables (or a local .env file) so that the
surrounding application can tune cache sizing and thresholds without code changes.
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ===========================================
    # Environment
    # ===========================================
    ENVIRONMENT: Literal["local", "test", "production"] = "local"
    DEBUG: bool = False
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # ===========================================
    # Recurrence
    # ===========================================
    # Safety bound against malformed configs producing unbounded series
    RECURRENCE_MAX_OCCURRENCES: int = 100
    RECURRENCE_WARNING_THRESHOLD: int = 50

    # Forward-looking window used as the effective end of continuous projects
    CONTINUOUS_WINDOW_FORWARD_DAYS: int = 90

    # ===========================================
    # Calculation cache
    # ===========================================
    CACHE_TTL_SECONDS: float = 300.0
    CACHE_MAX_SIZE: int = 1000

    # ===========================================
    # Timeline viewport (pixels per column)
    # ===========================================
    COLUMN_WIDTH_DAYS: float = 52.0
    COLUMN_WIDTH_WEEKS: float = 154.0

    # ===========================================
    # Budget recommendations
    # ===========================================
    BUDGET_HIGH_UTILIZATION_PERCENT: float = 90.0
    BUDGET_LOW_UTILIZATION_PERCENT: float = 50.0
    PHASE_DOMINANCE_RATIO: float = 0.5
    MIN_AVERAGE_PHASE_HOURS: float = 1.0

    @property
    def effective_log_level(self) -> str:
        """DEBUG overrides the configured level."""
        return "DEBUG" if self.DEBUG else self.LOG_LEVEL


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures settings are loaded only once.
    """
    return Settings()
