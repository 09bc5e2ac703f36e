"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from meal_scoring.domain.scoring import ScoringConfig

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    openai_api_key: str
    openai_model: str = "gpt-5.2"
    openai_reasoning_effort: str | None = None
    openai_store: bool = False
    environment: str = _ENVIRONMENT
    log_level: str = "INFO"
    diet_recalc_window_days: int = 30
    score_points_axis: int = 10
    score_points_rule: int = 5
    score_bonus_variety: int = 10
    score_penalty_none: int = 10
    score_points_perfect_match: int = 15
    score_points_partial_match: int = 8
    score_points_low_match: int = 3

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def scoring_config_from_settings(settings: Settings) -> ScoringConfig:
    """Build the scoring point table from settings."""
    return ScoringConfig(
        points_axis=settings.score_points_axis,
        points_rule=settings.score_points_rule,
        bonus_variety=settings.score_bonus_variety,
        penalty_none=settings.score_penalty_none,
        points_perfect_match=settings.score_points_perfect_match,
        points_partial_match=settings.score_points_partial_match,
        points_low_match=settings.score_points_low_match,
    )
