"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from meal_scoring.adapters.openai_meal_extraction_client import (
    OpenAIMealExtractionClient,
)
from meal_scoring.adapters.supabase_daily_score_repository import (
    SupabaseDailyScoreRepository,
)
from meal_scoring.adapters.supabase_diet_repository import SupabaseDietRepository
from meal_scoring.adapters.supabase_meal_repository import SupabaseMealRepository
from meal_scoring.config import Settings, scoring_config_from_settings
from meal_scoring.services.daily_scores import DailyScoreService
from meal_scoring.services.diet import DietService
from meal_scoring.services.ingest import IngestService
from meal_scoring.services.meals import MealService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    daily_score_service: DailyScoreService
    meal_service: MealService
    diet_service: DietService
    ingest_service: IngestService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    meal_repository = SupabaseMealRepository(supabase_client)
    diet_repository = SupabaseDietRepository(supabase_client)
    score_repository = SupabaseDailyScoreRepository(supabase_client)
    daily_score_service = DailyScoreService(
        meal_reader=meal_repository,
        diet_reader=diet_repository,
        repository=score_repository,
        config=scoring_config_from_settings(resolved_settings),
    )
    meal_service = MealService(
        repository=meal_repository,
        daily_score_service=daily_score_service,
    )
    diet_service = DietService(
        repository=diet_repository,
        daily_score_service=daily_score_service,
        recalc_window_days=resolved_settings.diet_recalc_window_days,
    )
    extraction_client = OpenAIMealExtractionClient.create(
        api_key=resolved_settings.openai_api_key,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    ingest_service = IngestService(
        client=extraction_client,
        meal_service=meal_service,
    )

    async def close_resources() -> None:
        await extraction_client.close()

    return AppContainer(
        settings=resolved_settings,
        daily_score_service=daily_score_service,
        meal_service=meal_service,
        diet_service=diet_service,
        ingest_service=ingest_service,
        close_resources=close_resources,
    )
