"""Shared test fixtures."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date

import pytest

from meal_scoring.config import Settings
from meal_scoring.containers import AppContainer
from meal_scoring.domain.diet import DietProfile
from meal_scoring.domain.errors import PersistenceError
from meal_scoring.domain.meals import MealRecord, MealType
from meal_scoring.domain.scoring import DailyScoreRecord, ScoreBreakdown
from meal_scoring.services.daily_scores import DailyScoreRepository, DailyScoreService
from meal_scoring.services.diet import DietRepository, DietService
from meal_scoring.services.ingest import IngestService, MealExtractionClient
from meal_scoring.services.meals import MealRepository, MealService


def make_meal(  # noqa: PLR0913
    time: str,
    meal_type: MealType,
    carb: bool = False,
    protein: bool = False,
    veggies: bool = False,
    day: date = date(2025, 3, 10),
    user_id: str = "ana",
    items: str = "",
) -> MealRecord:
    return MealRecord(
        user_id=user_id,
        date=day,
        time=time,
        meal_type=meal_type,
        has_carb=carb,
        has_protein=protein,
        has_veggies=veggies,
        items=items or f"{meal_type.value} at {time}",
    )


@dataclass
class InMemoryMealRepository(MealRepository):
    """In-memory meal repository for tests."""

    meals: dict[tuple, MealRecord] = field(default_factory=dict)

    def upsert_meal(self, meal: MealRecord) -> MealRecord:
        return self.meals.setdefault(meal.unique_key, meal)

    def upsert_meals(self, meals: Sequence[MealRecord]) -> int:
        for meal in meals:
            self.upsert_meal(meal)
        return len(meals)

    def list_meals(self, user_id: str, start: date, end: date) -> list[MealRecord]:
        selected = [
            meal
            for meal in self.meals.values()
            if meal.user_id == user_id and start <= meal.date <= end
        ]
        return sorted(selected, key=lambda meal: (meal.date, meal.time))


@dataclass
class InMemoryDietRepository(DietRepository):
    """In-memory diet repository for tests."""

    diets: dict[str, DietProfile] = field(default_factory=dict)

    def get_diet(self, user_id: str) -> DietProfile | None:
        return self.diets.get(user_id)

    def replace_diet(self, profile: DietProfile) -> DietProfile:
        self.diets[profile.user_id] = profile
        return profile


@dataclass
class InMemoryDailyScoreRepository(DailyScoreRepository):
    """In-memory daily score repository for tests."""

    scores: dict[tuple[str, date], DailyScoreRecord] = field(default_factory=dict)
    upserts: int = 0
    fail_on: set[date] = field(default_factory=set)

    def upsert_score(
        self, user_id: str, day: date, score: int, details: ScoreBreakdown
    ) -> None:
        if day in self.fail_on:
            raise PersistenceError(f"write refused for {day.isoformat()}")
        self.upserts += 1
        self.scores[(user_id, day)] = DailyScoreRecord(
            id=f"{user_id}:{day.isoformat()}",
            user_id=user_id,
            date=day,
            score=score,
            details=details,
        )

    def list_scores(
        self, user_id: str, start: date, end: date
    ) -> list[DailyScoreRecord]:
        return sorted(
            (
                record
                for (owner, day), record in self.scores.items()
                if owner == user_id and start <= day <= end
            ),
            key=lambda record: record.date,
        )


@dataclass
class FakeExtractionClient(MealExtractionClient):
    """Fake extraction client returning a fixed payload per call."""

    payload: dict[str, object] = field(
        default_factory=lambda: {
            "meals": [
                {
                    "time": "13:00",
                    "type": "lunch",
                    "items": ["arroz", "pollo", "ensalada"],
                    "has_carb": True,
                    "has_protein": True,
                    "has_veggies": True,
                    "notes": "",
                }
            ]
        }
    )
    messages: list[str] = field(default_factory=list)

    async def extract(
        self, *, schema: dict[str, object], prompt: str, message: str
    ) -> dict[str, object]:
        self.messages.append(message)
        return self.payload


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        openai_api_key="openai-key",
    )


@pytest.fixture
def meal_repository() -> InMemoryMealRepository:
    return InMemoryMealRepository()


@pytest.fixture
def diet_repository() -> InMemoryDietRepository:
    return InMemoryDietRepository()


@pytest.fixture
def score_repository() -> InMemoryDailyScoreRepository:
    return InMemoryDailyScoreRepository()


@pytest.fixture
def daily_score_service(
    meal_repository: InMemoryMealRepository,
    diet_repository: InMemoryDietRepository,
    score_repository: InMemoryDailyScoreRepository,
) -> DailyScoreService:
    return DailyScoreService(
        meal_reader=meal_repository,
        diet_reader=diet_repository,
        repository=score_repository,
    )


@pytest.fixture
def meal_service(
    meal_repository: InMemoryMealRepository,
    daily_score_service: DailyScoreService,
) -> MealService:
    return MealService(
        repository=meal_repository, daily_score_service=daily_score_service
    )


@pytest.fixture
def diet_service(
    diet_repository: InMemoryDietRepository,
    daily_score_service: DailyScoreService,
) -> DietService:
    return DietService(
        repository=diet_repository, daily_score_service=daily_score_service
    )


@pytest.fixture
def extraction_client() -> FakeExtractionClient:
    return FakeExtractionClient()


@pytest.fixture
def container(
    settings: Settings,
    daily_score_service: DailyScoreService,
    meal_service: MealService,
    diet_service: DietService,
    extraction_client: FakeExtractionClient,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        daily_score_service=daily_score_service,
        meal_service=meal_service,
        diet_service=diet_service,
        ingest_service=IngestService(
            client=extraction_client, meal_service=meal_service
        ),
        close_resources=close_resources,
    )
