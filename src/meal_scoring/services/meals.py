"""Meal logging service."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from typing import Protocol

from meal_scoring.domain.errors import PersistenceError
from meal_scoring.domain.meals import MealRecord
from meal_scoring.domain.scoring import DailyScoreSummary
from meal_scoring.services.daily_scores import DailyScoreService, MealReader


class MealRepository(MealReader, Protocol):
    """Persistence interface for meals."""

    def upsert_meal(self, meal: MealRecord) -> MealRecord:
        """Insert a meal unless an identical one already exists."""

    def upsert_meals(self, meals: Sequence[MealRecord]) -> int:
        """Insert a batch of meals idempotently and return the batch size."""


@dataclass(frozen=True)
class MealImportResult:
    """Outcome of a bulk meal import."""

    inserted: int
    scores: list[DailyScoreSummary]


@dataclass
class MealService:
    """Stores meals and keeps daily scores in sync with them."""

    repository: MealRepository
    daily_score_service: DailyScoreService

    def log_meal(self, meal: MealRecord) -> MealRecord:
        """Persist a single meal and rescore its day."""
        stored = self.repository.upsert_meal(meal)
        self.daily_score_service.recalc_daily_scores(
            meal.user_id, meal.date, meal.date
        )
        return stored

    def import_meals(self, meals: Sequence[MealRecord]) -> MealImportResult:
        """Persist a batch of meals, then rescore each user's touched span."""
        if not meals:
            return MealImportResult(inserted=0, scores=[])
        inserted = self.repository.upsert_meals(meals)
        scores: list[DailyScoreSummary] = []
        for user_id, (start, end) in _date_span_by_user(meals).items():
            try:
                scores.extend(
                    self.daily_score_service.recalc_daily_scores(user_id, start, end)
                )
            except PersistenceError as exc:
                raise PersistenceError(
                    str(exc), written=[s.date for s in scores] + exc.written
                ) from exc
        return MealImportResult(inserted=inserted, scores=scores)

    def list_meals(self, user_id: str, start: date, end: date) -> list[MealRecord]:
        """Return a user's meals in range, ordered by date and time."""
        return self.repository.list_meals(user_id, start, end)


def _date_span_by_user(meals: Sequence[MealRecord]) -> dict[str, tuple[date, date]]:
    spans: dict[str, tuple[date, date]] = {}
    for meal in meals:
        current = spans.get(meal.user_id)
        if current is None:
            spans[meal.user_id] = (meal.date, meal.date)
        else:
            spans[meal.user_id] = (
                min(current[0], meal.date),
                max(current[1], meal.date),
            )
    return spans
