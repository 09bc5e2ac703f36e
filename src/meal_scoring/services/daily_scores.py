"""Recalculation and retrieval of persisted daily scores."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from typing import Protocol

from meal_scoring.domain.diet import DietProfile
from meal_scoring.domain.errors import InvalidInputError, PersistenceError
from meal_scoring.domain.meals import MealRecord
from meal_scoring.domain.scoring import (
    DEFAULT_SCORING_CONFIG,
    DailyScoreRecord,
    DailyScoreSummary,
    ScoreBreakdown,
    ScoringConfig,
)
from meal_scoring.services.scoring import calculate_daily_score

logger = logging.getLogger(__name__)


class MealReader(Protocol):
    """Read access to logged meals."""

    def list_meals(self, user_id: str, start: date, end: date) -> list[MealRecord]:
        """Return meals in ``[start, end]`` ordered by date, then time."""


class DietReader(Protocol):
    """Read access to diet profiles."""

    def get_diet(self, user_id: str) -> DietProfile | None:
        """Return the user's diet profile, if configured."""


class DailyScoreRepository(Protocol):
    """Persistence interface for daily scores."""

    def upsert_score(
        self, user_id: str, day: date, score: int, details: ScoreBreakdown
    ) -> None:
        """Create or fully replace the score for ``(user_id, day)``."""

    def list_scores(
        self, user_id: str, start: date, end: date
    ) -> list[DailyScoreRecord]:
        """Return scores in ``[start, end]`` ordered by date."""


@dataclass
class DailyScoreService:
    """Regenerates daily scores from meals and reads them back."""

    meal_reader: MealReader
    diet_reader: DietReader
    repository: DailyScoreRepository
    config: ScoringConfig = field(default=DEFAULT_SCORING_CONFIG)

    def recalc_daily_scores(
        self, user_id: str, start: date, end: date
    ) -> list[DailyScoreSummary]:
        """Rescore every day in range that has at least one meal.

        Each day is upserted independently. If a write fails, days already
        written stay written and are reported on the raised error.
        """
        _check_range(start, end)
        diet = self.diet_reader.get_diet(user_id)
        meals = self.meal_reader.list_meals(user_id, start, end)

        written: list[DailyScoreSummary] = []
        for day, day_meals in group_meals_by_day(meals).items():
            breakdown = calculate_daily_score(day_meals, diet, self.config)
            try:
                self.repository.upsert_score(user_id, day, breakdown.total, breakdown)
            except PersistenceError as exc:
                logger.exception(
                    "Failed to store daily score",
                    extra={"user_id": user_id, "day": day.isoformat()},
                )
                raise PersistenceError(
                    f"Failed to store score for {day.isoformat()}",
                    written=[summary.date for summary in written],
                ) from exc
            written.append(
                DailyScoreSummary(user_id=user_id, date=day, score=breakdown.total)
            )

        logger.info(
            "Recalculated daily scores",
            extra={"user_id": user_id, "days": len(written)},
        )
        return written

    def get_daily_scores(
        self, user_id: str, start: date, end: date
    ) -> list[DailyScoreRecord]:
        """Return persisted scores without recomputing them."""
        _check_range(start, end)
        return self.repository.list_scores(user_id, start, end)


def group_meals_by_day(meals: Iterable[MealRecord]) -> dict[date, list[MealRecord]]:
    """Group meals by their date, keeping input order inside each day."""
    groups: dict[date, list[MealRecord]] = {}
    for meal in meals:
        groups.setdefault(meal.date, []).append(meal)
    return groups


def _check_range(start: date, end: date) -> None:
    if start > end:
        raise InvalidInputError(
            f"Range start {start.isoformat()} is after end {end.isoformat()}"
        )
