"""Diet profile service."""

from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from typing import Protocol

from meal_scoring.domain.diet import DietProfile
from meal_scoring.domain.errors import InvalidInputError
from meal_scoring.services.daily_scores import DailyScoreService, DietReader

DEFAULT_RECALC_WINDOW_DAYS = 30


class DietRepository(DietReader, Protocol):
    """Persistence interface for diet profiles."""

    def replace_diet(self, profile: DietProfile) -> DietProfile:
        """Create or fully replace the profile and its meal rules."""


@dataclass
class DietService:
    """Reads and replaces diet profiles."""

    repository: DietRepository
    daily_score_service: DailyScoreService
    recalc_window_days: int = DEFAULT_RECALC_WINDOW_DAYS

    def get_diet(self, user_id: str) -> DietProfile | None:
        """Return the stored profile, or None when the user has none."""
        return self.repository.get_diet(user_id)

    def replace_diet(
        self, profile: DietProfile, today: date | None = None
    ) -> DietProfile:
        """Replace the profile and rescore the trailing window ending today."""
        seen = set()
        for rule in profile.meal_rules:
            if rule.meal_type in seen:
                raise InvalidInputError(
                    f"Duplicate meal rule for {rule.meal_type.value}"
                )
            seen.add(rule.meal_type)

        stored = self.repository.replace_diet(profile)
        end = today or datetime.now(tz=UTC).date()
        start = end - timedelta(days=max(self.recalc_window_days, 1) - 1)
        self.daily_score_service.recalc_daily_scores(profile.user_id, start, end)
        return stored
