"""Domain models for logged meals."""

from dataclasses import dataclass
from datetime import date
from enum import StrEnum

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class MealType(StrEnum):
    """Meal slot within a day."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


@dataclass(frozen=True)
class MealRecord:
    """One logged meal instance.

    ``date`` is already normalized by the storage layer and is only
    compared and ordered, never reformatted. ``time`` is a 24-hour
    ``HH:MM`` wall-clock string.
    """

    user_id: str
    date: date
    time: str
    meal_type: MealType
    has_carb: bool
    has_protein: bool
    has_veggies: bool
    items: str = ""
    notes: str | None = None

    @property
    def unique_key(self) -> tuple[str, date, str, MealType, str]:
        """Return the natural key used for idempotent upserts."""
        return (self.user_id, self.date, self.time, self.meal_type, self.items)
