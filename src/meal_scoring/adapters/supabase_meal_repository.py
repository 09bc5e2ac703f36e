"""Supabase repository for meals."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

from postgrest.exceptions import APIError
from supabase import Client

from meal_scoring.domain.errors import PersistenceError
from meal_scoring.domain.meals import MealRecord, MealType
from meal_scoring.services.meals import MealRepository

MEAL_CONFLICT_COLUMNS = "user_id,date,time,meal_type,items"
MEAL_COLUMNS = (
    "user_id, date, time, meal_type, items, notes, "
    "has_carb, has_protein, has_veggies"
)


@dataclass
class SupabaseMealRepository(MealRepository):
    """Supabase implementation for meal persistence."""

    client: Client

    def upsert_meal(self, meal: MealRecord) -> MealRecord:
        """Insert a meal, leaving an existing row with its key untouched.

        Returns the row as stored, which differs from ``meal`` when a row
        with the same key already existed.
        """
        self.upsert_meals([meal])
        try:
            response = (
                self.client.table("meals")
                .select(MEAL_COLUMNS)
                .eq("user_id", meal.user_id)
                .eq("date", meal.date.isoformat())
                .eq("time", meal.time)
                .eq("meal_type", meal.meal_type.value)
                .eq("items", meal.items)
                .limit(1)
                .execute()
            )
        except APIError as exc:
            raise PersistenceError(f"Failed to load meal: {exc.message}") from exc
        if not response.data:
            raise PersistenceError("Stored meal could not be read back")
        return _parse_row(response.data[0])

    def upsert_meals(self, meals: Sequence[MealRecord]) -> int:
        """Insert meals in one statement, skipping rows that already exist."""
        if not meals:
            return 0
        payload = [_to_row(meal) for meal in meals]
        try:
            self.client.table("meals").upsert(
                payload,
                on_conflict=MEAL_CONFLICT_COLUMNS,
                ignore_duplicates=True,
            ).execute()
        except APIError as exc:
            raise PersistenceError(f"Failed to store meals: {exc.message}") from exc
        return len(payload)

    def list_meals(self, user_id: str, start: date, end: date) -> list[MealRecord]:
        """Return meals in the date range ordered by date, then time."""
        try:
            response = (
                self.client.table("meals")
                .select(MEAL_COLUMNS)
                .eq("user_id", user_id)
                .gte("date", start.isoformat())
                .lte("date", end.isoformat())
                .order("date", desc=False)
                .order("time", desc=False)
                .execute()
            )
        except APIError as exc:
            raise PersistenceError(f"Failed to load meals: {exc.message}") from exc
        return [_parse_row(row) for row in response.data or []]


def _to_row(meal: MealRecord) -> dict[str, object]:
    return {
        "user_id": meal.user_id,
        "date": meal.date.isoformat(),
        "time": meal.time,
        "meal_type": meal.meal_type.value,
        "items": meal.items,
        "notes": meal.notes,
        "has_carb": meal.has_carb,
        "has_protein": meal.has_protein,
        "has_veggies": meal.has_veggies,
    }


def _parse_row(row: dict[str, object]) -> MealRecord:
    return MealRecord(
        user_id=str(row["user_id"]),
        date=date.fromisoformat(str(row["date"])[:10]),
        time=str(row["time"])[:5],
        meal_type=MealType(row["meal_type"]),
        has_carb=bool(row.get("has_carb", False)),
        has_protein=bool(row.get("has_protein", False)),
        has_veggies=bool(row.get("has_veggies", False)),
        items=str(row.get("items") or ""),
        notes=row.get("notes"),
    )
