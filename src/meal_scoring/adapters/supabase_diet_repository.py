"""Supabase repository for diet profiles."""

from dataclasses import dataclass

from postgrest.exceptions import APIError
from supabase import Client

from meal_scoring.domain.diet import DietProfile, MealRule
from meal_scoring.domain.errors import PersistenceError
from meal_scoring.domain.meals import MealType
from meal_scoring.services.diet import DietRepository


@dataclass
class SupabaseDietRepository(DietRepository):
    """Supabase implementation for diet profiles and their meal rules."""

    client: Client

    def get_diet(self, user_id: str) -> DietProfile | None:
        """Return the stored profile with its rules, if any."""
        try:
            response = (
                self.client.table("ideal_diets")
                .select(
                    "id, user_id, ideal_carb, ideal_protein, ideal_veggies, notes, "
                    "ideal_diet_meal_rules(meal_type, expect_carb, expect_protein, "
                    "expect_veggies)"
                )
                .eq("user_id", user_id)
                .limit(1)
                .execute()
            )
        except APIError as exc:
            raise PersistenceError(f"Failed to load diet: {exc.message}") from exc
        if not response.data:
            return None
        return _parse_diet(response.data[0])

    def replace_diet(self, profile: DietProfile) -> DietProfile:
        """Upsert the profile row, then swap its rules for the new set.

        New rules are inserted before the old rows are deleted by id, so a
        failed insert leaves the previous rules in place.
        """
        rules_table = "ideal_diet_meal_rules"
        try:
            response = (
                self.client.table("ideal_diets")
                .upsert(
                    {
                        "user_id": profile.user_id,
                        "ideal_carb": profile.ideal_carb,
                        "ideal_protein": profile.ideal_protein,
                        "ideal_veggies": profile.ideal_veggies,
                        "notes": profile.notes,
                    },
                    on_conflict="user_id",
                )
                .execute()
            )
            if not response.data:
                raise PersistenceError("Failed to store diet profile")
            diet_id = str(response.data[0]["id"])
            existing = (
                self.client.table(rules_table)
                .select("id")
                .eq("diet_id", diet_id)
                .execute()
            )
            old_ids = [str(row["id"]) for row in existing.data or []]
            if profile.meal_rules:
                self.client.table(rules_table).insert(
                    [
                        {
                            "diet_id": diet_id,
                            "meal_type": rule.meal_type.value,
                            "expect_carb": rule.expect_carb,
                            "expect_protein": rule.expect_protein,
                            "expect_veggies": rule.expect_veggies,
                        }
                        for rule in profile.meal_rules
                    ]
                ).execute()
            if old_ids:
                self.client.table(rules_table).delete().in_(
                    "id", old_ids
                ).execute()
        except APIError as exc:
            raise PersistenceError(f"Failed to store diet: {exc.message}") from exc
        return profile


def _parse_diet(row: dict[str, object]) -> DietProfile:
    rules_raw = row.get("ideal_diet_meal_rules") or []
    rules = tuple(
        MealRule(
            meal_type=MealType(rule["meal_type"]),
            expect_carb=bool(rule.get("expect_carb", False)),
            expect_protein=bool(rule.get("expect_protein", False)),
            expect_veggies=bool(rule.get("expect_veggies", False)),
        )
        for rule in rules_raw
        if isinstance(rule, dict)
    )
    return DietProfile(
        user_id=str(row["user_id"]),
        ideal_carb=bool(row.get("ideal_carb", True)),
        ideal_protein=bool(row.get("ideal_protein", True)),
        ideal_veggies=bool(row.get("ideal_veggies", True)),
        meal_rules=rules,
        notes=row.get("notes"),
    )
