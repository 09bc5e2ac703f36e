"""Pydantic models for HTTP request and response payloads."""

from datetime import date

from pydantic import BaseModel, Field, field_validator

from meal_scoring.domain.diet import DietProfile, MealRule
from meal_scoring.domain.meals import TIME_PATTERN, MealRecord, MealType
from meal_scoring.domain.scoring import DailyScoreRecord, DailyScoreSummary


class MealCreate(BaseModel):
    """Meal submitted by a client."""

    user_id: str = Field(min_length=1)
    date: date
    time: str = Field(pattern=TIME_PATTERN)
    type: MealType
    items: str
    has_carb: bool
    has_protein: bool
    has_veggies: bool
    notes: str | None = None

    def to_record(self) -> MealRecord:
        return MealRecord(
            user_id=self.user_id,
            date=self.date,
            time=self.time,
            meal_type=self.type,
            has_carb=self.has_carb,
            has_protein=self.has_protein,
            has_veggies=self.has_veggies,
            items=self.items,
            notes=self.notes,
        )


class MealBulkCreate(BaseModel):
    """Batch of meals for import."""

    records: list[MealCreate]


class MealRuleIn(BaseModel):
    """Meal rule submitted as part of a diet profile."""

    meal_type: MealType
    expect_carb: bool
    expect_protein: bool
    expect_veggies: bool


class DietProfileIn(BaseModel):
    """Diet profile submitted by a client; replaces the stored one."""

    user_id: str = Field(min_length=1)
    ideal_carb: bool
    ideal_protein: bool
    ideal_veggies: bool
    notes: str | None = None
    meal_rules: list[MealRuleIn] = Field(default_factory=list)

    @field_validator("meal_rules")
    @classmethod
    def _one_rule_per_meal_type(cls, rules: list[MealRuleIn]) -> list[MealRuleIn]:
        meal_types = [rule.meal_type for rule in rules]
        if len(meal_types) != len(set(meal_types)):
            raise ValueError("at most one rule per meal type")
        return rules

    def to_profile(self) -> DietProfile:
        return DietProfile(
            user_id=self.user_id,
            ideal_carb=self.ideal_carb,
            ideal_protein=self.ideal_protein,
            ideal_veggies=self.ideal_veggies,
            notes=self.notes,
            meal_rules=tuple(
                MealRule(
                    meal_type=rule.meal_type,
                    expect_carb=rule.expect_carb,
                    expect_protein=rule.expect_protein,
                    expect_veggies=rule.expect_veggies,
                )
                for rule in self.meal_rules
            ),
        )


def meal_to_dict(meal: MealRecord) -> dict[str, object]:
    """Serialize a meal for JSON responses."""
    return {
        "user_id": meal.user_id,
        "date": meal.date.isoformat(),
        "time": meal.time,
        "type": meal.meal_type.value,
        "items": meal.items,
        "has_carb": meal.has_carb,
        "has_protein": meal.has_protein,
        "has_veggies": meal.has_veggies,
        "notes": meal.notes,
    }


def diet_to_dict(profile: DietProfile) -> dict[str, object]:
    """Serialize a diet profile for JSON responses."""
    return {
        "user_id": profile.user_id,
        "ideal_carb": profile.ideal_carb,
        "ideal_protein": profile.ideal_protein,
        "ideal_veggies": profile.ideal_veggies,
        "notes": profile.notes,
        "meal_rules": [
            {
                "meal_type": rule.meal_type.value,
                "expect_carb": rule.expect_carb,
                "expect_protein": rule.expect_protein,
                "expect_veggies": rule.expect_veggies,
            }
            for rule in profile.meal_rules
        ],
    }


def score_to_dict(record: DailyScoreRecord) -> dict[str, object]:
    """Serialize a persisted daily score for JSON responses."""
    return {
        "id": record.id,
        "user_id": record.user_id,
        "date": record.date.isoformat(),
        "score": record.score,
        "details": record.details.to_dict(),
        "updated_at": record.updated_at.isoformat() if record.updated_at else None,
    }


def summary_to_dict(summary: DailyScoreSummary) -> dict[str, object]:
    """Serialize a recalculation result entry."""
    return {
        "user_id": summary.user_id,
        "date": summary.date.isoformat(),
        "score": summary.score,
    }
