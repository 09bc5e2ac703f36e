"""Domain models for diet profiles."""

from dataclasses import dataclass, field

from meal_scoring.domain.meals import MealType


@dataclass(frozen=True)
class MealRule:
    """Nutrients a given meal type is expected to contain."""

    meal_type: MealType
    expect_carb: bool
    expect_protein: bool
    expect_veggies: bool

    @property
    def expected_count(self) -> int:
        """Return how many nutrient flags the rule expects."""
        return sum((self.expect_carb, self.expect_protein, self.expect_veggies))


@dataclass(frozen=True)
class DietProfile:
    """A user's daily and per-meal nutritional targets."""

    user_id: str
    ideal_carb: bool = True
    ideal_protein: bool = True
    ideal_veggies: bool = True
    meal_rules: tuple[MealRule, ...] = field(default_factory=tuple)
    notes: str | None = None


def default_diet(user_id: str = "") -> DietProfile:
    """Return the profile used when a user has not configured one."""
    return DietProfile(
        user_id=user_id,
        ideal_carb=True,
        ideal_protein=True,
        ideal_veggies=True,
        meal_rules=(),
    )
