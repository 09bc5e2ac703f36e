"""Daily nutrition scoring engine.

Pure functions only: a day's meals and a diet profile go in, a
``ScoreBreakdown`` comes out. Nothing here touches storage.
"""

from collections.abc import Sequence
from math import ceil

from meal_scoring.domain.diet import DietProfile, MealRule, default_diet
from meal_scoring.domain.errors import InvalidInputError
from meal_scoring.domain.meals import MealRecord
from meal_scoring.domain.scoring import (
    DEFAULT_SCORING_CONFIG,
    AxesScore,
    MatchLevel,
    MealMatchResult,
    MealRuleResult,
    NonePenalty,
    NutrientFlags,
    ScoreBreakdown,
    ScoringConfig,
    VarietyBonus,
)


def calculate_daily_score(
    meals: Sequence[MealRecord],
    diet: DietProfile | None,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> ScoreBreakdown:
    """Score one day of meals against a diet profile.

    Meals must belong to the same day. Their order only matters for rule
    matching, where the first meal of each type is the one graded.
    """
    _check_input(meals, diet)
    effective_diet = diet if diet is not None else default_diet()

    present = _nutrients_present(meals)
    axes = _score_axes(present, effective_diet, config)
    meal_matching = tuple(
        _match_rule(rule, meals, config) for rule in effective_diet.meal_rules
    )
    meal_rules = tuple(
        _legacy_rule(rule, meals, config) for rule in effective_diet.meal_rules
    )

    variety_earned = _has_variety_pair(meals)
    variety_bonus = VarietyBonus(
        earned=variety_earned,
        points=config.bonus_variety if variety_earned else 0,
    )

    # Raw presence, independent of the diet's ideal toggles.
    penalty_applied = not (present.carb or present.protein or present.veggies)
    penalty_none = NonePenalty(
        applied=penalty_applied,
        points=-config.penalty_none if penalty_applied else 0,
    )

    total = (
        axes.points
        + sum(match.points for match in meal_matching)
        + variety_bonus.points
        + penalty_none.points
    )
    return ScoreBreakdown(
        axes=axes,
        meal_rules=meal_rules,
        meal_matching=meal_matching,
        variety_bonus=variety_bonus,
        penalty_none=penalty_none,
        total=total,
    )


def classify_match(matches: int, total_expected: int) -> MatchLevel:
    """Return the match level for ``matches`` out of ``total_expected`` flags."""
    if total_expected == 0 or matches == 0:
        return MatchLevel.NONE
    if matches == total_expected:
        return MatchLevel.PERFECT
    if matches >= ceil(total_expected / 2):
        return MatchLevel.PARTIAL
    return MatchLevel.LOW


def _check_input(meals: Sequence[MealRecord], diet: DietProfile | None) -> None:
    if diet is not None and not isinstance(diet, DietProfile):
        raise InvalidInputError(f"Expected DietProfile, got {type(diet).__name__}")
    for meal in meals:
        if not isinstance(meal, MealRecord):
            raise InvalidInputError(
                f"Expected MealRecord, got {type(meal).__name__}"
            )


def _nutrients_present(meals: Sequence[MealRecord]) -> NutrientFlags:
    return NutrientFlags(
        carb=any(meal.has_carb for meal in meals),
        protein=any(meal.has_protein for meal in meals),
        veggies=any(meal.has_veggies for meal in meals),
    )


def _score_axes(
    present: NutrientFlags, diet: DietProfile, config: ScoringConfig
) -> AxesScore:
    carb = diet.ideal_carb and present.carb
    protein = diet.ideal_protein and present.protein
    veggies = diet.ideal_veggies and present.veggies
    earned = sum((carb, protein, veggies))
    return AxesScore(
        carb=carb,
        protein=protein,
        veggies=veggies,
        points=earned * config.points_axis,
    )


def _match_rule(
    rule: MealRule, meals: Sequence[MealRecord], config: ScoringConfig
) -> MealMatchResult:
    expected = NutrientFlags(
        carb=rule.expect_carb,
        protein=rule.expect_protein,
        veggies=rule.expect_veggies,
    )
    meal = next((meal for meal in meals if meal.meal_type == rule.meal_type), None)
    if meal is None:
        return MealMatchResult(
            meal_type=rule.meal_type,
            has_meal=False,
            expected=expected,
            actual=NutrientFlags(),
            match_level=MatchLevel.NONE,
            points=0,
        )

    actual = NutrientFlags(
        carb=meal.has_carb, protein=meal.has_protein, veggies=meal.has_veggies
    )
    matches = sum(
        (
            expected.carb and actual.carb,
            expected.protein and actual.protein,
            expected.veggies and actual.veggies,
        )
    )
    level = classify_match(matches, rule.expected_count)
    return MealMatchResult(
        meal_type=rule.meal_type,
        has_meal=True,
        expected=expected,
        actual=actual,
        match_level=level,
        points=_match_points(level, config),
    )


def _match_points(level: MatchLevel, config: ScoringConfig) -> int:
    if level is MatchLevel.PERFECT:
        return config.points_perfect_match
    if level is MatchLevel.PARTIAL:
        return config.points_partial_match
    if level is MatchLevel.LOW:
        return config.points_low_match
    return 0


def _legacy_rule(
    rule: MealRule, meals: Sequence[MealRecord], config: ScoringConfig
) -> MealRuleResult:
    # Any meal of the type may satisfy the rule, not just the first.
    met = any(
        meal.meal_type == rule.meal_type
        and (not rule.expect_carb or meal.has_carb)
        and (not rule.expect_protein or meal.has_protein)
        and (not rule.expect_veggies or meal.has_veggies)
        for meal in meals
    )
    return MealRuleResult(
        meal_type=rule.meal_type, met=met, points=config.points_rule if met else 0
    )


def _has_variety_pair(meals: Sequence[MealRecord]) -> bool:
    for index, first in enumerate(meals):
        for second in meals[index + 1 :]:
            if (
                (first.has_carb or second.has_carb)
                and (first.has_protein or second.has_protein)
                and (first.has_veggies or second.has_veggies)
            ):
                return True
    return False
