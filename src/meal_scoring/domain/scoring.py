"""Domain models for daily nutrition scores."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum

from meal_scoring.domain.meals import MealType


class MatchLevel(StrEnum):
    """How closely a logged meal satisfies its rule."""

    PERFECT = "perfect"
    PARTIAL = "partial"
    LOW = "low"
    NONE = "none"


@dataclass(frozen=True)
class ScoringConfig:
    """Point values used by the scoring engine."""

    points_axis: int = 10
    points_rule: int = 5
    bonus_variety: int = 10
    penalty_none: int = 10
    points_perfect_match: int = 15
    points_partial_match: int = 8
    points_low_match: int = 3


DEFAULT_SCORING_CONFIG = ScoringConfig()


@dataclass(frozen=True)
class NutrientFlags:
    """Carb/protein/veggies presence flags."""

    carb: bool = False
    protein: bool = False
    veggies: bool = False

    def to_dict(self) -> dict[str, bool]:
        return {"carb": self.carb, "protein": self.protein, "veggies": self.veggies}

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "NutrientFlags":
        return cls(
            carb=bool(data.get("carb", False)),
            protein=bool(data.get("protein", False)),
            veggies=bool(data.get("veggies", False)),
        )


@dataclass(frozen=True)
class AxesScore:
    """Daily axes earned and their subtotal."""

    carb: bool
    protein: bool
    veggies: bool
    points: int


@dataclass(frozen=True)
class MealRuleResult:
    """Legacy binary rule outcome, kept for reporting only."""

    meal_type: MealType
    met: bool
    points: int


@dataclass(frozen=True)
class MealMatchResult:
    """Graded match between a meal rule and the first meal of its type."""

    meal_type: MealType
    has_meal: bool
    expected: NutrientFlags
    actual: NutrientFlags
    match_level: MatchLevel
    points: int


@dataclass(frozen=True)
class VarietyBonus:
    """Bonus for two meals jointly covering every axis."""

    earned: bool
    points: int


@dataclass(frozen=True)
class NonePenalty:
    """Penalty for a day without any nutrient logged."""

    applied: bool
    points: int


@dataclass(frozen=True)
class ScoreBreakdown:
    """Full scoring result for one user-day.

    ``meal_rules`` is reported alongside ``meal_matching`` but only the
    latter contributes to ``total``.
    """

    axes: AxesScore
    meal_rules: tuple[MealRuleResult, ...]
    meal_matching: tuple[MealMatchResult, ...]
    variety_bonus: VarietyBonus
    penalty_none: NonePenalty
    total: int

    def to_dict(self) -> dict[str, object]:
        """Return the JSON document stored alongside the score."""
        return {
            "axes": {
                "carb": self.axes.carb,
                "protein": self.axes.protein,
                "veggies": self.axes.veggies,
                "points": self.axes.points,
            },
            "mealRules": [
                {
                    "mealType": str(rule.meal_type),
                    "met": rule.met,
                    "points": rule.points,
                }
                for rule in self.meal_rules
            ],
            "mealMatching": [
                {
                    "mealType": str(match.meal_type),
                    "hasMeal": match.has_meal,
                    "expectedNutrients": match.expected.to_dict(),
                    "actualNutrients": match.actual.to_dict(),
                    "matchLevel": str(match.match_level),
                    "points": match.points,
                }
                for match in self.meal_matching
            ],
            "varietyBonus": {
                "earned": self.variety_bonus.earned,
                "points": self.variety_bonus.points,
            },
            "penaltyNone": {
                "applied": self.penalty_none.applied,
                "points": self.penalty_none.points,
            },
            "total": self.total,
        }

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "ScoreBreakdown":
        """Rebuild a breakdown from its stored JSON document."""
        axes = _as_dict(data.get("axes"))
        variety = _as_dict(data.get("varietyBonus"))
        penalty = _as_dict(data.get("penaltyNone"))
        return cls(
            axes=AxesScore(
                carb=bool(axes.get("carb", False)),
                protein=bool(axes.get("protein", False)),
                veggies=bool(axes.get("veggies", False)),
                points=int(axes.get("points", 0)),
            ),
            meal_rules=tuple(
                MealRuleResult(
                    meal_type=MealType(row["mealType"]),
                    met=bool(row.get("met", False)),
                    points=int(row.get("points", 0)),
                )
                for row in _as_list(data.get("mealRules"))
            ),
            meal_matching=tuple(
                MealMatchResult(
                    meal_type=MealType(row["mealType"]),
                    has_meal=bool(row.get("hasMeal", False)),
                    expected=NutrientFlags.from_dict(
                        _as_dict(row.get("expectedNutrients"))
                    ),
                    actual=NutrientFlags.from_dict(
                        _as_dict(row.get("actualNutrients"))
                    ),
                    match_level=MatchLevel(row.get("matchLevel", "none")),
                    points=int(row.get("points", 0)),
                )
                for row in _as_list(data.get("mealMatching"))
            ),
            variety_bonus=VarietyBonus(
                earned=bool(variety.get("earned", False)),
                points=int(variety.get("points", 0)),
            ),
            penalty_none=NonePenalty(
                applied=bool(penalty.get("applied", False)),
                points=int(penalty.get("points", 0)),
            ),
            total=int(data.get("total", 0)),
        )


@dataclass(frozen=True)
class DailyScoreSummary:
    """A score written by a recalculation run."""

    user_id: str
    date: date
    score: int


@dataclass(frozen=True)
class DailyScoreRecord:
    """Persisted score for one user and calendar day."""

    user_id: str
    date: date
    score: int
    details: ScoreBreakdown
    id: str | None = None
    updated_at: datetime | None = None


def _as_dict(value: object) -> dict[str, object]:
    return value if isinstance(value, dict) else {}


def _as_list(value: object) -> list[dict[str, object]]:
    if not isinstance(value, list):
        return []
    return [row for row in value if isinstance(row, dict)]
