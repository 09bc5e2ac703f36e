"""Models for LLM meal extraction results."""

from pydantic import BaseModel, ConfigDict, Field

from meal_scoring.domain.meals import TIME_PATTERN, MealType


class ExtractedMeal(BaseModel):
    """Single meal detected in a chat message."""

    model_config = ConfigDict(extra="forbid")

    time: str = Field(pattern=TIME_PATTERN)
    type: MealType
    items: list[str] = Field(default_factory=list)
    has_carb: bool
    has_protein: bool
    has_veggies: bool
    notes: str = ""


class ExtractedMeals(BaseModel):
    """Structured output for meal extraction."""

    model_config = ConfigDict(extra="forbid")

    meals: list[ExtractedMeal]
