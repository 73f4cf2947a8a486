"""Domain models for pending and logged meals."""

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID

from calorie_tracker.domain.nutrition import (
    CalorieRange,
    FoodSource,
    NutritionPer100g,
    Portion,
    RiskFlag,
    Totals,
)
from calorie_tracker.errors import ValidationError


class MealType(StrEnum):
    """Classification of a logged meal."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


@dataclass(frozen=True)
class FoodItem:
    """One detected or manually added food in a pending meal.

    ``calculated_nutrition`` is ``nutrition`` scaled to ``grams``; items are
    replaced rather than mutated so that invariant is kept by whoever builds
    the replacement.
    """

    id: str
    name: str
    grams: float
    confidence: float
    nutrition: NutritionPer100g
    calculated_nutrition: NutritionPer100g
    source: FoodSource
    flags: frozenset[RiskFlag] = field(default_factory=frozenset)
    included: bool = True
    portion: Portion | None = None
    description: str | None = None

    def __post_init__(self) -> None:
        if not math.isfinite(self.confidence) or not 0 <= self.confidence <= 1:
            raise ValidationError(
                f"Confidence must be between 0 and 1 (got {self.confidence})"
            )


@dataclass(frozen=True)
class FollowUpQuestion:
    """A clarifying question whose answer narrows the calorie range."""

    key: str
    question: str
    options: tuple[str, ...]
    selected_option: str | None = None


@dataclass(frozen=True)
class MealItemSnapshot:
    """Item as stored with a logged meal."""

    name: str
    grams: float
    nutrition: NutritionPer100g
    confidence: float
    source: FoodSource
    quantity: float | None = None
    unit: str | None = None


@dataclass(frozen=True)
class MealRecord:
    """Finalized meal handed to persistence on commit."""

    id: UUID
    meal_type: MealType
    eaten_at: datetime
    items: tuple[MealItemSnapshot, ...]
    totals: Totals
    calorie_range: CalorieRange
    confidence: float
    photo_ref: str | None = None
