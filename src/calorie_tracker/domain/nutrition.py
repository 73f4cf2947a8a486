"""Nutrition domain models."""

import math
from dataclasses import dataclass
from enum import StrEnum

from calorie_tracker.errors import ValidationError


class RiskFlag(StrEnum):
    """Tags for foods likely to carry hidden or variable calories."""

    POSSIBLE_OIL = "possible_oil"
    POSSIBLE_SAUCE = "possible_sauce"
    POSSIBLE_DRESSING = "possible_dressing"
    MIXED_DISH = "mixed_dish"
    RESTAURANT_LIKE = "restaurant_like"
    FRIED = "fried"
    CREAMY = "creamy"
    CHEESE_LIKELY = "cheese_likely"


class PortionUnit(StrEnum):
    """Units a portion can be expressed in."""

    GRAMS = "grams"
    CUPS = "cups"
    TBSP = "tbsp"
    TSP = "tsp"
    PIECES = "pieces"
    OZ = "oz"
    ML = "ml"
    SERVING = "serving"


class FoodSource(StrEnum):
    """Where an item's nutrition came from."""

    AI = "ai"
    DATABASE = "database"
    MANUAL = "manual"


class FoodCategory(StrEnum):
    """Food database categories."""

    PROTEIN = "protein"
    CARBS = "carbs"
    VEGETABLES = "vegetables"
    FRUITS = "fruits"
    DAIRY = "dairy"
    FATS_OILS = "fats_oils"
    BEVERAGES = "beverages"
    SNACKS = "snacks"
    CONDIMENTS = "condiments"
    MIXED_DISHES = "mixed_dishes"
    DESSERTS = "desserts"
    GRAINS = "grains"


@dataclass(frozen=True)
class NutritionPer100g:
    """Calorie and macro density of a food.

    The same shape is used for nutrition scaled to an item's actual weight.
    """

    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    fiber_g: float | None = None
    sugar_g: float | None = None
    sodium_mg: float | None = None

    def __post_init__(self) -> None:
        for name in ("calories", "protein_g", "carbs_g", "fat_g"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ValidationError(f"{name} must be a non-negative number")


ZERO_NUTRITION = NutritionPer100g(calories=0, protein_g=0.0, carbs_g=0.0, fat_g=0.0)


@dataclass(frozen=True)
class Portion:
    """A requested quantity of food."""

    quantity: float
    unit: PortionUnit = PortionUnit.GRAMS

    def __post_init__(self) -> None:
        if not math.isfinite(self.quantity) or self.quantity <= 0:
            raise ValidationError("Portion quantity must be a positive number")


@dataclass(frozen=True)
class Totals:
    """Aggregate nutrition of the included items."""

    calories: int
    protein_g: float
    carbs_g: float
    fat_g: float
    fiber_g: float = 0.0
    sugar_g: float = 0.0


EMPTY_TOTALS = Totals(calories=0, protein_g=0.0, carbs_g=0.0, fat_g=0.0)


@dataclass(frozen=True)
class CalorieRange:
    """Uncertainty band around the total calories."""

    min: int
    max: int


EMPTY_RANGE = CalorieRange(min=0, max=0)
