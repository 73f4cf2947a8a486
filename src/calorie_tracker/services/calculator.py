"""Portion scaling and totals for food items."""

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from calorie_tracker.domain.meals import FoodItem
from calorie_tracker.domain.nutrition import NutritionPer100g, Totals


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with .5 going up, unlike the built-in banker's rounding."""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def scale_nutrition(nutrition: NutritionPer100g, grams: float) -> NutritionPer100g:
    """Scale per-100g nutrition to the given weight.

    Calories and sodium are whole numbers, grams of macros keep one decimal.
    Optional nutrients stay ``None`` when the input lacks them. Callers must
    reject non-positive weights before getting here.
    """
    factor = grams / 100
    return NutritionPer100g(
        calories=int(round_half_up(nutrition.calories * factor)),
        protein_g=round_half_up(nutrition.protein_g * factor, 1),
        carbs_g=round_half_up(nutrition.carbs_g * factor, 1),
        fat_g=round_half_up(nutrition.fat_g * factor, 1),
        fiber_g=_scale_optional(nutrition.fiber_g, factor, 1),
        sugar_g=_scale_optional(nutrition.sugar_g, factor, 1),
        sodium_mg=_scale_optional(nutrition.sodium_mg, factor, 0),
    )


def included_items(items: Iterable[FoodItem]) -> list[FoodItem]:
    """Return the items that count towards the meal."""
    return [item for item in items if item.included]


def aggregate_totals(items: Iterable[FoodItem]) -> Totals:
    """Sum calculated nutrition over the included items."""
    included = included_items(items)
    calories = sum(item.calculated_nutrition.calories for item in included)
    return Totals(
        calories=int(round_half_up(calories)),
        protein_g=_sum_field(included, "protein_g"),
        carbs_g=_sum_field(included, "carbs_g"),
        fat_g=_sum_field(included, "fat_g"),
        fiber_g=_sum_field(included, "fiber_g"),
        sugar_g=_sum_field(included, "sugar_g"),
    )


def _scale_optional(value: float | None, factor: float, digits: int) -> float | None:
    if value is None:
        return None
    scaled = round_half_up(value * factor, digits)
    return int(scaled) if digits == 0 else scaled


def _sum_field(items: list[FoodItem], name: str) -> float:
    total = sum(getattr(item.calculated_nutrition, name) or 0 for item in items)
    return round_half_up(total, 1)
