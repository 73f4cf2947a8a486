"""Tests for nutrition scaling and totals."""

from uuid import uuid4

from calorie_tracker.domain.meals import FoodItem
from calorie_tracker.domain.nutrition import FoodSource, NutritionPer100g
from calorie_tracker.services.calculator import (
    aggregate_totals,
    round_half_up,
    scale_nutrition,
)
from tests.conftest import make_item


def _nutrition(calories: float, **extra: float) -> NutritionPer100g:
    return NutritionPer100g(
        calories=calories, protein_g=10, carbs_g=20, fat_g=5, **extra
    )


def test_scale_multiplies_by_grams_over_100() -> None:
    scaled = scale_nutrition(_nutrition(100), 250)

    assert scaled.calories == 250
    assert scaled.protein_g == 25
    assert scaled.carbs_g == 50
    assert scaled.fat_g == 12.5


def test_scale_rounds_half_up_at_the_boundary() -> None:
    assert scale_nutrition(_nutrition(133), 50).calories == 67
    # banker's rounding would give 50 here
    assert round(50.5) == 50
    assert scale_nutrition(_nutrition(101), 50).calories == 51
    assert scale_nutrition(_nutrition(99), 50).calories == 50


def test_scale_rounds_macros_to_one_decimal() -> None:
    nutrition = NutritionPer100g(calories=0, protein_g=0.5, carbs_g=3.33, fat_g=1.25)

    scaled = scale_nutrition(nutrition, 50)

    assert scaled.protein_g == 0.3
    assert scaled.carbs_g == 1.7
    assert scaled.fat_g == 0.6


def test_scale_keeps_optional_nutrients_optional() -> None:
    bare = scale_nutrition(_nutrition(100), 150)
    assert bare.fiber_g is None
    assert bare.sugar_g is None
    assert bare.sodium_mg is None

    full = scale_nutrition(_nutrition(100, fiber_g=2.5, sugar_g=1, sodium_mg=333), 150)
    assert full.fiber_g == 3.8
    assert full.sugar_g == 1.5
    assert full.sodium_mg == 500


def test_round_half_up() -> None:
    assert round_half_up(2.5) == 3
    assert round_half_up(0.25, 1) == 0.3
    assert round_half_up(0.24, 1) == 0.2


def test_aggregate_sums_only_included_items() -> None:
    items = [
        make_item(calories=200, protein_g=10, grams=100),
        make_item(calories=150, protein_g=4.4, grams=50),
        make_item(calories=300, protein_g=20, grams=100, included=False),
    ]

    totals = aggregate_totals(items)

    assert totals.calories == 275
    assert totals.calories == sum(
        item.calculated_nutrition.calories for item in items if item.included
    )
    assert totals.protein_g == 12.2


def test_aggregate_treats_missing_fiber_as_zero() -> None:
    with_fiber = NutritionPer100g(
        calories=100, protein_g=1, carbs_g=1, fat_g=1, fiber_g=3.3, sugar_g=1.1
    )
    fibrous = FoodItem(
        id=uuid4().hex,
        name="oats",
        grams=100,
        confidence=0.8,
        nutrition=with_fiber,
        calculated_nutrition=scale_nutrition(with_fiber, 100),
        source=FoodSource.MANUAL,
    )

    totals = aggregate_totals([fibrous, make_item()])

    assert totals.fiber_g == 3.3
    assert totals.sugar_g == 1.1


def test_aggregate_of_nothing_is_zero() -> None:
    totals = aggregate_totals([make_item(included=False)])

    assert totals.calories == 0
    assert totals.protein_g == 0
    assert totals.fiber_g == 0
