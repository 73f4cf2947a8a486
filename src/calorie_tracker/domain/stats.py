"""Domain models for goals and statistics."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class NutritionGoals:
    """Daily nutrition targets."""

    calories: float = 2000
    protein_g: float = 150
    carbs_g: float = 200
    fat_g: float = 65


@dataclass(frozen=True)
class DailyTotals:
    """Totals of all meals logged on one local day."""

    day: date
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    meal_count: int
