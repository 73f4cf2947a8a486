"""Domain models for the food database."""

from dataclasses import dataclass, field

from calorie_tracker.domain.nutrition import FoodCategory, NutritionPer100g


@dataclass(frozen=True)
class CommonPortion:
    """A named portion preset, e.g. "1 cup"."""

    name: str
    grams: float


@dataclass(frozen=True)
class FoodDatabaseEntry:
    """A food with its per-100g nutrition."""

    id: str
    name: str
    per_100g: NutritionPer100g
    category: FoodCategory | None = None
    aliases: tuple[str, ...] = ()
    common_portions: tuple[CommonPortion, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class FoodMatch:
    """Search hit with a 0-1 relevance score."""

    entry: FoodDatabaseEntry
    relevance: float
