"""Food database backed by USDA FoodData Central search."""

from dataclasses import dataclass

from calorie_tracker.adapters.fdc_client import FdcClient
from calorie_tracker.domain.library import FoodDatabaseEntry, FoodMatch
from calorie_tracker.domain.nutrition import NutritionPer100g
from calorie_tracker.services.lookup import MIN_RELEVANCE, FoodDatabase, name_similarity

_NUTRIENT_IDS = {
    1008: "calories",
    1003: "protein_g",
    1004: "fat_g",
    1005: "carbs_g",
    1079: "fiber_g",
    2000: "sugar_g",
    1093: "sodium_mg",
}
_REQUIRED = ("calories", "protein_g", "fat_g", "carbs_g")


@dataclass
class FdcFoodDatabase(FoodDatabase):
    """Maps FDC search hits to per-100g entries.

    FDC reports generic foods per 100 g, so nutrient amounts are used as-is.
    """

    client: FdcClient

    async def search(self, query: str, limit: int) -> list[FoodMatch]:
        payload = await self.client.search_foods(query, page_size=limit)
        matches = []
        for food in payload.get("foods", []):
            entry = _parse_food(food)
            relevance = name_similarity(entry.name, query)
            if relevance > MIN_RELEVANCE:
                matches.append(FoodMatch(entry=entry, relevance=relevance))
        matches.sort(key=lambda match: match.relevance, reverse=True)
        return matches[:limit]


def _parse_food(food: dict[str, object]) -> FoodDatabaseEntry:
    return FoodDatabaseEntry(
        id=f"fdc:{food['fdcId']}",
        name=str(food.get("description", "")),
        per_100g=_extract_nutrition(food.get("foodNutrients") or []),
    )


def _extract_nutrition(food_nutrients: list[dict[str, object]]) -> NutritionPer100g:
    """Pick energy, macros, fiber, sugar and sodium out of FDC nutrients."""
    values: dict[str, float] = {}
    for nutrient in food_nutrients:
        nutrient_info = nutrient.get("nutrient") or {}
        nutrient_id = nutrient_info.get("id") or nutrient.get("nutrientId")
        amount = nutrient.get("value", nutrient.get("amount"))
        name = _NUTRIENT_IDS.get(nutrient_id)
        if name is not None and amount is not None:
            values[name] = float(amount)
    for name in _REQUIRED:
        values.setdefault(name, 0.0)
    return NutritionPer100g(**values)
