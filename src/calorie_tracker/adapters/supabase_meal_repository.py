"""Supabase repository for logged meals."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from calorie_tracker.domain.meals import MealItemSnapshot, MealRecord, MealType
from calorie_tracker.domain.nutrition import (
    CalorieRange,
    FoodSource,
    NutritionPer100g,
    Totals,
)
from calorie_tracker.services.meals import MealRepository

_MEAL_COLUMNS = (
    "id, meal_type, eaten_at, photo_url, total_calories, total_protein_g, "
    "total_carbs_g, total_fat_g, confidence, calorie_min, calorie_max, "
    "meal_items(name, quantity, unit, grams, calories, protein_g, carbs_g, "
    "fat_g, fiber_g, sugar_g, sodium_mg, confidence, source)"
)


@dataclass
class SupabaseMealRepository(MealRepository):
    """Supabase implementation for meals and their items."""

    client: Client
    user_id: UUID

    def save_meal(self, record: MealRecord) -> UUID:
        """Upsert the meal row and replace its items.

        Keyed on the client-generated record id, so resubmitting a record
        leaves exactly one meal behind.
        """
        response = (
            self.client.table("meals")
            .upsert(_meal_row(record, self.user_id), on_conflict="id")
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save meal")
        meal_id = UUID(response.data[0]["id"])
        self.client.table("meal_items").delete().eq("meal_id", str(meal_id)).execute()
        payload = [_item_row(meal_id, item) for item in record.items]
        if payload:
            self.client.table("meal_items").insert(payload).execute()
        return meal_id

    def list_meals(self, start: datetime, end: datetime) -> list[MealRecord]:
        """Return meals eaten in ``[start, end)``."""
        response = (
            self.client.table("meals")
            .select(_MEAL_COLUMNS)
            .eq("user_id", str(self.user_id))
            .gte("eaten_at", start.isoformat())
            .lt("eaten_at", end.isoformat())
            .order("eaten_at", desc=False)
            .execute()
        )
        return [_parse_meal(row) for row in response.data or []]

    def list_recent_meals(self, limit: int) -> list[MealRecord]:
        """Return recent meals, newest first."""
        response = (
            self.client.table("meals")
            .select(_MEAL_COLUMNS)
            .eq("user_id", str(self.user_id))
            .order("eaten_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_meal(row) for row in response.data or []]


def _meal_row(record: MealRecord, user_id: UUID) -> dict[str, object]:
    return {
        "id": str(record.id),
        "user_id": str(user_id),
        "meal_type": record.meal_type.value,
        "eaten_at": record.eaten_at.isoformat(),
        "photo_url": record.photo_ref,
        "total_calories": record.totals.calories,
        "total_protein_g": record.totals.protein_g,
        "total_carbs_g": record.totals.carbs_g,
        "total_fat_g": record.totals.fat_g,
        "confidence": record.confidence,
        "calorie_min": record.calorie_range.min,
        "calorie_max": record.calorie_range.max,
    }


def _item_row(meal_id: UUID, item: MealItemSnapshot) -> dict[str, object]:
    nutrition = item.nutrition
    return {
        "meal_id": str(meal_id),
        "name": item.name,
        "quantity": item.quantity if item.quantity is not None else 1,
        "unit": item.unit or "serving",
        "grams": item.grams,
        "calories": nutrition.calories,
        "protein_g": nutrition.protein_g,
        "carbs_g": nutrition.carbs_g,
        "fat_g": nutrition.fat_g,
        "fiber_g": nutrition.fiber_g,
        "sugar_g": nutrition.sugar_g,
        "sodium_mg": nutrition.sodium_mg,
        "confidence": item.confidence,
        # the table predates the "database" source name
        "source": "usda" if item.source == FoodSource.DATABASE else item.source.value,
    }


def _parse_item(row: dict[str, object]) -> MealItemSnapshot:
    source = str(row.get("source") or "manual")
    return MealItemSnapshot(
        name=str(row.get("name", "")),
        grams=float(row.get("grams") or 0.0),
        nutrition=NutritionPer100g(
            calories=int(row.get("calories") or 0),
            protein_g=float(row.get("protein_g") or 0.0),
            carbs_g=float(row.get("carbs_g") or 0.0),
            fat_g=float(row.get("fat_g") or 0.0),
            fiber_g=_optional_float(row.get("fiber_g")),
            sugar_g=_optional_float(row.get("sugar_g")),
            sodium_mg=_optional_float(row.get("sodium_mg")),
        ),
        confidence=float(row.get("confidence") or 0.0),
        source=FoodSource.DATABASE if source == "usda" else FoodSource(source),
        quantity=_optional_float(row.get("quantity")),
        unit=str(row["unit"]) if row.get("unit") else None,
    )


def _parse_meal(row: dict[str, object]) -> MealRecord:
    items = row.get("meal_items") or []
    return MealRecord(
        id=UUID(row["id"]),
        meal_type=MealType(row["meal_type"]),
        eaten_at=datetime.fromisoformat(row["eaten_at"]),
        items=tuple(_parse_item(item) for item in items),
        totals=Totals(
            calories=int(row.get("total_calories") or 0),
            protein_g=float(row.get("total_protein_g") or 0.0),
            carbs_g=float(row.get("total_carbs_g") or 0.0),
            fat_g=float(row.get("total_fat_g") or 0.0),
        ),
        calorie_range=CalorieRange(
            min=int(row.get("calorie_min") or 0),
            max=int(row.get("calorie_max") or 0),
        ),
        confidence=float(row.get("confidence") or 0.0),
        photo_ref=row.get("photo_url"),
    )


def _optional_float(value: object) -> float | None:
    if value is None:
        return None
    return float(value)
