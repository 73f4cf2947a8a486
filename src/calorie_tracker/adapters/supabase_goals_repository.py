"""Supabase repository for nutrition goals."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from calorie_tracker.domain.stats import NutritionGoals
from calorie_tracker.services.stats import GoalsRepository


@dataclass
class SupabaseGoalsRepository(GoalsRepository):
    """Stores goals on the user's profile row."""

    client: Client
    user_id: UUID

    def load_goals(self) -> NutritionGoals | None:
        response = (
            self.client.table("profiles")
            .select("goal_calories, goal_protein, goal_carbs, goal_fat")
            .eq("id", str(self.user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        if row.get("goal_calories") is None:
            return None
        defaults = NutritionGoals()
        return NutritionGoals(
            calories=float(row["goal_calories"]),
            protein_g=float(row.get("goal_protein") or defaults.protein_g),
            carbs_g=float(row.get("goal_carbs") or defaults.carbs_g),
            fat_g=float(row.get("goal_fat") or defaults.fat_g),
        )

    def save_goals(self, goals: NutritionGoals) -> None:
        self.client.table("profiles").upsert(
            {
                "id": str(self.user_id),
                "goal_calories": round(goals.calories),
                "goal_protein": round(goals.protein_g),
                "goal_carbs": round(goals.carbs_g),
                "goal_fat": round(goals.fat_g),
            },
            on_conflict="id",
        ).execute()
