"""Daily totals and goal progress from logged meals."""

from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from typing import Protocol
from zoneinfo import ZoneInfo

from calorie_tracker.domain.meals import MealRecord
from calorie_tracker.domain.stats import DailyTotals, NutritionGoals
from calorie_tracker.services.calculator import round_half_up
from calorie_tracker.services.meals import MealRepository


class GoalsRepository(Protocol):
    """Persistence interface for nutrition goals."""

    def load_goals(self) -> NutritionGoals | None:
        """Return stored goals, if any."""

    def save_goals(self, goals: NutritionGoals) -> None:
        """Store goals."""


@dataclass(frozen=True)
class GoalProgress:
    """Share of each daily goal reached so far, capped at 1."""

    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float


@dataclass
class StatsService:
    """Service for computing daily stats in the user's timezone."""

    meal_repository: MealRepository
    goals_repository: GoalsRepository

    def get_goals(self) -> NutritionGoals:
        """Return stored goals or the defaults."""
        return self.goals_repository.load_goals() or NutritionGoals()

    def set_goals(self, goals: NutritionGoals) -> None:
        self.goals_repository.save_goals(goals)

    def get_today(self, timezone_name: str) -> DailyTotals:
        """Return today's totals in the given timezone."""
        tz = ZoneInfo(timezone_name)
        start = datetime.now(tz=tz).replace(hour=0, minute=0, second=0, microsecond=0)
        end = start + timedelta(days=1)
        meals = self.meal_repository.list_meals(
            start.astimezone(UTC), end.astimezone(UTC)
        )
        return aggregate_day(start.date(), meals, tz)

    def get_today_progress(self, timezone_name: str) -> GoalProgress:
        """Return today's progress towards the goals."""
        today = self.get_today(timezone_name)
        goals = self.get_goals()
        return GoalProgress(
            calories=progress(today.calories, goals.calories),
            protein_g=progress(today.protein_g, goals.protein_g),
            carbs_g=progress(today.carbs_g, goals.carbs_g),
            fat_g=progress(today.fat_g, goals.fat_g),
        )


def progress(current: float, goal: float) -> float:
    """Fraction of ``goal`` reached, between 0 and 1."""
    if goal <= 0:
        return 0.0
    return min(current / goal, 1.0)


def aggregate_day(day: date, meals: list[MealRecord], tz: ZoneInfo) -> DailyTotals:
    """Sum the meals eaten on ``day`` in ``tz``."""
    todays = [meal for meal in meals if meal.eaten_at.astimezone(tz).date() == day]
    return DailyTotals(
        day=day,
        calories=sum(meal.totals.calories for meal in todays),
        protein_g=round_half_up(sum(meal.totals.protein_g for meal in todays), 1),
        carbs_g=round_half_up(sum(meal.totals.carbs_g for meal in todays), 1),
        fat_g=round_half_up(sum(meal.totals.fat_g for meal in todays), 1),
        meal_count=len(todays),
    )
