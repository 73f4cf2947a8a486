"""Meal logging service."""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID

from calorie_tracker.domain.meals import MealRecord
from calorie_tracker.errors import PersistenceFailure

_logger = logging.getLogger(__name__)


class MealRepository(Protocol):
    """Persistence interface for logged meals."""

    def save_meal(self, record: MealRecord) -> UUID:
        """Store a meal record and return its id.

        Saving a record whose id is already stored must not create a second meal.
        """

    def list_meals(self, start: datetime, end: datetime) -> list[MealRecord]:
        """Return meals eaten within ``[start, end)``."""

    def list_recent_meals(self, limit: int) -> list[MealRecord]:
        """Return the most recent meals, newest first."""


@dataclass
class MealLogService:
    """Hands finalized meal records to persistence."""

    repository: MealRepository
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def save(self, record: MealRecord) -> UUID:
        """Persist a record, retrying transient failures.

        Raises PersistenceFailure once every attempt has failed.
        """
        attempt = 0
        while True:
            try:
                meal_id = self.repository.save_meal(record)
            except Exception as exc:
                attempt += 1
                _logger.warning(
                    "Saving meal %s failed (attempt %s/%s): %s",
                    record.id,
                    attempt,
                    self.retry_attempts + 1,
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise PersistenceFailure("Could not log the meal") from exc
                await asyncio.sleep(self.retry_delay_seconds)
            else:
                _logger.info(
                    "Logged %s meal %s: %s items, %s kcal",
                    record.meal_type,
                    meal_id,
                    len(record.items),
                    record.totals.calories,
                )
                return meal_id

    def get_history(self, limit: int = 10) -> list[MealRecord]:
        """Return recent meals."""
        return self.repository.list_recent_meals(limit)
