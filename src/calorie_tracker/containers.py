"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from functools import partial
from zoneinfo import ZoneInfo

from supabase import create_client

from calorie_tracker.adapters.fdc_client import HttpxFdcClient
from calorie_tracker.adapters.fdc_food_database import FdcFoodDatabase
from calorie_tracker.adapters.local_food_database import LocalFoodDatabase
from calorie_tracker.adapters.supabase_goals_repository import SupabaseGoalsRepository
from calorie_tracker.adapters.supabase_meal_repository import SupabaseMealRepository
from calorie_tracker.app_logging import configure_logging
from calorie_tracker.config import Settings
from calorie_tracker.services.cache import InMemoryCache
from calorie_tracker.services.ingestion import IngestionService
from calorie_tracker.services.lookup import FoodLookupService
from calorie_tracker.services.meals import MealLogService
from calorie_tracker.services.sessions import SessionService
from calorie_tracker.services.stats import StatsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    lookup_service: FoodLookupService | None
    ingestion_service: IngestionService
    meal_log_service: MealLogService
    session_service: SessionService
    stats_service: StatsService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    configure_logging()
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    meal_repository = SupabaseMealRepository(supabase_client, resolved_settings.user_id)
    goals_repository = SupabaseGoalsRepository(
        supabase_client, resolved_settings.user_id
    )

    fdc_client: HttpxFdcClient | None = None
    lookup_service: FoodLookupService | None = None
    if resolved_settings.food_db_path:
        lookup_service = FoodLookupService(
            database=LocalFoodDatabase.from_json(resolved_settings.food_db_path),
            cache=InMemoryCache(),
            search_ttl_seconds=resolved_settings.lookup_cache_ttl_seconds,
        )
    elif resolved_settings.fdc_api_key:
        fdc_client = HttpxFdcClient.create(
            api_key=resolved_settings.fdc_api_key,
            base_url=resolved_settings.fdc_base_url,
            timeout_seconds=resolved_settings.fdc_timeout_seconds,
        )
        lookup_service = FoodLookupService(
            database=FdcFoodDatabase(fdc_client),
            cache=InMemoryCache(),
            search_ttl_seconds=resolved_settings.lookup_cache_ttl_seconds,
        )

    ingestion_service = IngestionService(lookup_service=lookup_service)
    meal_log_service = MealLogService(
        repository=meal_repository,
        retry_attempts=resolved_settings.commit_retry_attempts,
        retry_delay_seconds=resolved_settings.commit_retry_delay_seconds,
    )
    session_service = SessionService(
        meal_log_service=meal_log_service,
        ingestion_service=ingestion_service,
        clock=partial(datetime.now, tz=ZoneInfo(resolved_settings.timezone)),
    )
    stats_service = StatsService(
        meal_repository=meal_repository,
        goals_repository=goals_repository,
    )

    async def close_resources() -> None:
        if fdc_client is not None:
            await fdc_client.close()

    return AppContainer(
        settings=resolved_settings,
        lookup_service=lookup_service,
        ingestion_service=ingestion_service,
        meal_log_service=meal_log_service,
        session_service=session_service,
        stats_service=stats_service,
        close_resources=close_resources,
    )
