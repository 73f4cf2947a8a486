"""Tests for container wiring."""

import asyncio

from calorie_tracker.adapters.fdc_food_database import FdcFoodDatabase
from calorie_tracker.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.session_service is not None
    assert container.lookup_service is not None
    assert isinstance(container.lookup_service.database, FdcFoodDatabase)
    assert container.session_service.ingestion_service is container.ingestion_service
    asyncio.run(container.close_resources())


def test_build_container_without_food_database(settings) -> None:
    settings.fdc_api_key = None

    container = build_container(settings)

    assert container.lookup_service is None
    assert container.ingestion_service.lookup_service is None
    asyncio.run(container.close_resources())
