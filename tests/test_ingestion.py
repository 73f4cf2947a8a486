"""Tests for turning detections and selections into items."""

import asyncio
import itertools

import pytest

from calorie_tracker.domain.library import FoodMatch
from calorie_tracker.domain.nutrition import FoodSource, Portion, PortionUnit, RiskFlag
from calorie_tracker.domain.vision import (
    DetectedFoodItem,
    DetectedNutrition,
    EstimatedPortion,
    ScanResult,
)
from calorie_tracker.errors import ValidationError
from calorie_tracker.services.cache import InMemoryCache
from calorie_tracker.services.ingestion import IngestionService
from calorie_tracker.services.lookup import FoodLookupService
from tests.conftest import sample_foods


class BrokenDatabase:
    calls = 0

    async def search(self, query: str, limit: int) -> list[FoodMatch]:
        self.calls += 1
        raise RuntimeError("food database offline")


def _counter_ids():  # type: ignore[no-untyped-def]
    counter = itertools.count(1)
    return lambda: f"item-{next(counter)}"


def test_detection_with_nutrition_is_used_as_is() -> None:
    service = IngestionService()
    detected = DetectedFoodItem(
        name="pad thai",
        description="noodles with peanuts",
        grams=300,
        confidence=0.82,
        flags=[RiskFlag.RESTAURANT_LIKE, RiskFlag.POSSIBLE_OIL],
        nutrition=DetectedNutrition(
            calories=180, protein_g=7.5, carbs_g=25, fat_g=6, sodium_mg=400
        ),
    )

    item, warning = asyncio.run(service.ingest_detection(detected))

    assert warning is None
    assert item.source == FoodSource.AI
    assert item.grams == 300
    assert item.calculated_nutrition.calories == 540
    assert item.calculated_nutrition.protein_g == 22.5
    assert item.calculated_nutrition.sodium_mg == 1200
    assert item.flags == frozenset({RiskFlag.RESTAURANT_LIKE, RiskFlag.POSSIBLE_OIL})
    assert item.description == "noodles with peanuts"
    assert item.included


def test_detection_without_nutrition_uses_database(
    lookup_service: FoodLookupService,
) -> None:
    service = IngestionService(lookup_service=lookup_service)
    detected = DetectedFoodItem(
        name="white rice",
        estimated_portion=EstimatedPortion(quantity=1, unit=PortionUnit.CUPS),
        confidence=0.9,
    )

    item, warning = asyncio.run(service.ingest_detection(detected))

    assert warning is None
    assert item.source == FoodSource.DATABASE
    assert item.name == "White Rice"
    assert item.confidence == 0.9
    assert item.grams == 240
    assert item.calculated_nutrition.calories == 312
    assert item.portion == Portion(quantity=1, unit=PortionUnit.CUPS)


def test_weak_database_match_caps_confidence(
    lookup_service: FoodLookupService,
) -> None:
    service = IngestionService(lookup_service=lookup_service)
    # "brown rice" only shares a word with "White Rice"
    detected = DetectedFoodItem(name="brown rice", grams=150, confidence=0.9)

    item, _ = asyncio.run(service.ingest_detection(detected))

    assert item.source == FoodSource.DATABASE
    assert item.confidence == 0.7


def test_missing_nutrition_keeps_item_with_warning(
    lookup_service: FoodLookupService,
) -> None:
    service = IngestionService(lookup_service=lookup_service)
    detected = DetectedFoodItem(name="xyzzy", grams=80, confidence=0.8)

    item, warning = asyncio.run(service.ingest_detection(detected))

    assert warning is not None
    assert warning.item_name == "xyzzy"
    assert "xyzzy" in str(warning)
    assert item.calculated_nutrition.calories == 0
    assert item.confidence == 0.56
    assert item.included


def test_lookup_errors_do_not_stop_ingestion() -> None:
    database = BrokenDatabase()
    lookup_service = FoodLookupService(
        database=database, cache=InMemoryCache(), retry_delay_seconds=0
    )
    service = IngestionService(lookup_service=lookup_service)
    detected = DetectedFoodItem(name="rice", confidence=0.6)

    item, warning = asyncio.run(service.ingest_detection(detected))

    assert database.calls == 2
    assert warning is not None
    assert item.grams == 100
    assert item.confidence == 0.42


@pytest.mark.parametrize(
    ("grams", "portion", "expected"),
    [
        (None, None, 100),
        (0, None, 100),
        (None, EstimatedPortion(quantity=2, unit=PortionUnit.TBSP), 30),
        (180, EstimatedPortion(quantity=1, unit=PortionUnit.CUPS), 180),
        (9000, None, 4999),
    ],
)
def test_grams_fallbacks(
    grams: float | None, portion: EstimatedPortion | None, expected: float
) -> None:
    detected = DetectedFoodItem(
        name="soup",
        grams=grams,
        estimated_portion=portion,
        confidence=0.7,
        nutrition=DetectedNutrition(calories=50, protein_g=2, carbs_g=6, fat_g=2),
    )

    item, _ = asyncio.run(IngestionService().ingest_detection(detected))

    assert item.grams == expected


def test_ingest_scan_assigns_unique_ids() -> None:
    service = IngestionService(id_factory=_counter_ids())
    nutrition = DetectedNutrition(calories=100, protein_g=1, carbs_g=1, fat_g=1)
    scan = ScanResult(
        items=[
            DetectedFoodItem(name="toast", confidence=0.9, nutrition=nutrition),
            DetectedFoodItem(name="toast", confidence=0.9, nutrition=nutrition),
            DetectedFoodItem(name="jam", confidence=0.6),
        ],
        photo_ref="photos/1.jpg",
    )

    result = asyncio.run(service.ingest_scan(scan))

    assert [item.id for item in result.items] == ["item-1", "item-2", "item-3"]
    assert [warning.item_name for warning in result.warnings] == ["jam"]
    assert result.photo_ref == "photos/1.jpg"
    assert result.photo_quality.score == 1.0


def test_manual_item_from_grams() -> None:
    rice = sample_foods()[0]

    item = IngestionService().build_manual_item(rice, grams=200)

    assert item.source == FoodSource.MANUAL
    assert item.confidence == 1.0
    assert item.calculated_nutrition.calories == 260
    assert item.calculated_nutrition.fiber_g == 0.8
    assert item.portion == Portion(quantity=200, unit=PortionUnit.GRAMS)


def test_manual_item_from_named_portion() -> None:
    oil = sample_foods()[2]

    item = IngestionService().build_manual_item(oil, portion_name="1 tbsp")

    assert item.grams == 13.5
    assert item.calculated_nutrition.calories == 119


def test_manual_item_from_portion_in_units() -> None:
    chicken = sample_foods()[1]

    item = IngestionService().build_manual_item(
        chicken, portion=Portion(quantity=4, unit=PortionUnit.OZ)
    )

    assert item.grams == 113
    assert item.calculated_nutrition.calories == 186


def test_manual_item_validation() -> None:
    rice = sample_foods()[0]
    service = IngestionService()

    with pytest.raises(ValidationError):
        service.build_manual_item(rice)
    with pytest.raises(ValidationError):
        service.build_manual_item(rice, portion_name="1 bowl")
    with pytest.raises(ValidationError):
        service.build_manual_item(rice, grams=5000)
    with pytest.raises(ValidationError):
        service.build_manual_item(rice, grams=0)
    with pytest.raises(ValidationError, match="plausible"):
        service.build_manual_item(
            rice, portion=Portion(quantity=30, unit=PortionUnit.CUPS)
        )
