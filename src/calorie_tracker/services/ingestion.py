"""Turn scan detections and database selections into pending food items."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from uuid import uuid4

from calorie_tracker.domain.library import FoodDatabaseEntry
from calorie_tracker.domain.meals import FoodItem
from calorie_tracker.domain.nutrition import (
    ZERO_NUTRITION,
    FoodSource,
    NutritionPer100g,
    Portion,
    PortionUnit,
)
from calorie_tracker.domain.vision import DetectedFoodItem, PhotoQuality, ScanResult
from calorie_tracker.errors import MissingNutritionDataError, ValidationError
from calorie_tracker.services.calculator import round_half_up, scale_nutrition
from calorie_tracker.services.lookup import FoodLookupService, ResolvedFood
from calorie_tracker.services.portions import (
    MAX_ITEM_GRAMS,
    convert_to_grams,
    is_valid_grams,
    validate_portion,
)

_logger = logging.getLogger(__name__)

DEFAULT_GRAMS = 100
MISSING_DATA_CONFIDENCE_FACTOR = 0.7


def new_item_id() -> str:
    return uuid4().hex


@dataclass(frozen=True)
class IngestionResult:
    """Items ready for a session plus any per-item problems."""

    items: list[FoodItem]
    photo_quality: PhotoQuality = field(default_factory=PhotoQuality)
    photo_ref: str | None = None
    warnings: list[MissingNutritionDataError] = field(default_factory=list)


@dataclass
class IngestionService:
    """Assigns ids and computes nutrition for incoming items.

    Without a lookup service, detections must carry their own nutrition.
    """

    lookup_service: FoodLookupService | None = None
    id_factory: Callable[[], str] = new_item_id

    async def ingest_scan(self, scan: ScanResult) -> IngestionResult:
        """Convert every detection; items lacking nutrition are kept with zeros."""
        items: list[FoodItem] = []
        warnings: list[MissingNutritionDataError] = []
        for detected in scan.items:
            item, warning = await self.ingest_detection(detected)
            items.append(item)
            if warning is not None:
                warnings.append(warning)
        return IngestionResult(
            items=items,
            photo_quality=scan.photo_quality,
            photo_ref=scan.photo_ref,
            warnings=warnings,
        )

    async def ingest_detection(
        self, detected: DetectedFoodItem
    ) -> tuple[FoodItem, MissingNutritionDataError | None]:
        """Resolve nutrition for one detection and build its item."""
        name = detected.name
        confidence = detected.confidence
        nutrition: NutritionPer100g | None = None
        source = FoodSource.AI

        if detected.nutrition is not None:
            nutrition = detected.nutrition.to_domain()
        else:
            resolved = await self._lookup(name)
            if resolved is not None:
                nutrition = resolved.match.entry.per_100g
                name = resolved.match.entry.name
                confidence = min(confidence, resolved.confidence)
                source = FoodSource.DATABASE

        warning = None
        if nutrition is None:
            warning = MissingNutritionDataError(detected.name)
            _logger.warning("%s; item kept with zero nutrition", warning)
            nutrition = ZERO_NUTRITION
            confidence *= MISSING_DATA_CONFIDENCE_FACTOR

        portion = None
        if detected.estimated_portion is not None:
            portion = Portion(
                quantity=detected.estimated_portion.quantity,
                unit=detected.estimated_portion.unit,
            )
        grams = _resolve_grams(detected.grams, portion)
        item = FoodItem(
            id=self.id_factory(),
            name=name,
            grams=grams,
            confidence=round_half_up(confidence, 2),
            nutrition=nutrition,
            calculated_nutrition=scale_nutrition(nutrition, grams),
            source=source,
            flags=frozenset(detected.flags),
            portion=portion,
            description=detected.description,
        )
        return item, warning

    def build_manual_item(
        self,
        entry: FoodDatabaseEntry,
        *,
        grams: float | None = None,
        portion_name: str | None = None,
        portion: Portion | None = None,
    ) -> FoodItem:
        """Build an item from a database selection.

        The amount comes from explicit grams, a named common portion of the
        entry, or a quantity in any unit, in that order.
        """
        if grams is not None:
            portion = Portion(quantity=grams, unit=PortionUnit.GRAMS)
        elif portion_name is not None:
            preset = next(
                (p for p in entry.common_portions if p.name == portion_name), None
            )
            if preset is None:
                raise ValidationError(f"{entry.name} has no portion '{portion_name}'")
            grams = preset.grams
            portion = Portion(quantity=1, unit=PortionUnit.SERVING)
        elif portion is not None:
            if not validate_portion(portion.quantity, portion.unit):
                raise ValidationError(
                    f"{portion.quantity} {portion.unit} is not a plausible portion"
                )
            grams = convert_to_grams(portion.quantity, portion.unit)
        else:
            raise ValidationError("An amount is required to add a food")

        if not is_valid_grams(grams):
            raise ValidationError(
                f"Grams must be between 0 and {MAX_ITEM_GRAMS} (got {grams})"
            )
        return FoodItem(
            id=self.id_factory(),
            name=entry.name,
            grams=grams,
            confidence=1.0,
            nutrition=entry.per_100g,
            calculated_nutrition=scale_nutrition(entry.per_100g, grams),
            source=FoodSource.MANUAL,
            portion=portion,
        )

    async def _lookup(self, name: str) -> ResolvedFood | None:
        if self.lookup_service is None:
            return None
        try:
            return await self.lookup_service.match(name)
        except Exception:
            _logger.warning("Food lookup failed for %s", name, exc_info=True)
            return None


def _resolve_grams(grams: float | None, portion: Portion | None) -> float:
    if grams is None or grams <= 0:
        grams = convert_to_grams(portion.quantity, portion.unit) if portion else 0
    if grams <= 0:
        grams = DEFAULT_GRAMS
    return min(grams, MAX_ITEM_GRAMS - 1)
