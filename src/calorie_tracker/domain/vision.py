"""Models for scan results delivered by the vision provider."""

from enum import StrEnum

from pydantic import BaseModel, Field

from calorie_tracker.domain.nutrition import NutritionPer100g, PortionUnit, RiskFlag


class PhotoIssue(StrEnum):
    """Photo problems reported alongside a scan."""

    TOO_DARK = "too_dark"
    TOO_BRIGHT = "too_bright"
    BLURRY = "blurry"
    TOO_SMALL = "too_small"
    SHADOWS = "shadows"
    PARTIAL_VIEW = "partial_view"
    MULTIPLE_PLATES = "multiple_plates"


class PhotoQuality(BaseModel):
    """Quality assessment of the scanned photo."""

    score: float = Field(default=1.0, ge=0.0, le=1.0)
    issues: list[PhotoIssue] = Field(default_factory=list)


class EstimatedPortion(BaseModel):
    """Portion as estimated by the provider."""

    quantity: float = Field(gt=0)
    unit: PortionUnit = PortionUnit.GRAMS


class DetectedNutrition(BaseModel):
    """Per-100g nutrition attached to a detection."""

    calories: float = Field(ge=0)
    protein_g: float = Field(ge=0)
    carbs_g: float = Field(ge=0)
    fat_g: float = Field(ge=0)
    fiber_g: float | None = Field(default=None, ge=0)
    sugar_g: float | None = Field(default=None, ge=0)
    sodium_mg: float | None = Field(default=None, ge=0)

    def to_domain(self) -> NutritionPer100g:
        """Convert to the engine's nutrition record."""
        return NutritionPer100g(**self.model_dump())


class DetectedFoodItem(BaseModel):
    """Single detected food item, before ingestion."""

    name: str = Field(min_length=1)
    description: str | None = None
    estimated_portion: EstimatedPortion | None = None
    grams: float | None = Field(default=None, ge=0)
    confidence: float = Field(ge=0.0, le=1.0)
    flags: list[RiskFlag] = Field(default_factory=list)
    nutrition: DetectedNutrition | None = None


class ScanResult(BaseModel):
    """Structured output of a photo scan."""

    items: list[DetectedFoodItem]
    photo_quality: PhotoQuality = Field(default_factory=PhotoQuality)
    photo_ref: str | None = None
