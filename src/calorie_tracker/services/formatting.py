"""Text formatting for meal views."""

from calorie_tracker.domain.meals import MealType
from calorie_tracker.domain.nutrition import CalorieRange, RiskFlag
from calorie_tracker.services.calculator import round_half_up

_FLAG_LABELS: dict[RiskFlag, str] = {
    RiskFlag.POSSIBLE_OIL: "May contain oil/butter",
    RiskFlag.POSSIBLE_SAUCE: "May have sauce",
    RiskFlag.POSSIBLE_DRESSING: "May have dressing",
    RiskFlag.MIXED_DISH: "Mixed dish",
    RiskFlag.RESTAURANT_LIKE: "Restaurant-style",
    RiskFlag.FRIED: "Likely fried",
    RiskFlag.CREAMY: "Creamy/rich",
    RiskFlag.CHEESE_LIKELY: "May contain cheese",
}


def format_calories(calories: float) -> str:
    """Format calories, abbreviating thousands."""
    if calories >= 1000:  # noqa: PLR2004
        return f"{calories / 1000:.1f}k"
    return str(int(calories))


def format_macro(value: float, unit: str = "g") -> str:
    """Format a macro amount; large values drop the decimal."""
    if value >= 100:  # noqa: PLR2004
        return f"{int(round_half_up(value))}{unit}"
    return f"{value:.1f}{unit}"


def format_calorie_range(calorie_range: CalorieRange) -> str:
    return f"{calorie_range.min} - {calorie_range.max} cal"


def confidence_label(confidence: float) -> str:
    """Bucket a confidence score into High/Medium/Low."""
    if confidence >= 0.8:  # noqa: PLR2004
        return "High"
    if confidence >= 0.6:  # noqa: PLR2004
        return "Medium"
    return "Low"


def flag_label(flag: RiskFlag) -> str:
    return _FLAG_LABELS[flag]


def meal_type_label(meal_type: MealType) -> str:
    return meal_type.value.capitalize()
