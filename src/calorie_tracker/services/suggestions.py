"""Edit suggestions shown next to a pending meal."""

from collections.abc import Iterable

from calorie_tracker.domain.meals import FoodItem
from calorie_tracker.domain.nutrition import RiskFlag
from calorie_tracker.services.calculator import included_items

LOW_ITEM_CONFIDENCE = 0.6
LOW_PHOTO_QUALITY = 0.6


def suggest_edits(
    items: Iterable[FoodItem], photo_quality_score: float | None = None
) -> list[str]:
    """Return hints pointing the user at the least reliable parts of the meal."""
    included = included_items(items)
    suggestions: list[str] = []

    uncertain = [
        item.name for item in included if item.confidence < LOW_ITEM_CONFIDENCE
    ]
    if uncertain:
        suggestions.append(f"Verify: {', '.join(uncertain)}")
    if any(RiskFlag.MIXED_DISH in item.flags for item in included):
        suggestions.append(
            "Mixed dishes may have hidden ingredients - consider adjusting portions"
        )
    if any(RiskFlag.RESTAURANT_LIKE in item.flags for item in included):
        suggestions.append("Restaurant portions tend to be larger - verify amounts")
    if photo_quality_score is not None and photo_quality_score < LOW_PHOTO_QUALITY:
        suggestions.append("Photo quality affected detection - review all items")
    return suggestions
