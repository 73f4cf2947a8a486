"""Calorie range and confidence estimation."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from calorie_tracker.domain.meals import FoodItem
from calorie_tracker.domain.nutrition import EMPTY_RANGE, CalorieRange, RiskFlag
from calorie_tracker.services.calculator import included_items, round_half_up

BASE_MIN_MULTIPLIER = 0.85
BASE_MAX_MULTIPLIER = 1.15
MIN_MULTIPLIER_FLOOR = 0.7
MAX_MULTIPLIER_CEILING = 1.5

LOW_CONFIDENCE = 0.6
HIGH_CONFIDENCE = 0.85

CONFIDENCE_FLOOR = 0.3
MAX_FLAG_PENALTY = 0.2


@dataclass(frozen=True)
class RangeCondition:
    """Widening applied once when any included item carries one of ``flags``."""

    flags: frozenset[RiskFlag]
    min_delta: float
    max_delta: float


RANGE_CONDITIONS: tuple[RangeCondition, ...] = (
    RangeCondition(frozenset({RiskFlag.POSSIBLE_OIL, RiskFlag.FRIED}), -0.05, 0.10),
    RangeCondition(
        frozenset(
            {RiskFlag.POSSIBLE_SAUCE, RiskFlag.POSSIBLE_DRESSING, RiskFlag.CREAMY}
        ),
        -0.03,
        0.08,
    ),
    RangeCondition(frozenset({RiskFlag.MIXED_DISH}), -0.05, 0.15),
    RangeCondition(frozenset({RiskFlag.RESTAURANT_LIKE}), -0.05, 0.20),
    RangeCondition(frozenset({RiskFlag.FRIED}), 0.0, 0.15),
)

# (question key, option) -> max multiplier delta
ANSWER_ADJUSTMENTS: dict[tuple[str, str], float] = {
    ("oil_used", "none"): -0.05,
    ("oil_used", "a lot"): 0.10,
    ("sauce_amount", "none"): -0.03,
    ("sauce_amount", "heavy"): 0.08,
}

FLAG_PENALTIES: dict[RiskFlag, float] = {
    RiskFlag.MIXED_DISH: 0.10,
    RiskFlag.RESTAURANT_LIKE: 0.10,
    RiskFlag.POSSIBLE_OIL: 0.05,
    RiskFlag.POSSIBLE_SAUCE: 0.05,
}


def mean_confidence(items: Iterable[FoodItem]) -> float:
    """Average confidence of the included items, 0 when there are none."""
    included = included_items(items)
    if not included:
        return 0.0
    return sum(item.confidence for item in included) / len(included)


def estimate_calorie_range(
    items: Iterable[FoodItem],
    answers: Mapping[str, str],
    base_calories: int,
) -> CalorieRange:
    """Build the calorie band around ``base_calories``.

    Each flag condition counts once no matter how many items carry it.
    Answer adjustments stack on top of the flag deltas, then the average
    item confidence narrows or widens the band.
    """
    included = included_items(items)
    if not included or base_calories <= 0:
        return EMPTY_RANGE

    present = set().union(*(item.flags for item in included))
    min_multiplier = BASE_MIN_MULTIPLIER
    max_multiplier = BASE_MAX_MULTIPLIER

    for condition in RANGE_CONDITIONS:
        if condition.flags & present:
            min_multiplier += condition.min_delta
            max_multiplier += condition.max_delta

    for (key, option), delta in ANSWER_ADJUSTMENTS.items():
        if answers.get(key) == option:
            max_multiplier += delta

    average = mean_confidence(included)
    if average < LOW_CONFIDENCE:
        min_multiplier -= 0.05
        max_multiplier += 0.10
    elif average > HIGH_CONFIDENCE:
        min_multiplier += 0.03
        max_multiplier -= 0.03

    # two decimals keep float drift out of the rounded bounds
    min_multiplier = max(round(min_multiplier, 2), MIN_MULTIPLIER_FLOOR)
    max_multiplier = min(round(max_multiplier, 2), MAX_MULTIPLIER_CEILING)

    return CalorieRange(
        min=int(round_half_up(base_calories * min_multiplier)),
        max=int(round_half_up(base_calories * max_multiplier)),
    )


def score_confidence(items: Iterable[FoodItem]) -> float:
    """Overall 0-1 confidence of the included items.

    The averaged per-item flag penalty is capped at 0.2 and the result never
    drops below 0.3, except for an empty selection which scores 0.
    """
    included = included_items(items)
    if not included:
        return 0.0

    average = mean_confidence(included)
    penalty = sum(
        FLAG_PENALTIES.get(flag, 0.0) for item in included for flag in item.flags
    ) / len(included)
    penalty = min(penalty, MAX_FLAG_PENALTY)

    score = max(CONFIDENCE_FLOOR, min(1.0, average - penalty))
    return round_half_up(score, 2)
