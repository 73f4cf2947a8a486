"""Portion unit conversions."""

from calorie_tracker.domain.nutrition import Portion, PortionUnit
from calorie_tracker.services.calculator import round_half_up

MAX_ITEM_GRAMS = 5000

GRAMS_PER_UNIT: dict[PortionUnit, float] = {
    PortionUnit.GRAMS: 1,
    PortionUnit.CUPS: 240,
    PortionUnit.TBSP: 15,
    PortionUnit.TSP: 5,
    PortionUnit.PIECES: 50,
    PortionUnit.OZ: 28.35,
    # liquids, roughly water density
    PortionUnit.ML: 1,
    PortionUnit.SERVING: 100,
}

MAX_QUANTITY: dict[PortionUnit, float] = {
    PortionUnit.GRAMS: MAX_ITEM_GRAMS,
    PortionUnit.CUPS: 20,
    PortionUnit.TBSP: 100,
    PortionUnit.TSP: 300,
    PortionUnit.PIECES: 50,
    PortionUnit.OZ: 200,
    PortionUnit.SERVING: 20,
}
DEFAULT_MAX_QUANTITY = 1000


def convert_to_grams(
    quantity: float, unit: PortionUnit, grams_per_piece: float | None = None
) -> int:
    """Convert a quantity in ``unit`` to whole grams."""
    if unit == PortionUnit.PIECES and grams_per_piece:
        return int(round_half_up(quantity * grams_per_piece))
    return int(round_half_up(quantity * GRAMS_PER_UNIT[unit]))


def portion_to_grams(portion: Portion, grams_per_piece: float | None = None) -> int:
    """Convert a portion to whole grams."""
    return convert_to_grams(portion.quantity, portion.unit, grams_per_piece)


def validate_portion(quantity: float, unit: PortionUnit) -> bool:
    """Check a quantity against the plausible maximum for its unit."""
    if quantity <= 0:
        return False
    return quantity <= MAX_QUANTITY.get(unit, DEFAULT_MAX_QUANTITY)


def is_valid_grams(grams: float) -> bool:
    """Item weights must lie strictly between 0 and 5000 grams."""
    return 0 < grams < MAX_ITEM_GRAMS
