"""Tests for portion conversion and validation."""

import pytest

from calorie_tracker.domain.nutrition import Portion, PortionUnit
from calorie_tracker.errors import ValidationError
from calorie_tracker.services.portions import (
    convert_to_grams,
    is_valid_grams,
    portion_to_grams,
    validate_portion,
)


@pytest.mark.parametrize(
    ("quantity", "unit", "expected"),
    [
        (150, PortionUnit.GRAMS, 150),
        (1.5, PortionUnit.CUPS, 360),
        (2, PortionUnit.TBSP, 30),
        (3, PortionUnit.TSP, 15),
        (2, PortionUnit.OZ, 57),
        (250, PortionUnit.ML, 250),
        (2, PortionUnit.PIECES, 100),
        (1, PortionUnit.SERVING, 100),
    ],
)
def test_convert_to_grams(quantity: float, unit: PortionUnit, expected: int) -> None:
    assert convert_to_grams(quantity, unit) == expected


def test_pieces_use_known_piece_weight() -> None:
    assert convert_to_grams(3, PortionUnit.PIECES, grams_per_piece=118) == 354
    assert portion_to_grams(Portion(quantity=0.5, unit=PortionUnit.PIECES), 45) == 23


def test_validate_portion_limits() -> None:
    assert validate_portion(20, PortionUnit.CUPS)
    assert not validate_portion(21, PortionUnit.CUPS)
    assert not validate_portion(0, PortionUnit.GRAMS)
    assert validate_portion(1000, PortionUnit.ML)
    assert not validate_portion(1001, PortionUnit.ML)


def test_grams_bounds() -> None:
    assert is_valid_grams(0.5)
    assert is_valid_grams(4999)
    assert not is_valid_grams(0)
    assert not is_valid_grams(5000)


@pytest.mark.parametrize("quantity", [0, -1, float("nan"), float("inf")])
def test_portion_rejects_bad_quantity(quantity: float) -> None:
    with pytest.raises(ValidationError):
        Portion(quantity=quantity, unit=PortionUnit.CUPS)
