"""
Tests for quantity values: display, rescaling and validation.
"""

import math

import pytest
from pydantic import TypeAdapter, ValidationError

from recipekit.core.errors import InvalidArgument
from recipekit.parsing import parse_ingredient_line
from recipekit.quantity import ExactQuantity, FractionalQuantity, Quantity, RangeQuantity
from recipekit.units import Unit


def _samples():
    return [
        ExactQuantity(amount=2.5, unit=Unit.CUP),
        FractionalQuantity(whole=2, numerator=1, denominator=3, unit=Unit.TABLESPOON),
        RangeQuantity(min=2, max=3, unit=Unit.WHOLE),
    ]


@pytest.mark.parametrize("q", _samples())
def test_rescale_by_one_is_identity(q):
    assert math.isclose(q.rescale(1.0, q.unit).to_decimal(), q.to_decimal())


@pytest.mark.parametrize("q", _samples())
def test_rescale_multiplies_decimal(q):
    scaled = q.rescale(2.5, Unit.MILLILITER)
    assert math.isclose(scaled.to_decimal(), q.to_decimal() * 2.5)
    assert scaled.unit is Unit.MILLILITER


def test_fractional_rescale_becomes_exact():
    q = FractionalQuantity(whole=1, numerator=1, denominator=2, unit=Unit.CUP)
    scaled = q.rescale(2, Unit.CUP)
    assert isinstance(scaled, ExactQuantity)
    assert scaled.amount == 3.0


def test_range_rescale_keeps_range():
    scaled = RangeQuantity(min=2, max=3, unit=Unit.CUP).rescale(2, Unit.CUP)
    assert isinstance(scaled, RangeQuantity)
    assert (scaled.min, scaled.max) == (4, 6)
    assert scaled.to_decimal() == 5


@pytest.mark.parametrize("factor", [0, -1, float("nan")])
def test_rescale_rejects_non_positive_factor(factor):
    with pytest.raises(InvalidArgument):
        ExactQuantity(amount=1, unit=Unit.CUP).rescale(factor, Unit.CUP)


def test_exact_display():
    assert str(ExactQuantity(amount=2, unit=Unit.CUP)) == "2 cups"
    assert str(ExactQuantity(amount=1, unit=Unit.CUP)) == "1 cup"
    assert str(ExactQuantity(amount=1 / 3, unit=Unit.CUP)) == "0.333 cups"
    assert str(ExactQuantity(amount=2.5, unit=Unit.TABLESPOON)) == "2.5 tbsp"
    assert str(ExactQuantity(amount=0.5, unit=Unit.PINCH)) == "0.5 pinches"


def test_exact_display_huge_values_are_raw():
    assert str(ExactQuantity(amount=1e12, unit=Unit.GRAM)) == "1000000000000.0 g"
    assert str(ExactQuantity(amount=float("inf"), unit=Unit.GRAM)) == "inf g"


def test_huge_parsed_amount_displays_raw():
    ing = parse_ingredient_line("1" + "0" * 400 + " g butter")
    assert ing.quantity == ExactQuantity(amount=float("inf"), unit=Unit.GRAM)
    assert str(ing) == "inf g butter"


def test_fractional_display():
    assert str(FractionalQuantity(whole=2, numerator=1, denominator=3, unit=Unit.CUP)) == "2 1/3 cups"
    assert str(FractionalQuantity(whole=1, unit=Unit.CUP)) == "1 cup"
    assert str(FractionalQuantity(whole=3, unit=Unit.CUP)) == "3 cups"
    assert str(FractionalQuantity(numerator=1, denominator=1, unit=Unit.CUP)) == "1 cup"
    assert str(FractionalQuantity(numerator=1, denominator=2, unit=Unit.CUP)) == "1/2 cup"


def test_range_display_is_plural():
    assert str(RangeQuantity(min=1, max=2, unit=Unit.CUP)) == "1-2 cups"
    assert str(RangeQuantity(min=2, max=3, unit=Unit.WHOLE)) == "2-3 whole"


def test_validation():
    with pytest.raises(ValidationError):
        ExactQuantity(amount=0, unit=Unit.CUP)
    with pytest.raises(ValidationError):
        RangeQuantity(min=3, max=3, unit=Unit.CUP)
    with pytest.raises(ValidationError):
        FractionalQuantity(whole=0, numerator=0, denominator=2, unit=Unit.CUP)
    with pytest.raises(ValidationError):
        FractionalQuantity(numerator=1, denominator=0, unit=Unit.CUP)


def test_quantities_are_frozen():
    q = ExactQuantity(amount=2, unit=Unit.CUP)
    with pytest.raises(ValidationError):
        q.amount = 3


def test_type_tag_selects_variant():
    adapter = TypeAdapter(Quantity)
    q = adapter.validate_python({"type": "range", "min": 1, "max": 2, "unit": "cup"})
    assert isinstance(q, RangeQuantity)
    assert adapter.dump_python(q) == {"type": "range", "min": 1.0, "max": 2.0, "unit": Unit.CUP}
