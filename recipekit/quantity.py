"""
Quantity values.

A quantity is one of three frozen variants, tagged by `type` so the JSON layer
can tell them apart:
- exact:      a single decimal amount ("2.5 cups")
- fractional: a mixed number kept as whole + numerator/denominator ("2 1/3 tbsp")
- range:      min and max amounts ("2-3 cloves")

Each variant can collapse itself to one decimal and rescale itself into a new
unit. Rescaling never mutates; it returns a new quantity.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .core.errors import InvalidArgument
from .core.text import format_decimal
from .units import Unit


def _check_factor(factor: float) -> None:
    # `not >` also rejects NaN
    if not factor > 0:
        raise InvalidArgument(f"factor must be positive, got {factor}")


class _QuantityBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    def to_decimal(self) -> float:
        raise NotImplementedError

    def rescale(self, factor: float, unit: Unit) -> "Quantity":
        raise NotImplementedError


class ExactQuantity(_QuantityBase):
    type: Literal["exact"] = "exact"
    amount: float = Field(..., gt=0)
    unit: Unit

    def to_decimal(self) -> float:
        return self.amount

    def rescale(self, factor: float, unit: Unit) -> "ExactQuantity":
        _check_factor(factor)
        return ExactQuantity(amount=self.amount * factor, unit=unit)

    def __str__(self) -> str:
        return f"{format_decimal(self.amount)} {self.unit.display(plural=self.amount != 1.0)}"


class FractionalQuantity(_QuantityBase):
    type: Literal["fractional"] = "fractional"
    whole: int = Field(0, ge=0)
    numerator: int = Field(0, ge=0)
    denominator: int = Field(1, gt=0)
    unit: Unit

    @model_validator(mode="after")
    def _not_zero(self):
        if self.whole == 0 and self.numerator == 0:
            raise ValueError("at least one of whole or numerator must be positive")
        return self

    def to_decimal(self) -> float:
        return self.whole + self.numerator / self.denominator

    def rescale(self, factor: float, unit: Unit) -> "ExactQuantity":
        # Fraction structure does not survive arbitrary multiplication
        _check_factor(factor)
        return ExactQuantity(amount=self.to_decimal() * factor, unit=unit)

    def __str__(self) -> str:
        if self.whole > 0 and self.numerator > 0:
            return f"{self.whole} {self.numerator}/{self.denominator} {self.unit.plural_abbreviation}"
        if self.whole > 0:
            return f"{self.whole} {self.unit.display(plural=self.whole != 1)}"
        if self.numerator == 1 and self.denominator == 1:
            return f"1 {self.unit.abbreviation}"
        return f"{self.numerator}/{self.denominator} {self.unit.abbreviation}"


class RangeQuantity(_QuantityBase):
    type: Literal["range"] = "range"
    min: Annotated[float, Field(gt=0)]
    max: float
    unit: Unit

    @model_validator(mode="after")
    def _ordered(self):
        if not self.max > self.min:
            raise ValueError("max must be greater than min")
        return self

    def to_decimal(self) -> float:
        return (self.min + self.max) / 2.0

    def rescale(self, factor: float, unit: Unit) -> "RangeQuantity":
        _check_factor(factor)
        return RangeQuantity(min=self.min * factor, max=self.max * factor, unit=unit)

    def __str__(self) -> str:
        return f"{format_decimal(self.min)}-{format_decimal(self.max)} {self.unit.plural_abbreviation}"


Quantity = Annotated[
    Union[ExactQuantity, FractionalQuantity, RangeQuantity],
    Field(discriminator="type"),
]
