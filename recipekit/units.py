"""
Unit catalog.

Every unit knows its measurement system, its physical dimension and how it
is abbreviated for display. Free text is mapped to a unit through a fixed
alias table (exact, case-insensitive, no fuzzy matching).
"""

from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional


class UnitSystem(str, Enum):
    IMPERIAL = "imperial"
    METRIC = "metric"
    HOUSE = "house"


class UnitDimension(str, Enum):
    WEIGHT = "weight"
    VOLUME = "volume"
    COUNT = "count"
    OTHER = "other"


class Unit(str, Enum):
    # value, system, dimension, singular, plural
    CUP = ("cup", UnitSystem.IMPERIAL, UnitDimension.VOLUME, "cup", "cups")
    TABLESPOON = ("tablespoon", UnitSystem.IMPERIAL, UnitDimension.VOLUME, "tbsp", "tbsp")
    TEASPOON = ("teaspoon", UnitSystem.IMPERIAL, UnitDimension.VOLUME, "tsp", "tsp")
    FLUID_OUNCE = ("fluid_ounce", UnitSystem.IMPERIAL, UnitDimension.VOLUME, "fl oz", "fl oz")
    OUNCE = ("ounce", UnitSystem.IMPERIAL, UnitDimension.WEIGHT, "oz", "oz")
    POUND = ("pound", UnitSystem.IMPERIAL, UnitDimension.WEIGHT, "lb", "lb")

    MILLILITER = ("milliliter", UnitSystem.METRIC, UnitDimension.VOLUME, "ml", "ml")
    LITER = ("liter", UnitSystem.METRIC, UnitDimension.VOLUME, "L", "L")
    GRAM = ("gram", UnitSystem.METRIC, UnitDimension.WEIGHT, "g", "g")
    KILOGRAM = ("kilogram", UnitSystem.METRIC, UnitDimension.WEIGHT, "kg", "kg")

    WHOLE = ("whole", UnitSystem.HOUSE, UnitDimension.COUNT, "whole", "whole")
    PINCH = ("pinch", UnitSystem.HOUSE, UnitDimension.OTHER, "pinch", "pinches")
    DASH = ("dash", UnitSystem.HOUSE, UnitDimension.OTHER, "dash", "dashes")
    HANDFUL = ("handful", UnitSystem.HOUSE, UnitDimension.OTHER, "handful", "handfuls")
    TO_TASTE = ("to_taste", UnitSystem.HOUSE, UnitDimension.OTHER, "to taste", "to taste")

    def __new__(cls, value, system, dimension, abbreviation, plural_abbreviation):
        obj = str.__new__(cls, value)
        obj._value_ = value
        obj.system = system
        obj.dimension = dimension
        obj.abbreviation = abbreviation
        obj.plural_abbreviation = plural_abbreviation
        return obj

    @property
    def canonical_alias(self) -> str:
        return self.value

    def display(self, plural: bool) -> str:
        return self.plural_abbreviation if plural else self.abbreviation

    @classmethod
    def resolve(cls, text: str) -> Optional["Unit"]:
        return resolve_unit(text)

    def __str__(self) -> str:
        return self.abbreviation


# Common spellings on top of the canonical aliases (the enum values)
_EXTRA_ALIASES = {
    Unit.CUP: ["cup", "cups", "c"],
    Unit.TABLESPOON: ["tbsp", "tablespoon", "tablespoons"],
    Unit.TEASPOON: ["tsp", "teaspoon", "teaspoons"],
    Unit.FLUID_OUNCE: ["fl oz", "fluid ounce", "fluid ounces"],
    Unit.OUNCE: ["oz", "ounce", "ounces"],
    Unit.POUND: ["lb", "lbs", "pound", "pounds"],
    Unit.MILLILITER: ["ml", "milliliter", "milliliters"],
    Unit.LITER: ["l", "liter", "liters"],
    Unit.GRAM: ["g", "gram", "grams"],
    Unit.KILOGRAM: ["kg", "kilogram", "kilograms"],
    Unit.WHOLE: ["whole", "clove", "cloves"],
    Unit.PINCH: ["pinch", "pinches"],
    Unit.DASH: ["dash", "dashes"],
    Unit.HANDFUL: ["handful", "handfuls"],
    Unit.TO_TASTE: ["to taste"],
}


def _build_alias_table() -> Mapping[str, Unit]:
    table: dict[str, Unit] = {}
    for unit in Unit:
        table[unit.value] = unit
    for unit, aliases in _EXTRA_ALIASES.items():
        for alias in aliases:
            key = alias.lower()
            owner = table.get(key)
            if owner is not None and owner is not unit:
                raise RuntimeError(f"Alias '{alias}' registered for both {owner.name} and {unit.name}")
            table[key] = unit
    return MappingProxyType(table)


UNIT_ALIASES: Mapping[str, Unit] = _build_alias_table()


def resolve_unit(text: str) -> Optional[Unit]:
    """Look up a unit by alias. Unknown text -> None."""
    if not text:
        return None
    return UNIT_ALIASES.get(text.strip().lower())


def aliases_for(unit: Unit) -> list[str]:
    return sorted(alias for alias, owner in UNIT_ALIASES.items() if owner is unit)
