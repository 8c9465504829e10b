"""
Unit Conversion Service for recipekit.

Conversions are driven by explicit rules. A rule converts one unit into another
by a fixed factor, either for every ingredient (generic) or for one named
ingredient (density style, e.g. cups of flour -> grams).

Rules live in a ConversionRegistry with three priority tiers:
    HOUSE > RECIPE > STANDARD
Lookup walks the tiers in that order. Inside a tier an ingredient-specific
rule beats a generic one and earlier rules beat later ones. Priority always
dominates specificity across tiers.
"""

import logging
from enum import Enum
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core.errors import UnitMismatch, UnsupportedConversion
from ..quantity import Quantity
from ..units import Unit, UnitSystem

logger = logging.getLogger("recipekit.conversion")


class ConversionRulePriority(str, Enum):
    # Declaration order is lookup order
    HOUSE = "house"
    RECIPE = "recipe"
    STANDARD = "standard"


class ConversionRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    from_unit: Unit
    to_unit: Unit
    factor: float = Field(..., gt=0)
    ingredient_name: Optional[str] = None

    @field_validator("ingredient_name")
    @classmethod
    def _blank_is_generic(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip()

    @property
    def is_generic(self) -> bool:
        return self.ingredient_name is None

    def matches_ingredient(self, ingredient_name: Optional[str]) -> bool:
        if self.ingredient_name is None:
            return True
        return ingredient_name is not None and self.ingredient_name.lower() == ingredient_name.strip().lower()

    def can_convert(self, from_unit: Unit, to_unit: Unit, ingredient_name: Optional[str] = None) -> bool:
        if self.from_unit != from_unit or self.to_unit != to_unit:
            return False
        return self.matches_ingredient(ingredient_name)

    def apply(self, quantity: Quantity) -> Quantity:
        if quantity.unit != self.from_unit:
            raise UnitMismatch(
                f"quantity unit ({quantity.unit.name}) does not match rule unit ({self.from_unit.name})"
            )
        return quantity.rescale(self.factor, self.to_unit)

    def __str__(self) -> str:
        scope = f" [{self.ingredient_name}]" if self.ingredient_name else ""
        return f"1 {self.from_unit.abbreviation} = {self.factor:g} {self.to_unit.abbreviation}{scope}"


# --- Standard table ---

# Unit -> factor to base (ml)
VOLUME_TO_ML = {
    Unit.CUP: 236.588,
    Unit.TABLESPOON: 14.7868,
    Unit.TEASPOON: 4.92892,
    Unit.FLUID_OUNCE: 29.5735,
    Unit.MILLILITER: 1.0,
    Unit.LITER: 1000.0,
}

# Unit -> factor to base (g)
WEIGHT_TO_G = {
    Unit.OUNCE: 28.3495,
    Unit.POUND: 453.592,
    Unit.GRAM: 1.0,
    Unit.KILOGRAM: 1000.0,
}


def _pairwise_rules(to_base: dict) -> list[ConversionRule]:
    rules = []
    for from_unit, from_base in to_base.items():
        for to_unit, to_base_factor in to_base.items():
            if from_unit is to_unit:
                continue
            rules.append(ConversionRule(from_unit=from_unit, to_unit=to_unit, factor=from_base / to_base_factor))
    return rules


_STANDARD_RULES: tuple[ConversionRule, ...] = tuple(_pairwise_rules(VOLUME_TO_ML) + _pairwise_rules(WEIGHT_TO_G))
_STANDARD_BY_PAIR = {(r.from_unit, r.to_unit): r for r in _STANDARD_RULES}


class StandardConversions:
    """
    Precomputed same-dimension rules (volume<->volume, weight<->weight).
    No identity, cross-dimension, count or house rules: those need explicit
    ingredient-specific rules at a higher tier.
    """

    @staticmethod
    def get_rule(from_unit: Unit, to_unit: Unit) -> Optional[ConversionRule]:
        return _STANDARD_BY_PAIR.get((from_unit, to_unit))

    @staticmethod
    def all_rules() -> tuple[ConversionRule, ...]:
        return _STANDARD_RULES


# --- Registry ---

class ConversionRegistry:
    """Immutable, layered collection of conversion rules.

    with_rule/with_rules return a new registry; tiers that were not touched
    are shared with the original.
    """

    __slots__ = ("_tiers",)

    def __init__(self, tiers: Optional[dict] = None):
        base = {p: () for p in ConversionRulePriority}
        if tiers:
            for priority, rules in tiers.items():
                base[ConversionRulePriority(priority)] = tuple(rules)
        self._tiers: dict[ConversionRulePriority, tuple[ConversionRule, ...]] = base

    @classmethod
    def standard(cls) -> "ConversionRegistry":
        return cls().with_rules(StandardConversions.all_rules(), ConversionRulePriority.STANDARD)

    # --- building ---

    def with_rule(self, rule: ConversionRule, priority: ConversionRulePriority) -> "ConversionRegistry":
        return self.with_rules((rule,), priority)

    def with_rules(self, rules: Iterable[ConversionRule], priority: ConversionRulePriority) -> "ConversionRegistry":
        priority = ConversionRulePriority(priority)
        added = tuple(rules)
        if not added:
            return self
        tiers = dict(self._tiers)
        tiers[priority] = self._tiers[priority] + added
        return ConversionRegistry(tiers)

    # --- lookup ---

    def _find_rule(self, from_unit: Unit, to_unit: Unit, ingredient_name: Optional[str]) -> Optional[tuple]:
        for priority in ConversionRulePriority:
            tier = self._tiers[priority]

            if ingredient_name is not None:
                for rule in tier:
                    if not rule.is_generic and rule.can_convert(from_unit, to_unit, ingredient_name):
                        return priority, rule

            for rule in tier:
                if rule.is_generic and rule.can_convert(from_unit, to_unit):
                    return priority, rule
        return None

    def find_rule(
        self, from_unit: Unit, to_unit: Unit, ingredient_name: Optional[str] = None
    ) -> Optional[ConversionRule]:
        found = self._find_rule(from_unit, to_unit, ingredient_name)
        return found[1] if found else None

    def can_convert(self, from_unit: Unit, to_unit: Unit, ingredient_name: Optional[str] = None) -> bool:
        return self._find_rule(from_unit, to_unit, ingredient_name) is not None

    def convert(self, quantity: Quantity, target_unit: Unit, ingredient_name: Optional[str] = None) -> Quantity:
        """
        Convert `quantity` to `target_unit`.

        With an ingredient name, ingredient-specific rules are tried before
        generic ones inside each tier. Raises UnsupportedConversion when no
        tier has a matching rule.
        """
        from_unit = quantity.unit
        found = self._find_rule(from_unit, target_unit, ingredient_name)

        if found is None:
            logger.debug(f"No rule {from_unit.name} -> {target_unit.name} (ingredient={ingredient_name!r})")
            if ingredient_name is not None:
                raise UnsupportedConversion.for_ingredient(from_unit, target_unit, ingredient_name)
            raise UnsupportedConversion.for_units(from_unit, target_unit)

        priority, rule = found
        logger.debug(f"Using {priority.value} rule {rule} for {quantity}")
        return rule.apply(quantity)

    def find_conversion_to_system(
        self, unit: Unit, target_system: UnitSystem, ingredient_name: Optional[str] = None
    ) -> Optional[ConversionRule]:
        """
        First rule (tier order, then insertion order) from `unit` into any unit
        of `target_system`. Lets callers pick a default target ("pounds to
        metric") without choosing grams vs kilograms upfront.

        With an ingredient name, rules scoped to other ingredients are skipped.
        """
        for priority in ConversionRulePriority:
            for rule in self._tiers[priority]:
                if rule.from_unit != unit or rule.to_unit.system != target_system:
                    continue
                if ingredient_name is None or rule.matches_ingredient(ingredient_name):
                    return rule
        return None

    # --- introspection ---

    def rules_at(self, priority: ConversionRulePriority) -> tuple[ConversionRule, ...]:
        return self._tiers[ConversionRulePriority(priority)]

    def rule_count(self, priority: Optional[ConversionRulePriority] = None) -> int:
        if priority is not None:
            return len(self.rules_at(priority))
        return sum(len(rules) for rules in self._tiers.values())

    def has_rules_at(self, priority: ConversionRulePriority) -> bool:
        return self.rule_count(priority) > 0

    @property
    def is_empty(self) -> bool:
        return self.rule_count() == 0

    def __repr__(self) -> str:
        counts = ", ".join(f"{p.value}={len(r)}" for p, r in self._tiers.items())
        return f"ConversionRegistry({counts})"
