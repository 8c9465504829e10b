import logging
import re
from typing import Callable, NamedTuple, Optional

from ..models import Ingredient, MeasuredIngredient, VagueIngredient
from ..quantity import ExactQuantity, Quantity, RangeQuantity
from ..units import Unit, resolve_unit

logger = logging.getLogger("recipekit.parsing")


class GrammarStep(NamedTuple):
    name: str
    pattern: re.Pattern
    build: Callable[[re.Match], Ingredient]


def resolve_remainder(rest: str) -> tuple[Unit, str, Optional[str]]:
    """
    Split the text after a quantity into (unit, name, preparation).

    "cups flour, sifted" -> (CUP, "flour", "sifted")
    "fl oz milk"         -> (FLUID_OUNCE, "milk", None)
    "eggs"               -> (WHOLE, "eggs", None)
    "pinch of nutmeg"    -> (PINCH, "nutmeg", None)
    """
    rest = rest.strip()
    tokens = rest.split(None, 2)

    unit = Unit.WHOLE
    name_and_prep = rest

    # Two-word aliases first ("fl oz"), then a single token
    if len(tokens) >= 2 and (two_word := resolve_unit(f"{tokens[0]} {tokens[1]}")):
        unit = two_word
        name_and_prep = tokens[2].strip() if len(tokens) == 3 else ""
    elif tokens and (one_word := resolve_unit(tokens[0])):
        unit = one_word
        name_and_prep = rest[len(tokens[0]):].strip()

    lowered = name_and_prep.lower()
    if lowered.startswith("of "):
        name_and_prep = name_and_prep[3:].strip()
    elif lowered == "of":
        name_and_prep = ""

    name, sep, prep = name_and_prep.partition(",")
    preparation = prep.strip() if sep else None
    return unit, name.strip(), preparation or None


def _vague(rest: str, reason: str) -> VagueIngredient:
    logger.debug(f"Falling back to vague ingredient for '{rest}' ({reason})")
    return VagueIngredient(name=rest)


def _measured(rest: str, make_quantity: Callable[[Unit], Quantity]) -> Ingredient:
    unit, name, preparation = resolve_remainder(rest)
    if not name:
        return _vague(rest, "no ingredient name")
    return MeasuredIngredient(name=name, quantity=make_quantity(unit), preparation=preparation)


def _measured_exact(rest: str, amount: float) -> Ingredient:
    if not amount > 0:
        return _vague(rest, "non-positive quantity")
    return _measured(rest, lambda unit: ExactQuantity(amount=amount, unit=unit))


# --- Builders, one per grammar step ---

def _build_to_taste(m: re.Match) -> Ingredient:
    return VagueIngredient(name=m.group(1).strip(), description="to taste")


def _build_article(m: re.Match) -> Ingredient:
    return _measured_exact(m.group(1), 1.0)


def _build_range(m: re.Match) -> Ingredient:
    low, high, rest = float(m.group(1)), float(m.group(2)), m.group(3)
    if not 0 < low < high:
        return _vague(rest, f"invalid range {m.group(1)}-{m.group(2)}")
    return _measured(rest, lambda unit: RangeQuantity(min=low, max=high, unit=unit))


def _build_mixed(m: re.Match) -> Ingredient:
    # float(): huge digit strings become inf instead of overflowing
    whole, num, den, rest = float(m.group(1)), float(m.group(2)), float(m.group(3)), m.group(4)
    if den == 0:
        return _vague(rest, "zero denominator")
    return _measured_exact(rest, whole + num / den)


def _build_fraction(m: re.Match) -> Ingredient:
    num, den, rest = float(m.group(1)), float(m.group(2)), m.group(3)
    if den == 0:
        return _vague(rest, "zero denominator")
    return _measured_exact(rest, num / den)


def _build_decimal(m: re.Match) -> Ingredient:
    return _measured_exact(m.group(2), float(m.group(1)))


# Ordered choice: the first pattern that matches the whole line decides.
INGREDIENT_GRAMMAR: list[GrammarStep] = [
    GrammarStep("to_taste", re.compile(r"^(.+?)\s+to\s+taste\s*$", re.IGNORECASE), _build_to_taste),
    GrammarStep("article", re.compile(r"^(?:a|an)\s+(.*?)\s*$", re.IGNORECASE), _build_article),
    GrammarStep("range", re.compile(r"^(\d+)-(\d+)\s+(.*?)\s*$"), _build_range),
    GrammarStep("mixed", re.compile(r"^(\d+)\s+(\d+)/(\d+)\s+(.*?)\s*$"), _build_mixed),
    GrammarStep("fraction", re.compile(r"^(\d+)/(\d+)\s+(.*?)\s*$"), _build_fraction),
    GrammarStep("decimal", re.compile(r"^(\d+(?:\.\d+)?)\s+(.*?)\s*$"), _build_decimal),
]


def classify_ingredient_line(line: str) -> str:
    """Name of the grammar step that claims `line` ("vague" if none does)."""
    trimmed = line.strip()
    for step in INGREDIENT_GRAMMAR:
        if step.pattern.match(trimmed):
            return step.name
    return "vague"


def parse_ingredient_line(line: str) -> Ingredient:
    """
    Parse one ingredient line into a MeasuredIngredient or VagueIngredient.

    Never fails for a non-blank line: anything the grammar cannot turn into a
    named, positive quantity becomes a VagueIngredient.
    """
    trimmed = line.strip()
    if not trimmed:
        raise ValueError("ingredient line must not be blank")

    for step in INGREDIENT_GRAMMAR:
        m = step.pattern.match(trimmed)
        if m:
            return step.build(m)

    return VagueIngredient(name=trimmed)
