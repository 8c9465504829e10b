"""
Tests for recipe scaling and conversion.
"""

import logging

import pytest

from recipekit.core.errors import InvalidArgument, UnsupportedConversion
from recipekit.models import IngredientRef, Instruction, MeasuredIngredient, Servings, VagueIngredient
from recipekit.parsing import parse_recipe_text
from recipekit.quantity import ExactQuantity
from recipekit.services.recipe_transform import (
    convert_recipe,
    convert_recipe_to_system,
    scale_recipe,
    scale_to_servings,
    scale_to_target,
)
from recipekit.services.unit_conversion import ConversionRule, ConversionRulePriority
from recipekit.units import Unit, UnitSystem

FLOUR_RULE = ConversionRule(from_unit=Unit.CUP, to_unit=Unit.GRAM, factor=120, ingredient_name="flour")


@pytest.fixture
def recipe(pancakes_text):
    return parse_recipe_text(pancakes_text).to_recipe()


@pytest.fixture
def recipe_with_rules(pancakes_text):
    return parse_recipe_text(pancakes_text).to_recipe(conversion_rules=(FLOUR_RULE,))


def _by_name(recipe):
    return {i.name: i for i in recipe.ingredients}


def test_scale_recipe(recipe):
    scaled = scale_recipe(recipe, 2)
    ingredients = _by_name(scaled)

    assert ingredients["flour"].quantity == ExactQuantity(amount=4, unit=Unit.CUP)
    assert ingredients["eggs"].quantity == ExactQuantity(amount=4, unit=Unit.WHOLE)
    assert ingredients["salt"] == _by_name(recipe)["salt"]
    assert scaled.servings.amount == 8
    assert scaled.id != recipe.id
    assert scaled.title == recipe.title

    # Input untouched
    assert _by_name(recipe)["flour"].quantity.amount == 2
    assert recipe.servings.amount == 4


@pytest.mark.parametrize("factor", [0, -2])
def test_scale_recipe_rejects_non_positive_factor(recipe, factor):
    with pytest.raises(InvalidArgument):
        scale_recipe(recipe, factor)


def test_scale_to_servings(recipe):
    halved = scale_to_servings(recipe, 2)

    assert halved.servings.amount == 2
    assert _by_name(halved)["flour"].quantity.amount == 1
    assert _by_name(halved)["milk"].quantity.amount == 0.5


def test_scale_to_servings_requires_servings():
    recipe = parse_recipe_text("Toast\nIngredients:\n2 slices bread").to_recipe()
    with pytest.raises(InvalidArgument):
        scale_to_servings(recipe, 4)


def test_scale_to_servings_rejects_non_positive_target(recipe):
    with pytest.raises(InvalidArgument):
        scale_to_servings(recipe, 0)


def test_servings_scale_rounding():
    assert Servings(amount=3).scale(0.5).amount == 2
    assert Servings(amount=4).scale(0.5).amount == 2
    assert Servings(amount=1).scale(0.1).amount == 1
    assert Servings(amount=4, description="people").scale(1.5) == Servings(amount=6, description="people")


def test_convert_recipe_strict_fails_whole_batch(recipe, registry):
    with pytest.raises(UnsupportedConversion) as exc:
        convert_recipe(recipe, Unit.MILLILITER, registry)
    assert str(exc.value) == "Cannot convert eggs from whole to ml"


def test_convert_recipe_tolerant(recipe, registry, caplog):
    with caplog.at_level(logging.WARNING, logger="recipekit.conversion"):
        converted = convert_recipe(recipe, Unit.MILLILITER, registry, strict=False)
    ingredients = _by_name(converted)

    assert ingredients["flour"].quantity.unit is Unit.MILLILITER
    assert abs(ingredients["flour"].quantity.amount - 473.176) < 1e-6
    assert abs(ingredients["milk"].quantity.amount - 236.588) < 1e-6
    assert ingredients["eggs"].quantity == ExactQuantity(amount=2, unit=Unit.WHOLE)
    assert isinstance(ingredients["salt"], VagueIngredient)
    # Servings are never converted
    assert converted.servings == recipe.servings
    assert "Leaving 'eggs' unconverted" in caplog.text


def test_convert_recipe_uses_recipe_rules(recipe_with_rules, registry):
    converted = convert_recipe(recipe_with_rules, Unit.GRAM, registry, strict=False)
    ingredients = _by_name(converted)

    assert ingredients["flour"].quantity == ExactQuantity(amount=240, unit=Unit.GRAM)
    assert ingredients["milk"].quantity.unit is Unit.CUP
    # Recipe rules are layered per call only
    assert not registry.has_rules_at(ConversionRulePriority.RECIPE)
    assert converted.conversion_rules == (FLOUR_RULE,)


def test_house_rule_overrides_recipe_rule(recipe_with_rules, registry):
    house = registry.with_rule(
        ConversionRule(from_unit=Unit.CUP, to_unit=Unit.GRAM, factor=125),
        ConversionRulePriority.HOUSE,
    )
    converted = convert_recipe(recipe_with_rules, Unit.GRAM, house, strict=False)

    assert _by_name(converted)["flour"].quantity.amount == 250
    assert _by_name(converted)["milk"].quantity.amount == 125


def test_convert_recipe_to_system(recipe, recipe_with_rules, registry):
    metric = convert_recipe_to_system(recipe, UnitSystem.METRIC, registry)
    assert _by_name(metric)["flour"].quantity.unit is Unit.MILLILITER
    assert _by_name(metric)["eggs"].quantity.unit is Unit.WHOLE

    metric = convert_recipe_to_system(recipe_with_rules, UnitSystem.METRIC, registry)
    assert _by_name(metric)["flour"].quantity == ExactQuantity(amount=240, unit=Unit.GRAM)
    assert _by_name(metric)["milk"].quantity.unit is Unit.MILLILITER


def test_scale_to_target(recipe_with_rules, registry):
    scaled = scale_to_target(recipe_with_rules, "Flour", ExactQuantity(amount=480, unit=Unit.GRAM), registry)
    ingredients = _by_name(scaled)

    assert abs(ingredients["flour"].quantity.amount - 480) < 1e-9
    assert ingredients["flour"].quantity.unit is Unit.GRAM
    assert ingredients["milk"].quantity == ExactQuantity(amount=2, unit=Unit.CUP)
    assert ingredients["eggs"].quantity.amount == 4
    assert scaled.servings.amount == 8


def test_scale_to_target_same_unit(recipe, registry):
    scaled = scale_to_target(recipe, "eggs", ExactQuantity(amount=6, unit=Unit.WHOLE), registry)
    assert _by_name(scaled)["flour"].quantity.amount == 6


def test_scale_to_target_missing_ingredient(recipe, registry):
    with pytest.raises(UnsupportedConversion) as exc:
        scale_to_target(recipe, "butter", ExactQuantity(amount=100, unit=Unit.GRAM), registry)
    assert str(exc.value) == "Ingredient not found in recipe: butter"


def test_scale_to_target_unconvertible(recipe, registry):
    with pytest.raises(UnsupportedConversion):
        scale_to_target(recipe, "eggs", ExactQuantity(amount=100, unit=Unit.GRAM), registry)


def test_instruction_refs_follow_transforms(registry):
    flour = MeasuredIngredient(name="flour", quantity=ExactQuantity(amount=2, unit=Unit.CUP))
    step = Instruction(
        step_number=1,
        text="Sift the flour",
        ingredient_refs=(IngredientRef(ingredient=flour, quantity=ExactQuantity(amount=1, unit=Unit.CUP)),),
    )

    scaled = step.scale(2)
    assert scaled.ingredient_refs[0].quantity.amount == 2
    assert scaled.ingredient_refs[0].ingredient.quantity.amount == 4

    converted = step.convert(Unit.MILLILITER, registry)
    assert abs(converted.ingredient_refs[0].quantity.amount - 236.588) < 1e-6

    with pytest.raises(UnsupportedConversion):
        step.convert(Unit.GRAM, registry)
    assert step.try_convert(Unit.GRAM, registry) == step


def test_display():
    flour = MeasuredIngredient(
        name="flour", quantity=ExactQuantity(amount=2, unit=Unit.CUP), preparation="sifted", notes="or cake flour"
    )
    assert str(flour) == "2 cups flour, sifted (or cake flour)"
    assert str(VagueIngredient(name="salt", description=" to taste ")) == "salt (to taste)"
    assert str(Instruction(step_number=3, text="Bake")) == "3. Bake"
    assert str(Servings(amount=4, description="people")) == "4 people"
