"""
Recipe transformations: scaling and unit conversion.

Every transformation returns a new Recipe (with a new id); the input is never
modified. A recipe's own conversion rules are layered onto the caller's
registry at RECIPE priority for the duration of one call only.
"""

import logging
from typing import Optional

from ..core.errors import InvalidArgument, UnsupportedConversion
from ..models import Ingredient, Instruction, MeasuredIngredient, Recipe, Servings
from ..quantity import Quantity
from ..units import Unit, UnitSystem
from .unit_conversion import ConversionRegistry, ConversionRulePriority

logger = logging.getLogger("recipekit.conversion")


def recipe_registry(recipe: Recipe, registry: ConversionRegistry) -> ConversionRegistry:
    return registry.with_rules(recipe.conversion_rules, ConversionRulePriority.RECIPE)


def _rebuild(recipe: Recipe, **changes) -> Recipe:
    data = dict(
        title=recipe.title,
        servings=recipe.servings,
        ingredients=recipe.ingredients,
        instructions=recipe.instructions,
        conversion_rules=recipe.conversion_rules,
    )
    data.update(changes)
    return Recipe(**data)


def scale_recipe(recipe: Recipe, factor: float) -> Recipe:
    """Scale measured ingredients, servings and step references by `factor`."""
    if not factor > 0:
        raise InvalidArgument(f"factor must be positive, got {factor}")
    return _rebuild(
        recipe,
        servings=recipe.servings.scale(factor) if recipe.servings else None,
        ingredients=tuple(i.scale(factor) for i in recipe.ingredients),
        instructions=tuple(step.scale(factor) for step in recipe.instructions),
    )


def scale_to_servings(recipe: Recipe, target_servings: int) -> Recipe:
    if target_servings <= 0:
        raise InvalidArgument(f"target servings must be positive, got {target_servings}")
    if recipe.servings is None:
        raise InvalidArgument(f"Recipe '{recipe.id}' has no servings information and cannot be scaled")

    scaled = scale_recipe(recipe, target_servings / recipe.servings.amount)
    # Pin the exact target; rounding the scaled float could drift
    return scaled.model_copy(
        update={"servings": Servings(amount=target_servings, description=recipe.servings.description)}
    )


def convert_recipe(
    recipe: Recipe,
    target_unit: Unit,
    registry: ConversionRegistry,
    strict: bool = True,
) -> Recipe:
    """
    Convert every measured quantity to `target_unit`.

    strict=True: the first unsupported conversion aborts the whole call
    (UnsupportedConversion propagates, nothing is returned).
    strict=False: ingredients that cannot be converted stay as they are.
    Servings are never converted.
    """
    enhanced = recipe_registry(recipe, registry)

    if strict:
        ingredients = tuple(i.convert(target_unit, enhanced) for i in recipe.ingredients)
        instructions = tuple(step.convert(target_unit, enhanced) for step in recipe.instructions)
    else:
        ingredients = tuple(i.try_convert(target_unit, enhanced) for i in recipe.ingredients)
        instructions = tuple(step.try_convert(target_unit, enhanced) for step in recipe.instructions)

    return _rebuild(recipe, ingredients=ingredients, instructions=instructions)


def _system_target(quantity: Quantity, name: str, system: UnitSystem, registry: ConversionRegistry) -> Optional[Unit]:
    if quantity.unit.system == system:
        return None
    rule = registry.find_conversion_to_system(quantity.unit, system, name)
    if rule is None:
        logger.warning(f"No {system.value} conversion for '{name}' in {quantity.unit.abbreviation}")
        return None
    return rule.to_unit


def _ingredient_to_system(ingredient: Ingredient, system: UnitSystem, registry: ConversionRegistry) -> Ingredient:
    if not isinstance(ingredient, MeasuredIngredient):
        return ingredient
    target = _system_target(ingredient.quantity, ingredient.name, system, registry)
    return ingredient.try_convert(target, registry) if target else ingredient


def _step_to_system(step: Instruction, system: UnitSystem, registry: ConversionRegistry) -> Instruction:
    refs = []
    for ref in step.ingredient_refs:
        target = None
        if isinstance(ref.ingredient, MeasuredIngredient):
            target = _system_target(ref.quantity, ref.ingredient.name, system, registry)
        refs.append(ref.try_convert(target, registry) if target else ref)
    return step.model_copy(update={"ingredient_refs": tuple(refs)}) if refs else step


def convert_recipe_to_system(recipe: Recipe, target_system: UnitSystem, registry: ConversionRegistry) -> Recipe:
    """
    Move measured quantities into `target_system` ("make this metric").
    The target unit for each ingredient is whatever the registry offers first;
    ingredients with no route stay as they are.
    """
    enhanced = recipe_registry(recipe, registry)
    return _rebuild(
        recipe,
        ingredients=tuple(_ingredient_to_system(i, target_system, enhanced) for i in recipe.ingredients),
        instructions=tuple(_step_to_system(step, target_system, enhanced) for step in recipe.instructions),
    )


def scale_to_target(
    recipe: Recipe,
    ingredient_name: str,
    target_amount: Quantity,
    registry: ConversionRegistry,
) -> Recipe:
    """
    Scale the recipe so `ingredient_name` ends up at `target_amount`.

    e.g. "I have 500 g of flour": the flour is converted to grams, the whole
    recipe is scaled by target / current, and every ingredient that can be
    expressed in the target unit is converted to it.

    Raises UnsupportedConversion when the ingredient is missing or cannot be
    converted to the target unit.
    """
    if not ingredient_name or not ingredient_name.strip():
        raise InvalidArgument("ingredient_name must not be blank")

    enhanced = recipe_registry(recipe, registry)

    target = recipe.find_measured(ingredient_name)
    if target is None:
        raise UnsupportedConversion.ingredient_not_found(ingredient_name)

    target_unit = target_amount.unit
    current = target.quantity
    if current.unit != target_unit:
        current = enhanced.convert(current, target_unit, target.name)

    factor = target_amount.to_decimal() / current.to_decimal()
    logger.debug(f"Scaling '{recipe.title}' by {factor:.4f} to reach {target_amount} {target.name}")
    scaled = scale_recipe(recipe, factor)

    return _rebuild(
        scaled,
        ingredients=tuple(i.try_convert(target_unit, enhanced) for i in scaled.ingredients),
        instructions=tuple(step.try_convert(target_unit, enhanced) for step in scaled.instructions),
    )
