"""Recipe text API router.

Endpoints:
- POST /api/ingredients/parse - Parse one ingredient line
- POST /api/recipes/parse     - Parse plain recipe text
- POST /api/recipes/convert   - Parse, then convert to a unit or system
- POST /api/recipes/scale     - Parse, then scale (factor, servings or target ingredient)
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from ..core.errors import EmptyTitle, InvalidArgument, UnsupportedConversion
from ..deps import get_registry, get_settings
from ..models import Recipe
from ..parsing import ParsedRecipe, RuleBasedParser, parse_ingredient_line
from ..schemas import IngredientParseRequest, RecipeConvertRequest, RecipeParseRequest, RecipeScaleRequest
from ..services.recipe_transform import (
    convert_recipe,
    convert_recipe_to_system,
    scale_recipe,
    scale_to_servings,
    scale_to_target,
)
from ..services.unit_conversion import ConversionRegistry
from ..settings import Settings
from .units import require_unit

router = APIRouter()
logger = logging.getLogger("recipekit.api")

parser = RuleBasedParser()


def _parse_or_400(text: str, hints: dict = None) -> ParsedRecipe:
    try:
        return parser.parse(text, hints)
    except EmptyTitle as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/ingredients/parse")
def parse_ingredient(req: IngredientParseRequest):
    if not req.line.strip():
        raise HTTPException(status_code=400, detail="Ingredient line must not be blank")
    return parse_ingredient_line(req.line)


@router.post("/recipes/parse", response_model=ParsedRecipe)
def parse_recipe(req: RecipeParseRequest):
    hints = {"title_hint": req.title_hint} if req.title_hint else None
    return _parse_or_400(req.text, hints)


@router.post("/recipes/convert", response_model=Recipe)
def convert_parsed_recipe(
    req: RecipeConvertRequest,
    registry: ConversionRegistry = Depends(get_registry),
    config: Settings = Depends(get_settings),
):
    recipe = _parse_or_400(req.text).to_recipe(conversion_rules=tuple(req.conversion_rules))

    if req.target_unit:
        strict = config.strict_conversion if req.strict is None else req.strict
        try:
            return convert_recipe(recipe, require_unit(req.target_unit), registry, strict=strict)
        except UnsupportedConversion as e:
            logger.info(f"Rejected conversion of '{recipe.title}': {e}")
            raise HTTPException(status_code=422, detail=str(e))

    if req.target_system:
        return convert_recipe_to_system(recipe, req.target_system, registry)

    raise HTTPException(status_code=400, detail="Either target_unit or target_system is required")


@router.post("/recipes/scale", response_model=Recipe)
def scale_parsed_recipe(req: RecipeScaleRequest, registry: ConversionRegistry = Depends(get_registry)):
    recipe = _parse_or_400(req.text).to_recipe(conversion_rules=tuple(req.conversion_rules))

    try:
        if req.ingredient_name and req.target_amount:
            return scale_to_target(recipe, req.ingredient_name, req.target_amount, registry)
        if req.servings:
            return scale_to_servings(recipe, req.servings)
        if req.factor:
            return scale_recipe(recipe, req.factor)
    except InvalidArgument as e:
        raise HTTPException(status_code=400, detail=str(e))
    except UnsupportedConversion as e:
        raise HTTPException(status_code=422, detail=str(e))

    raise HTTPException(status_code=400, detail="Provide servings, factor, or ingredient_name with target_amount")
