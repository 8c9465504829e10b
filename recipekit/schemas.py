"""Pydantic schemas for the recipekit API.

Request/response models for:
- Unit lookup and conversion
- Ingredient line parsing
- Recipe text parsing and transformation
"""

from typing import Optional

from pydantic import BaseModel, Field

from .quantity import Quantity
from .services.unit_conversion import ConversionRule
from .units import Unit, UnitDimension, UnitSystem


# --- Units ---

class UnitOut(BaseModel):
    unit: Unit
    system: UnitSystem
    dimension: UnitDimension
    abbreviation: str
    plural_abbreviation: str
    aliases: list[str]


class UnitConvertRequest(BaseModel):
    qty: float = Field(..., gt=0)
    from_unit: str
    to_unit: Optional[str] = None
    target_system: Optional[UnitSystem] = None  # used when to_unit is missing
    ingredient_name: Optional[str] = None
    recipe_rules: list[ConversionRule] = []


class UnitConvertResponse(BaseModel):
    qty: float
    unit: Unit
    display: str
    rule: str


# --- Ingredients ---

class IngredientParseRequest(BaseModel):
    line: str = Field(..., min_length=1)


# --- Recipes ---

class RecipeParseRequest(BaseModel):
    text: str
    title_hint: Optional[str] = None


class RecipeConvertRequest(BaseModel):
    text: str
    target_unit: Optional[str] = None
    target_system: Optional[UnitSystem] = None
    strict: Optional[bool] = None  # None -> settings.strict_conversion
    conversion_rules: list[ConversionRule] = []


class RecipeScaleRequest(BaseModel):
    text: str
    servings: Optional[int] = Field(None, gt=0)
    factor: Optional[float] = Field(None, gt=0)
    ingredient_name: Optional[str] = None
    target_amount: Optional[Quantity] = None  # with ingredient_name
    conversion_rules: list[ConversionRule] = []
