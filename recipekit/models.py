"""Domain models for recipekit.

Recipes, ingredients, servings and instruction steps. All models are frozen;
transformations (scale, convert) return new values.

Polymorphic values carry a `type` tag:
- Ingredient: "measured" | "vague"
- Quantity:   "exact" | "fractional" | "range"  (see quantity.py)
"""

import logging
import math
import uuid
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .core.errors import InvalidArgument, UnsupportedConversion
from .core.text import blank_to_none
from .quantity import Quantity
from .services.unit_conversion import ConversionRegistry, ConversionRule
from .units import Unit

logger = logging.getLogger("recipekit.conversion")


def _require_text(v: str, field: str) -> str:
    if not v or not v.strip():
        raise ValueError(f"{field} must not be blank")
    return v


# --- Ingredients ---

class _IngredientBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    preparation: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, v: str) -> str:
        return _require_text(v, "name")


class MeasuredIngredient(_IngredientBase):
    type: Literal["measured"] = "measured"
    quantity: Quantity

    def scale(self, factor: float) -> "MeasuredIngredient":
        return self.model_copy(update={"quantity": self.quantity.rescale(factor, self.quantity.unit)})

    def convert(self, target_unit: Unit, registry: ConversionRegistry) -> "MeasuredIngredient":
        """Strict conversion; raises UnsupportedConversion."""
        converted = registry.convert(self.quantity, target_unit, self.name)
        return self.model_copy(update={"quantity": converted})

    def try_convert(self, target_unit: Unit, registry: ConversionRegistry) -> "MeasuredIngredient":
        try:
            return self.convert(target_unit, registry)
        except UnsupportedConversion as e:
            logger.warning(f"Leaving '{self.name}' unconverted: {e}")
            return self

    def __str__(self) -> str:
        s = f"{self.quantity} {self.name}"
        if self.preparation:
            s += f", {self.preparation}"
        if self.notes:
            s += f" ({self.notes})"
        return s


class VagueIngredient(_IngredientBase):
    """An ingredient without a measurable amount ("salt to taste")."""

    type: Literal["vague"] = "vague"
    description: Optional[str] = None

    @field_validator("description")
    @classmethod
    def _trim_description(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else None

    def scale(self, factor: float) -> "VagueIngredient":
        return self

    def convert(self, target_unit: Unit, registry: ConversionRegistry) -> "VagueIngredient":
        return self

    def try_convert(self, target_unit: Unit, registry: ConversionRegistry) -> "VagueIngredient":
        return self

    def __str__(self) -> str:
        s = self.name
        if self.description:
            s += f" ({self.description})"
        if self.preparation:
            s += f", {self.preparation}"
        return s


Ingredient = Annotated[
    Union[MeasuredIngredient, VagueIngredient],
    Field(discriminator="type"),
]


# --- Servings / Steps ---

class Servings(BaseModel):
    model_config = ConfigDict(frozen=True)

    amount: int = Field(..., gt=0)
    description: Optional[str] = None

    @field_validator("description")
    @classmethod
    def _clean_description(cls, v: Optional[str]) -> Optional[str]:
        return blank_to_none(v)

    def scale(self, factor: float) -> "Servings":
        if not factor > 0:
            raise InvalidArgument(f"factor must be positive, got {factor}")
        # Round half up, never below one serving
        scaled = max(1, int(math.floor(self.amount * factor + 0.5)))
        return Servings(amount=scaled, description=self.description)

    def __str__(self) -> str:
        return f"{self.amount} {self.description}" if self.description else str(self.amount)


class IngredientRef(BaseModel):
    """An ingredient used by one step, with the amount used in that step."""

    model_config = ConfigDict(frozen=True)

    ingredient: Ingredient
    quantity: Quantity

    def scale(self, factor: float) -> "IngredientRef":
        if isinstance(self.ingredient, VagueIngredient):
            return self
        return IngredientRef(
            ingredient=self.ingredient.scale(factor),
            quantity=self.quantity.rescale(factor, self.quantity.unit),
        )

    def convert(self, target_unit: Unit, registry: ConversionRegistry) -> "IngredientRef":
        if not isinstance(self.ingredient, MeasuredIngredient):
            return self
        name = self.ingredient.name
        return IngredientRef(
            ingredient=self.ingredient.convert(target_unit, registry),
            quantity=registry.convert(self.quantity, target_unit, name),
        )

    def try_convert(self, target_unit: Unit, registry: ConversionRegistry) -> "IngredientRef":
        try:
            return self.convert(target_unit, registry)
        except UnsupportedConversion:
            return self


class Instruction(BaseModel):
    model_config = ConfigDict(frozen=True)

    step_number: int = Field(..., gt=0)
    text: str
    ingredient_refs: tuple[IngredientRef, ...] = ()

    @field_validator("text")
    @classmethod
    def _text_not_blank(cls, v: str) -> str:
        return _require_text(v, "text")

    def scale(self, factor: float) -> "Instruction":
        if not self.ingredient_refs:
            return self
        return self.model_copy(update={"ingredient_refs": tuple(r.scale(factor) for r in self.ingredient_refs)})

    def convert(self, target_unit: Unit, registry: ConversionRegistry) -> "Instruction":
        if not self.ingredient_refs:
            return self
        refs = tuple(r.convert(target_unit, registry) for r in self.ingredient_refs)
        return self.model_copy(update={"ingredient_refs": refs})

    def try_convert(self, target_unit: Unit, registry: ConversionRegistry) -> "Instruction":
        if not self.ingredient_refs:
            return self
        refs = tuple(r.try_convert(target_unit, registry) for r in self.ingredient_refs)
        return self.model_copy(update={"ingredient_refs": refs})

    def __str__(self) -> str:
        return f"{self.step_number}. {self.text}"


# --- Recipe ---

class Recipe(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    title: str
    servings: Optional[Servings] = None
    ingredients: tuple[Ingredient, ...] = ()
    instructions: tuple[Instruction, ...] = ()
    conversion_rules: tuple[ConversionRule, ...] = ()

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, v: str) -> str:
        return _require_text(v, "title")

    def measured_ingredients(self) -> list[MeasuredIngredient]:
        return [i for i in self.ingredients if isinstance(i, MeasuredIngredient)]

    def find_measured(self, name: str) -> Optional[MeasuredIngredient]:
        wanted = name.strip().lower()
        for ingredient in self.measured_ingredients():
            if ingredient.name.lower() == wanted:
                return ingredient
        return None
