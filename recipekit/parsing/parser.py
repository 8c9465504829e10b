from abc import ABC, abstractmethod
from typing import List, Optional

from pydantic import BaseModel

from ..models import Ingredient, Instruction, Recipe, Servings
from ..services.unit_conversion import ConversionRule


class ParsedRecipe(BaseModel):
    title: str
    servings: Optional[Servings] = None
    ingredients: List[Ingredient] = []
    instructions: List[Instruction] = []

    def to_recipe(self, recipe_id: Optional[str] = None, conversion_rules: tuple[ConversionRule, ...] = ()) -> Recipe:
        data = dict(
            title=self.title,
            servings=self.servings,
            ingredients=tuple(self.ingredients),
            instructions=tuple(self.instructions),
            conversion_rules=tuple(conversion_rules),
        )
        if recipe_id:
            data["id"] = recipe_id
        return Recipe(**data)


class RecipeParser(ABC):
    @abstractmethod
    def parse(self, text: str, hints: dict = None) -> ParsedRecipe:
        """Parse raw text into a structured recipe."""
        pass
