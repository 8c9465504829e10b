"""Error taxonomy for recipekit.

- EmptyTitle: recipe text produced no title (fatal to that parse call)
- UnsupportedConversion: no rule converts between the requested units
- InvalidArgument: programmer error, e.g. rescaling by a non-positive factor
"""

from typing import Optional


class RecipeKitError(Exception):
    """Base class for every error raised by recipekit."""


class EmptyTitle(RecipeKitError):
    def __init__(self, message: str = "Recipe text must have a non-blank title"):
        super().__init__(message)


class InvalidArgument(RecipeKitError, ValueError):
    pass


class UnitMismatch(InvalidArgument):
    pass


class UnsupportedConversion(RecipeKitError):
    """Raised by the conversion registry when no rule matches.

    Use the classmethods rather than the constructor so messages stay uniform.
    """

    def __init__(
        self,
        message: str,
        from_unit=None,
        to_unit=None,
        ingredient_name: Optional[str] = None,
    ):
        super().__init__(message)
        self.from_unit = from_unit
        self.to_unit = to_unit
        self.ingredient_name = ingredient_name

    @classmethod
    def for_units(cls, from_unit, to_unit) -> "UnsupportedConversion":
        return cls(
            f"Cannot convert from {from_unit.abbreviation} to {to_unit.abbreviation}",
            from_unit=from_unit,
            to_unit=to_unit,
        )

    @classmethod
    def for_ingredient(cls, from_unit, to_unit, ingredient_name: str) -> "UnsupportedConversion":
        return cls(
            f"Cannot convert {ingredient_name} from {from_unit.abbreviation} to {to_unit.abbreviation}",
            from_unit=from_unit,
            to_unit=to_unit,
            ingredient_name=ingredient_name,
        )

    @classmethod
    def ingredient_not_found(cls, ingredient_name: str) -> "UnsupportedConversion":
        return cls(
            f"Ingredient not found in recipe: {ingredient_name}",
            ingredient_name=ingredient_name,
        )
