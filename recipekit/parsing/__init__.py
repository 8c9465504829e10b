from .parser import RecipeParser, ParsedRecipe
from .rule_based_parser import RuleBasedParser, parse_recipe_text
from .ingredient_parser import parse_ingredient_line, classify_ingredient_line

__all__ = ["RecipeParser", "ParsedRecipe", "RuleBasedParser", "parse_recipe_text", "parse_ingredient_line", "classify_ingredient_line"]
