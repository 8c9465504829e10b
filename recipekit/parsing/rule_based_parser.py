import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ..core.errors import EmptyTitle
from ..models import Ingredient, Instruction, Servings
from .ingredient_parser import parse_ingredient_line
from .parser import ParsedRecipe, RecipeParser

logger = logging.getLogger("recipekit.parsing")

SERVINGS_PATTERN = re.compile(r"^\s*(?:makes|serves)\s*:?\s*(\d+)(?:\s+(.+?))?\s*$", re.IGNORECASE)
INGREDIENTS_HEADER = re.compile(r"^\s*ingredients\s*:?\s*$", re.IGNORECASE)
INSTRUCTIONS_HEADER = re.compile(r"^\s*(?:instructions|directions|steps)\s*:?\s*$", re.IGNORECASE)

# "1. ", "1) " or "1 "
STEP_PREFIX = re.compile(r"^\d+[.)\s]\s*")


class Section(Enum):
    HEADER = "header"
    INGREDIENTS = "ingredients"
    INSTRUCTIONS = "instructions"


@dataclass
class _ParseState:
    section: Section = Section.HEADER
    title: Optional[str] = None
    servings: Optional[Servings] = None
    ingredients: List[Ingredient] = field(default_factory=list)
    instructions: List[Instruction] = field(default_factory=list)
    next_step: int = 1


class RuleBasedParser(RecipeParser):
    """
    Splits plain recipe text into title, servings, ingredients and steps.

    Expected shape:

        Pancakes
        Serves 4
        Ingredients:
        2 cups flour
        Instructions:
        1. Mix
        2. Cook

    Sections start in HEADER; an ingredients or instructions header switches
    to that section wherever it appears.
    """

    def parse(self, text: str, hints: dict = None) -> ParsedRecipe:
        state = _ParseState()

        for raw_line in text.split("\n"):
            line = raw_line.rstrip()

            # Blank lines never end a section
            if not line.strip():
                continue

            if self._switch_section(state, line):
                continue

            if state.section is Section.HEADER:
                self._handle_header(state, line)
            elif state.section is Section.INGREDIENTS:
                state.ingredients.append(parse_ingredient_line(line))
            else:
                self._handle_instruction(state, line)

        title = state.title
        servings = state.servings
        if hints:
            title = hints.get("title_hint") or title
            if servings is None and hints.get("servings"):
                servings = Servings(amount=hints["servings"])

        if title is None or not title.strip():
            raise EmptyTitle()

        logger.info(
            f"Parsed recipe '{title}': {len(state.ingredients)} ingredients, "
            f"{len(state.instructions)} steps"
        )
        return ParsedRecipe(
            title=title,
            servings=servings,
            ingredients=state.ingredients,
            instructions=state.instructions,
        )

    def _switch_section(self, state: _ParseState, line: str) -> bool:
        """Returns True when `line` is a section header (never content)."""
        if INGREDIENTS_HEADER.match(line):
            if state.section is Section.INSTRUCTIONS:
                logger.debug(f"Back to ingredients after {len(state.instructions)} steps")
            state.section = Section.INGREDIENTS
            return True
        if INSTRUCTIONS_HEADER.match(line):
            state.section = Section.INSTRUCTIONS
            return True
        return False

    def _handle_header(self, state: _ParseState, line: str) -> None:
        # The first content line is the title, even if it reads like "Serves 4"
        if state.title is None:
            state.title = line.strip()
            return

        m = SERVINGS_PATTERN.match(line)
        if not m:
            return

        try:
            amount = int(m.group(1))
        except ValueError:
            # Beyond the int string-conversion limit
            logger.warning(f"Ignoring servings line with an unreadable amount ({len(m.group(1))} digits)")
            return
        if amount <= 0:
            logger.warning(f"Ignoring servings line with no servings: '{line.strip()}'")
            return
        state.servings = Servings(amount=amount, description=m.group(2))

    def _handle_instruction(self, state: _ParseState, line: str) -> None:
        text = STEP_PREFIX.sub("", line.strip(), count=1).strip()
        if not text:
            return
        state.instructions.append(Instruction(step_number=state.next_step, text=text))
        state.next_step += 1


def parse_recipe_text(text: str) -> ParsedRecipe:
    """Parse plain recipe text; raises EmptyTitle when no title is found."""
    return RuleBasedParser().parse(text)
