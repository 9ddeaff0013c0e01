"""Turn free ingredient text into structured requirements.

Covers dictated or typed lines ("2 cups of flour", "three cloves garlic") and
the cleanup applied to ingredient lists pulled from imported recipes.
"""

import re
from collections.abc import Iterable
from typing import Any

from pantryplanner.exceptions import IngredientParseError
from pantryplanner.logging_config import get_logger
from pantryplanner.normalize.units import (
    is_known_unit,
    parse_quantity_string,
    replace_vulgar_fractions,
)
from pantryplanner.schemas import RecipeIngredient

logger = get_logger(__name__)

DEFAULT_UNIT = "pcs"

# Speech-to-text output spells small numbers out
NUMBER_WORDS: dict[str, float] = {
    "a": 1.0,
    "an": 1.0,
    "one": 1.0,
    "two": 2.0,
    "three": 3.0,
    "four": 4.0,
    "five": 5.0,
    "six": 6.0,
    "seven": 7.0,
    "eight": 8.0,
    "nine": 9.0,
    "ten": 10.0,
    "eleven": 11.0,
    "twelve": 12.0,
    "dozen": 12.0,
    "half": 0.5,
    "quarter": 0.25,
}

_LEADING_QUANTITY = re.compile(
    r"^(\d+(?:[.,]\d+)?\s*-\s*\d+(?:[.,]\d+)?|\d+\s+\d+/\d+|\d+/\d+|\d+(?:[.,]\d+)?)\s*(.*)$"
)
_LIST_SEPARATORS = re.compile(r"[\n,;]+|\s+and\s+", re.IGNORECASE)


def _split_leading_quantity(text: str) -> tuple[float, str]:
    match = _LEADING_QUANTITY.match(text)
    if match:
        return parse_quantity_string(match.group(1)), match.group(2)

    first, _, rest = text.partition(" ")
    word = first.lower()
    if word in NUMBER_WORDS and rest:
        quantity = NUMBER_WORDS[word]
        # "half a cup", "a dozen eggs"
        second, _, remainder = rest.partition(" ")
        if second.lower() in ("a", "an") and remainder:
            rest = remainder
        elif second.lower() == "dozen" and remainder:
            quantity *= NUMBER_WORDS["dozen"]
            rest = remainder
        return quantity, rest

    return 1.0, text


def _split_leading_unit(text: str) -> tuple[str | None, str]:
    words = text.split()
    # Two-word units first ("fl oz", "fluid ounces")
    for size in (2, 1):
        if len(words) > size:
            candidate = " ".join(words[:size])
            if is_known_unit(candidate):
                return candidate.rstrip(".").lower(), " ".join(words[size:])
    return None, text


def parse_ingredient_line(text: str) -> RecipeIngredient:
    """
    Parse one line of ingredient text.

    Examples:
        "2 cups flour" -> flour, 2, "cups"
        "500g chicken breast" -> chicken breast, 500, "g"
        "three cloves of garlic" -> garlic, 3, "cloves"
        "salt" -> salt, 1, "pcs"

    Raises:
        IngredientParseError: If no ingredient name is left.
    """
    cleaned = replace_vulgar_fractions((text or "").strip())
    if not cleaned:
        raise IngredientParseError("Empty ingredient text")

    quantity, rest = _split_leading_quantity(cleaned)
    unit, name = _split_leading_unit(rest.strip())

    name = re.sub(r"^of\s+", "", name.strip(), flags=re.IGNORECASE).strip(" .")
    if not name:
        raise IngredientParseError(f"No ingredient name in {text!r}")

    return RecipeIngredient(name=name, quantity=quantity, unit=unit or DEFAULT_UNIT)


def parse_ingredient_text(text: str) -> list[RecipeIngredient]:
    """Parse a block of dictated or pasted text into ingredients.

    Parts are separated by newlines, commas, semicolons or the word "and";
    parts without an ingredient name are skipped.
    """
    parsed = []
    for part in _LIST_SEPARATORS.split(text or ""):
        if not part.strip():
            continue
        try:
            parsed.append(parse_ingredient_line(part))
        except IngredientParseError as e:
            logger.debug(f"Skipping ingredient text part: {e}")
    return parsed


def _clean_name(name: str) -> str:
    name = re.sub(r"^(to|and)\s+", "", name, flags=re.IGNORECASE)
    name = re.sub(r"^\d+\s*(pcs|pieces?)\s*", "", name, flags=re.IGNORECASE)
    name = re.sub(r"^[\d\s/.]+", "", name)
    return " ".join(name.split())


def _dedupe_key(name: str) -> str:
    return " ".join(re.sub(r"[^\w\s]", "", name.lower()).split())


def clean_imported_ingredients(
    ingredients: Iterable[RecipeIngredient | dict[str, Any]],
    limit: int = 20,
) -> list[RecipeIngredient]:
    """
    Tidy an ingredient list produced by a recipe importer.

    - Strips stray leading words ("to", "and"), counts ("2 pcs") and digits
    - Drops names shorter than two characters
    - Removes duplicates (case and punctuation insensitive)
    - Recovers a quantity/unit left inside the name when the importer
      fell back to "1 pcs"
    - Capitalises the name and keeps at most ``limit`` items
    """
    cleaned: list[RecipeIngredient] = []
    seen: set[str] = set()

    for raw in ingredients:
        ingredient = raw if isinstance(raw, RecipeIngredient) else RecipeIngredient(**raw)

        name = _clean_name(ingredient.name)
        if len(name) < 2:
            continue

        key = _dedupe_key(name)
        if key in seen:
            continue
        seen.add(key)

        quantity = ingredient.quantity
        unit = ingredient.unit

        if quantity == 1 and unit == DEFAULT_UNIT:
            match = re.match(r"^(\d+(?:\.\d+)?(?:/\d+)?)\s*(\w+)?", ingredient.name)
            if match:
                quantity = parse_quantity_string(match.group(1))
                if match.group(2) and is_known_unit(match.group(2)):
                    unit = match.group(2).lower()

        cleaned.append(
            RecipeIngredient(
                name=name[0].upper() + name[1:].lower(),
                quantity=quantity,
                unit=unit,
            )
        )

    if len(cleaned) > limit:
        logger.debug(f"Imported ingredient list truncated from {len(cleaned)} to {limit}")
    return cleaned[:limit]
