"""Ingredient name matching between recipes and pantry stock.

Matching is deliberately permissive: two names match when they are equal or
one contains the other, ignoring case and surrounding whitespace. "tomato"
therefore matches "tomatoes", "cherry tomato" and "tomato sauce". Related but
distinct ingredients ("milk" / "coconut milk") are conflated as a result.
"""

from collections.abc import Iterable, Sequence

from rapidfuzz import fuzz, process

from pantryplanner.logging_config import get_logger
from pantryplanner.schemas import Ingredient, Recipe

logger = get_logger(__name__)


def _key(name: str) -> str:
    return name.strip().lower()


def names_match(a: str, b: str) -> bool:
    """
    Decide whether two free-text ingredient names refer to the same ingredient.

    Tiers, first success wins:
    1. Exact equality after trim + lowercase
    2. ``a`` is a substring of ``b``
    3. ``b`` is a substring of ``a``

    Blank names never match anything. Symmetric by construction.
    """
    key_a, key_b = _key(a), _key(b)
    if not key_a or not key_b:
        return False
    if key_a == key_b:
        return True
    return key_a in key_b or key_b in key_a


def find_pantry_match(name: str, pantry: Iterable[Ingredient]) -> Ingredient | None:
    """Return the first pantry item whose name matches, in pantry order."""
    for ingredient in pantry:
        if names_match(name, ingredient.name):
            return ingredient
    return None


def find_pantry_match_index(name: str, pantry: Sequence[Ingredient]) -> int | None:
    for index, ingredient in enumerate(pantry):
        if names_match(name, ingredient.name):
            return index
    return None


def recipe_match_percentage(recipe: Recipe, pantry: Iterable[Ingredient]) -> int:
    """
    Percentage of a recipe's ingredients that appear in the pantry by name.

    Quantities and units are ignored; this is a "could I cook this" hint,
    not a stock check. A recipe without ingredients scores 100.
    """
    if not recipe.ingredients:
        return 100

    pantry_names = [ingredient.name for ingredient in pantry]
    matched = sum(
        1
        for requirement in recipe.ingredients
        if any(names_match(requirement.name, name) for name in pantry_names)
    )
    return round(matched / len(recipe.ingredients) * 100)


def filter_recipes(
    recipes: Iterable[Recipe],
    pantry: Sequence[Ingredient],
    min_match: int = 0,
    search: str = "",
) -> list[tuple[Recipe, int]]:
    """
    Filter recipes by pantry coverage and a search term.

    Returns (recipe, match percentage) pairs, best coverage first. The search
    term is matched against name and description, case-insensitively.
    """
    term = _key(search)
    results = []
    for recipe in recipes:
        percentage = recipe_match_percentage(recipe, pantry)
        if percentage < min_match:
            continue
        if term and term not in recipe.name.lower() and term not in recipe.description.lower():
            continue
        results.append((recipe, percentage))

    results.sort(key=lambda pair: pair[1], reverse=True)
    return results


def suggest_ingredients(term: str, names: Iterable[str], limit: int = 8) -> list[str]:
    """
    Autocomplete ingredient names for a partially typed term.

    Candidates must contain the term; they are ranked by fuzzy similarity so
    "tomato" ranks "Tomatoes" above "Sun-dried tomato paste".
    """
    needle = _key(term)
    if not needle:
        return []

    candidates: dict[str, str] = {}
    for name in names:
        key = _key(name)
        if needle in key and key not in candidates:
            candidates[key] = name.strip()

    if not candidates:
        return []

    ranked = process.extract(
        needle,
        list(candidates),
        scorer=fuzz.ratio,
        limit=limit,
    )
    logger.debug(f"Suggestions for {term!r}: {len(ranked)} of {len(candidates)} candidates")
    return [candidates[key] for key, _score, _index in ranked]
