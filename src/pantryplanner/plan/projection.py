"""Projected pantry stock for a meal plan, and cooking single recipes."""

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field

from pantryplanner.logging_config import get_logger
from pantryplanner.matching import find_pantry_match_index
from pantryplanner.normalize.units import normalize_unit
from pantryplanner.plan.aggregation import index_recipes
from pantryplanner.schemas import Ingredient, Recipe, RecipeIngredient, WeeklyMealPlan

logger = get_logger(__name__)


class PantrySnapshot:
    """
    Frozen copy of the pantry taken when a meal plan is created.

    Items are deep-copied on the way in and on the way out, so neither later
    edits to the live pantry nor edits to a returned list can change the
    baseline.
    """

    __slots__ = ("_items",)

    def __init__(self, pantry: Iterable[Ingredient]):
        self._items: tuple[Ingredient, ...] = tuple(
            ingredient.model_copy(deep=True) for ingredient in pantry
        )

    def __iter__(self) -> Iterator[Ingredient]:
        return (ingredient.model_copy(deep=True) for ingredient in self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PantrySnapshot):
            return NotImplemented
        return self._items == other._items

    def __repr__(self) -> str:
        return f"PantrySnapshot({len(self._items)} items)"

    def to_list(self) -> list[Ingredient]:
        return list(self)


def _deduct(
    pantry: list[Ingredient],
    requirement: RecipeIngredient,
    respect_units: bool = True,
) -> bool:
    """Subtract one requirement in place if the first matching item covers it."""
    index = find_pantry_match_index(requirement.name, pantry)
    if index is None:
        return False

    item = pantry[index]
    if respect_units and normalize_unit(item.unit) != normalize_unit(requirement.unit):
        return False
    if item.quantity < requirement.quantity:
        return False

    pantry[index] = item.model_copy(
        update={"quantity": max(0.0, item.quantity - requirement.quantity)}
    )
    return True


def project_pantry(
    baseline: PantrySnapshot | Sequence[Ingredient],
    plan: WeeklyMealPlan,
    recipes: Sequence[Recipe],
    respect_units: bool = False,
) -> list[Ingredient]:
    """
    Project the pantry as if every meal in the plan had been cooked.

    For each planned recipe and requirement, the first matching pantry item
    is reduced by the required quantity when it holds enough; otherwise it is
    left unchanged. Units are not compared unless ``respect_units`` is set,
    so "2 cups" of flour is taken from "500 g" of flour as 2. Quantities
    never go below zero. The baseline is not modified.

    ``baseline`` must be the pantry as it was when the plan was created.
    Feeding a previous projection back in deducts every meal again.
    """
    projected = [ingredient.model_copy(deep=True) for ingredient in baseline]
    by_id = index_recipes(recipes)
    deducted = 0

    for recipe_id in plan.recipe_ids():
        recipe = by_id.get(recipe_id)
        if recipe is None:
            logger.warning(f"Planned recipe {recipe_id} no longer exists, skipping")
            continue
        for requirement in recipe.ingredients:
            if _deduct(projected, requirement, respect_units):
                deducted += 1

    logger.debug(f"Projected pantry for plan {plan.id}: {deducted} deductions")
    return projected


@dataclass
class CookResult:
    """Outcome of cooking one recipe from the pantry."""

    cooked: bool
    pantry: list[Ingredient]
    missing: list[str] = field(default_factory=list)


def cook_recipe(pantry: Sequence[Ingredient], recipe: Recipe) -> CookResult:
    """
    Cook a recipe outside of a meal plan.

    All or nothing: every requirement needs a matching pantry item in the same
    unit with enough stock, otherwise nothing is deducted and the blocking
    ingredient names are reported.
    """
    working = [ingredient.model_copy(deep=True) for ingredient in pantry]
    missing = [
        requirement.name
        for requirement in recipe.ingredients
        if not _deduct(working, requirement)
    ]

    if missing:
        logger.info(f"Cannot cook {recipe.name!r}: missing {', '.join(missing)}")
        return CookResult(cooked=False, pantry=list(pantry), missing=missing)

    logger.info(f"Cooked {recipe.name!r}")
    return CookResult(cooked=True, pantry=working)
