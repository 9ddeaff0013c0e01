"""Aggregation of recipe requirements across a meal plan."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from pantryplanner.logging_config import get_logger
from pantryplanner.matching import names_match
from pantryplanner.normalize.units import normalize_unit
from pantryplanner.schemas import Recipe, RecipeIngredient, WeeklyMealPlan

logger = get_logger(__name__)

BucketKey = tuple[str, str]


@dataclass
class RequirementBucket:
    """Total required quantity of one ingredient in one unit.

    ``name`` is the shortest contributing name (ties broken alphabetically),
    so the bucket key does not depend on which recipe came first. ``unit``
    keeps the spelling of the first contributing requirement.
    """

    name: str
    unit: str
    normalized_unit: str
    quantity: float = 0.0
    recipe_names: list[str] = field(default_factory=list)

    @property
    def key(self) -> BucketKey:
        return self.name.strip().lower(), self.normalized_unit

    def accepts(self, requirement: RecipeIngredient) -> bool:
        """Check if a requirement belongs in this bucket (same name, same unit)."""
        return self.normalized_unit == normalize_unit(requirement.unit) and names_match(
            self.name, requirement.name
        )

    def add(self, requirement: RecipeIngredient, recipe_name: str) -> None:
        name = requirement.name.strip()
        if _name_order(name) < _name_order(self.name):
            self.name = name
        self.quantity += requirement.quantity
        if recipe_name not in self.recipe_names:
            self.recipe_names.append(recipe_name)


def _name_order(name: str) -> tuple[int, str, str]:
    return len(name), name.lower(), name


def index_recipes(recipes: Iterable[Recipe]) -> dict[str, Recipe]:
    return {recipe.id: recipe for recipe in recipes}


def aggregate_requirements(
    recipes: Iterable[Recipe],
    recipe_ids: Iterable[str],
) -> dict[BucketKey, RequirementBucket]:
    """
    Sum required quantities over every planned recipe.

    Each recipe id is one occupied meal slot, so a recipe planned twice
    contributes twice. A requirement joins the first bucket whose name
    matches and whose normalized unit is identical; otherwise it opens a new
    bucket. Amounts in different units are never added together, so
    "2 cups" and "100 g" of flour stay two buckets.

    Args:
        recipes: Known recipes.
        recipe_ids: Recipe id of every occupied slot in the plan.

    Returns:
        Buckets keyed by (lower-cased name, normalized unit), in first-seen order.
    """
    by_id = index_recipes(recipes)
    buckets: list[RequirementBucket] = []

    for recipe_id in recipe_ids:
        recipe = by_id.get(recipe_id)
        if recipe is None:
            logger.warning(f"Planned recipe {recipe_id} no longer exists, skipping")
            continue

        for requirement in recipe.ingredients:
            if not requirement.name.strip():
                continue
            bucket = next((b for b in buckets if b.accepts(requirement)), None)
            if bucket is None:
                bucket = RequirementBucket(
                    name=requirement.name.strip(),
                    unit=requirement.unit,
                    normalized_unit=normalize_unit(requirement.unit),
                )
                buckets.append(bucket)
            bucket.add(requirement, recipe.name)

    logger.debug(f"Aggregated requirements into {len(buckets)} buckets")
    return {bucket.key: bucket for bucket in buckets}


def aggregate_plan(
    plan: WeeklyMealPlan,
    recipes: Sequence[Recipe],
) -> dict[BucketKey, RequirementBucket]:
    """Aggregate the requirements of every occupied slot in ``plan``."""
    return aggregate_requirements(recipes, plan.recipe_ids())
