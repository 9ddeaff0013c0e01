"""Shopping list generation and meal plan logic."""

from pantryplanner.plan.aggregation import (
    RequirementBucket,
    aggregate_plan,
    aggregate_requirements,
)
from pantryplanner.plan.deficit import Deficit, compute_deficit
from pantryplanner.plan.projection import (
    CookResult,
    PantrySnapshot,
    cook_recipe,
    project_pantry,
)
from pantryplanner.plan.session import MealPlanSession
from pantryplanner.plan.shopping_list import (
    add_item_to_pantry,
    build_shopping_list,
    clear_checked_items,
    complete_shopping_list,
    toggle_item,
)

__all__ = [
    "CookResult",
    "Deficit",
    "MealPlanSession",
    "PantrySnapshot",
    "RequirementBucket",
    "add_item_to_pantry",
    "aggregate_plan",
    "aggregate_requirements",
    "build_shopping_list",
    "clear_checked_items",
    "complete_shopping_list",
    "compute_deficit",
    "cook_recipe",
    "project_pantry",
    "toggle_item",
]
