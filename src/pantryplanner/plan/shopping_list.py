"""Shopping list generation from meal plans."""

from collections.abc import Sequence

from pantryplanner.categories import determine_ingredient_category
from pantryplanner.exceptions import ShoppingItemNotFoundError
from pantryplanner.logging_config import LoggingContext, get_logger
from pantryplanner.plan.aggregation import aggregate_plan
from pantryplanner.plan.deficit import compute_deficit
from pantryplanner.schemas import (
    Ingredient,
    Recipe,
    ShoppingList,
    ShoppingListItem,
    WeeklyMealPlan,
    utcnow,
)

logger = get_logger(__name__)


def build_shopping_list(
    plan: WeeklyMealPlan,
    recipes: Sequence[Recipe],
    pantry: Sequence[Ingredient],
) -> ShoppingList:
    """
    Build the list of ingredients to buy for a meal plan.

    Steps:
    1. Aggregate requirements of every planned recipe per (name, unit)
    2. Diff each bucket against pantry stock
    3. Emit an item only where something is missing

    Items fully covered by the pantry are left out rather than listed with a
    zero quantity. The result is a snapshot: later pantry changes do not
    update it.
    """
    with LoggingContext(plan_id=plan.id):
        buckets = aggregate_plan(plan, recipes)
        shopping_list = ShoppingList(week_plan_id=plan.id)

        for bucket in buckets.values():
            deficit = compute_deficit(bucket.name, bucket.quantity, bucket.unit, pantry)
            if deficit.missing_quantity <= 0:
                continue

            shopping_list.items.append(
                ShoppingListItem(
                    ingredient_name=bucket.name,
                    required_quantity=bucket.quantity,
                    unit=bucket.unit,
                    available_quantity=deficit.available_quantity,
                    missing_quantity=deficit.missing_quantity,
                    recipe_names=list(bucket.recipe_names),
                )
            )

        logger.info(
            f"Generated shopping list: {len(shopping_list.items)} items "
            f"from {len(buckets)} requirements",
            extra={"items": len(shopping_list.items), "requirements": len(buckets)},
        )
        return shopping_list


def toggle_item(shopping_list: ShoppingList, item_id: str) -> ShoppingList:
    """Return a copy of the list with one item's check state flipped."""
    if shopping_list.get_item(item_id) is None:
        raise ShoppingItemNotFoundError(item_id)

    items = [
        item.model_copy(update={"is_checked": not item.is_checked}) if item.id == item_id else item
        for item in shopping_list.items
    ]
    return shopping_list.model_copy(update={"items": items})


def clear_checked_items(shopping_list: ShoppingList) -> ShoppingList:
    """Return a copy of the list without checked items."""
    items = [item for item in shopping_list.items if not item.is_checked]
    return shopping_list.model_copy(update={"items": items})


def complete_shopping_list(shopping_list: ShoppingList) -> ShoppingList:
    """Return a copy of the list stamped as completed."""
    return shopping_list.model_copy(update={"date_completed": utcnow()})


def add_item_to_pantry(
    pantry: Sequence[Ingredient],
    item: ShoppingListItem,
    quantity: float,
) -> list[Ingredient]:
    """
    Record a bought shopping item in the pantry.

    An existing pantry item with exactly the same name (ignoring case) has its
    quantity increased; otherwise a new ingredient is added in the item's unit
    with a guessed category. Returns a new pantry list.
    """
    if quantity < 0:
        raise ValueError(f"Cannot add a negative quantity ({quantity}) to the pantry")

    name = item.ingredient_name.strip().lower()
    updated = list(pantry)

    for index, ingredient in enumerate(updated):
        if ingredient.name.strip().lower() == name:
            updated[index] = ingredient.model_copy(
                update={"quantity": ingredient.quantity + quantity}
            )
            logger.debug(f"Topped up {ingredient.name!r} by {quantity}")
            return updated

    updated.append(
        Ingredient(
            name=item.ingredient_name,
            quantity=quantity,
            unit=item.unit,
            category=determine_ingredient_category(item.ingredient_name),
        )
    )
    logger.debug(f"Added {item.ingredient_name!r} to pantry")
    return updated
