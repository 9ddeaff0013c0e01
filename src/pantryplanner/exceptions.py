"""Exceptions raised by the planner outside of the matching engine.

The shopping-list engine itself never raises for unmatched names or unit
mismatches; these errors cover the stateful operations around it.
"""


class PlannerError(Exception):
    """Base class for planner errors."""


class NoActivePlanError(PlannerError):
    """An operation needs a meal plan but none is active."""

    def __init__(self, action: str = "this operation"):
        super().__init__(f"No active meal plan for {action}")


class PlanAlreadyActiveError(PlannerError):
    """A new plan was requested while another plan is still active."""

    def __init__(self, plan_id: str):
        self.plan_id = plan_id
        super().__init__(f"Meal plan {plan_id} is still active; consume or cancel it first")


class UnknownDayError(PlannerError):
    def __init__(self, day: str):
        self.day = day
        super().__init__(f"Unknown day of week: {day!r}")


class UnknownMealTypeError(PlannerError):
    def __init__(self, meal_type: str):
        self.meal_type = meal_type
        super().__init__(f"Unknown meal type: {meal_type!r}")


class RecipeNotFoundError(PlannerError):
    def __init__(self, recipe_id: str):
        self.recipe_id = recipe_id
        super().__init__(f"Recipe not found: {recipe_id}")


class IngredientNotFoundError(PlannerError):
    def __init__(self, ingredient_id: str):
        self.ingredient_id = ingredient_id
        super().__init__(f"Pantry ingredient not found: {ingredient_id}")


class ShoppingItemNotFoundError(PlannerError):
    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"Shopping list item not found: {item_id}")


class NoShoppingListError(PlannerError):
    def __init__(self) -> None:
        super().__init__("There is no current shopping list")


class IngredientParseError(PlannerError, ValueError):
    """Free text could not be turned into an ingredient."""
