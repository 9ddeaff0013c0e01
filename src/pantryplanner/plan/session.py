"""The meal plan lifecycle and its effect on the pantry.

A session holds the live pantry, the recipe book, at most one active weekly
plan, the pantry as it was when that plan was created, the history of
consumed plans and the current shopping list.

While a plan is active the live pantry shows a projection: the stock left
after cooking every planned meal. It is always recomputed from the baseline
taken at plan creation, never from the previous projection.
"""

from collections.abc import Callable, Iterable
from datetime import date

from pantryplanner.exceptions import (
    IngredientNotFoundError,
    NoActivePlanError,
    NoShoppingListError,
    PlanAlreadyActiveError,
    RecipeNotFoundError,
    ShoppingItemNotFoundError,
    UnknownDayError,
    UnknownMealTypeError,
)
from pantryplanner.logging_config import LoggingContext, get_logger
from pantryplanner.plan.projection import CookResult, PantrySnapshot, cook_recipe, project_pantry
from pantryplanner.plan.shopping_list import (
    add_item_to_pantry,
    build_shopping_list,
    clear_checked_items,
    complete_shopping_list,
    toggle_item,
)
from pantryplanner.schemas import (
    DAYS_OF_WEEK,
    MEAL_TYPES,
    DayMeals,
    Ingredient,
    MealPlanHistoryEntry,
    Recipe,
    ShoppingList,
    WeeklyMealPlan,
)

logger = get_logger(__name__)

PantryEdit = Callable[[list[Ingredient]], list[Ingredient]]


class MealPlanSession:
    """Stateful wrapper around the planning engine."""

    def __init__(
        self,
        pantry: Iterable[Ingredient] = (),
        recipes: Iterable[Recipe] = (),
        current_plan: WeeklyMealPlan | None = None,
        original_pantry: Iterable[Ingredient] | None = None,
        history: Iterable[MealPlanHistoryEntry] = (),
        shopping_list: ShoppingList | None = None,
        remove_empty_on_consume: bool = True,
    ):
        self.pantry: list[Ingredient] = list(pantry)
        self.recipes: list[Recipe] = list(recipes)
        self.current_plan = current_plan
        self.history: list[MealPlanHistoryEntry] = list(history)
        self.shopping_list = shopping_list
        self.remove_empty_on_consume = remove_empty_on_consume

        self.original_pantry: PantrySnapshot | None = None
        if current_plan is not None:
            if original_pantry is None:
                # Stored state without a baseline; the live pantry is the best we have
                logger.warning(
                    f"Active plan {current_plan.id} has no pantry baseline, "
                    "using the current pantry"
                )
                original_pantry = self.pantry
            self.original_pantry = PantrySnapshot(original_pantry)

    # =========================================================================
    # Lookups
    # =========================================================================

    def get_recipe(self, recipe_id: str) -> Recipe:
        for recipe in self.recipes:
            if recipe.id == recipe_id:
                return recipe
        raise RecipeNotFoundError(recipe_id)

    def stock(self) -> list[Ingredient]:
        """The real pantry: the baseline while a plan is active, else the live pantry."""
        if self.original_pantry is not None:
            return self.original_pantry.to_list()
        return list(self.pantry)

    def _require_plan(self, action: str) -> WeeklyMealPlan:
        if self.current_plan is None:
            raise NoActivePlanError(action)
        return self.current_plan

    def _require_baseline(self, action: str) -> PantrySnapshot:
        if self.original_pantry is None:
            raise NoActivePlanError(action)
        return self.original_pantry

    def _require_list(self) -> ShoppingList:
        if self.shopping_list is None:
            raise NoShoppingListError()
        return self.shopping_list

    def _day_meals(self, plan: WeeklyMealPlan, day: str, meal_type: str) -> DayMeals:
        if meal_type not in MEAL_TYPES:
            raise UnknownMealTypeError(meal_type)
        day_name = day.strip().capitalize()
        day_meals = plan.day_meals(day_name) if day_name in DAYS_OF_WEEK else None
        if day_meals is None:
            raise UnknownDayError(day)
        return day_meals

    # =========================================================================
    # Plan lifecycle
    # =========================================================================

    def create_plan(self, today: date | None = None) -> WeeklyMealPlan:
        """Start an empty plan for this week and snapshot the pantry."""
        if self.current_plan is not None:
            raise PlanAlreadyActiveError(self.current_plan.id)

        plan = WeeklyMealPlan.empty(today)
        self.current_plan = plan
        self.original_pantry = PantrySnapshot(self.pantry)
        self.shopping_list = None

        logger.info(f"Created meal plan {plan.id} for week starting {plan.week_starting}")
        return plan

    def assign_recipe(self, day: str, meal_type: str, recipe_id: str) -> WeeklyMealPlan:
        plan = self._require_plan("assigning a recipe")
        day_meals = self._day_meals(plan, day, meal_type)
        recipe = self.get_recipe(recipe_id)

        setattr(day_meals, meal_type, recipe.id)
        self._reproject()

        logger.debug(f"{day_meals.day} {meal_type}: {recipe.name}")
        return plan

    def remove_recipe(self, day: str, meal_type: str) -> WeeklyMealPlan:
        plan = self._require_plan("removing a recipe")
        day_meals = self._day_meals(plan, day, meal_type)

        setattr(day_meals, meal_type, None)
        self._reproject()
        return plan

    def _reproject(self) -> None:
        plan = self._require_plan("projecting the pantry")
        baseline = self._require_baseline("projecting the pantry")
        self.pantry = project_pantry(baseline, plan, self.recipes)

    def consume(self) -> MealPlanHistoryEntry:
        """Cook the whole plan: keep the projection and move the plan to history."""
        plan = self._require_plan("consuming")
        baseline = self._require_baseline("consuming")

        with LoggingContext(plan_id=plan.id):
            pantry = project_pantry(baseline, plan, self.recipes)
            if self.remove_empty_on_consume:
                pantry = [ingredient for ingredient in pantry if ingredient.quantity > 0]

            entry = MealPlanHistoryEntry(
                weekly_plan=plan.model_copy(update={"is_consumed": True}, deep=True)
            )
            self.history.insert(0, entry)
            self.pantry = pantry
            self._clear_plan()

            logger.info(f"Consumed meal plan, pantry now has {len(pantry)} items")
        return entry

    def cancel(self) -> None:
        """Discard the plan and restore the pantry baseline."""
        plan = self._require_plan("cancelling")
        baseline = self._require_baseline("cancelling")

        self.pantry = baseline.to_list()
        self._clear_plan()
        logger.info(f"Cancelled meal plan {plan.id}, pantry restored")

    def _clear_plan(self) -> None:
        self.current_plan = None
        self.original_pantry = None
        self.shopping_list = None

    # =========================================================================
    # Pantry and recipes
    # =========================================================================

    def _edit_stock(self, edit: PantryEdit) -> None:
        """Apply an edit to the real pantry; with a plan active that is the baseline."""
        if self.original_pantry is None:
            self.pantry = edit(list(self.pantry))
            return
        self.original_pantry = PantrySnapshot(edit(self.original_pantry.to_list()))
        self._reproject()

    def add_ingredient(self, ingredient: Ingredient) -> Ingredient:
        self._edit_stock(lambda pantry: [*pantry, ingredient.model_copy(deep=True)])
        return ingredient

    def remove_ingredient(self, ingredient_id: str) -> None:
        def remove(pantry: list[Ingredient]) -> list[Ingredient]:
            remaining = [ingredient for ingredient in pantry if ingredient.id != ingredient_id]
            if len(remaining) == len(pantry):
                raise IngredientNotFoundError(ingredient_id)
            return remaining

        self._edit_stock(remove)

    def update_quantity(self, ingredient_id: str, quantity: float) -> None:
        if quantity < 0:
            raise ValueError(f"Quantity cannot be negative: {quantity}")

        def update(pantry: list[Ingredient]) -> list[Ingredient]:
            for index, ingredient in enumerate(pantry):
                if ingredient.id == ingredient_id:
                    pantry[index] = ingredient.model_copy(update={"quantity": quantity})
                    return pantry
            raise IngredientNotFoundError(ingredient_id)

        self._edit_stock(update)

    def add_recipe(self, recipe: Recipe) -> Recipe:
        self.recipes.append(recipe)
        return recipe

    def delete_recipe(self, recipe_id: str) -> None:
        recipe = self.get_recipe(recipe_id)
        self.recipes.remove(recipe)
        if self.current_plan is not None:
            self._reproject()

    def cook(self, recipe_id: str) -> CookResult:
        """Cook one recipe from the real pantry, outside of the plan."""
        recipe = self.get_recipe(recipe_id)
        result = cook_recipe(self.stock(), recipe)
        if result.cooked:
            self._edit_stock(lambda _pantry: result.pantry)
        return result

    # =========================================================================
    # Shopping list
    # =========================================================================

    def generate_shopping_list(self) -> ShoppingList:
        """Build and keep a shopping list for the active plan.

        Requirements are compared with the real pantry, not the projection,
        since the projection already spends the stock on the same meals.
        """
        plan = self._require_plan("generating a shopping list")
        self.shopping_list = build_shopping_list(plan, self.recipes, self.stock())
        return self.shopping_list

    def toggle_item(self, item_id: str) -> ShoppingList:
        self.shopping_list = toggle_item(self._require_list(), item_id)
        return self.shopping_list

    def add_item_to_pantry(self, item_id: str, quantity: float) -> ShoppingList:
        """Put a bought item in the pantry and tick it off the list."""
        shopping_list = self._require_list()
        item = shopping_list.get_item(item_id)
        if item is None:
            raise ShoppingItemNotFoundError(item_id)

        with LoggingContext(list_id=shopping_list.id):
            self._edit_stock(lambda pantry: add_item_to_pantry(pantry, item, quantity))
            if not item.is_checked:
                self.shopping_list = toggle_item(shopping_list, item_id)
            logger.info(f"Added bought {item.ingredient_name!r} ({quantity} {item.unit}) to pantry")
        return self.shopping_list

    def clear_checked_items(self) -> ShoppingList:
        self.shopping_list = clear_checked_items(self._require_list())
        return self.shopping_list

    def complete_shopping(self) -> ShoppingList:
        """Finish shopping; the completed list is returned and no longer kept."""
        completed = complete_shopping_list(self._require_list())
        self.shopping_list = None
        with LoggingContext(list_id=completed.id):
            logger.info(f"Shopping list completed with {len(completed.items)} items left")
        return completed

    # =========================================================================
    # History
    # =========================================================================

    def delete_history(self, entry_id: str) -> bool:
        before = len(self.history)
        self.history = [entry for entry in self.history if entry.id != entry_id]
        return len(self.history) < before

    def clear_history(self) -> None:
        self.history = []
