"""Service layer: a planning session backed by the persistence gateway."""

from collections.abc import Callable
from datetime import date
from typing import TypeVar

from sqlalchemy.orm import Session, sessionmaker

from pantryplanner.categories import determine_ingredient_category
from pantryplanner.config import Settings, get_settings
from pantryplanner.database import create_db_engine, init_db, make_session_factory
from pantryplanner.logging_config import get_logger
from pantryplanner.matching import filter_recipes, suggest_ingredients
from pantryplanner.normalize.ingredients import clean_imported_ingredients, parse_ingredient_line
from pantryplanner.plan.projection import CookResult
from pantryplanner.plan.session import MealPlanSession
from pantryplanner.repository import PlannerRepository, PlannerState
from pantryplanner.schemas import (
    Ingredient,
    MealPlanHistoryEntry,
    Recipe,
    ShoppingList,
    WeeklyMealPlan,
)

logger = get_logger(__name__)

T = TypeVar("T")


class PlannerService:
    """
    Planner operations with persistence at fixed points.

    State is loaded once when the service is opened and saved after every
    operation that changes it.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        settings: Settings | None = None,
    ):
        self.session_factory = session_factory
        self.settings = settings or get_settings()

        with self.session_factory() as db:
            state = PlannerRepository(db).load_state()

        self.session = MealPlanSession(
            pantry=state.pantry,
            recipes=state.recipes,
            current_plan=state.current_plan,
            original_pantry=state.original_pantry,
            history=state.history,
            shopping_list=state.shopping_list,
            remove_empty_on_consume=self.settings.remove_empty_on_consume,
        )

    @classmethod
    def open(
        cls,
        database_url: str | None = None,
        settings: Settings | None = None,
    ) -> "PlannerService":
        """Open (and create if needed) the planner database."""
        settings = settings or get_settings()
        engine = create_db_engine(database_url or settings.database_url)
        init_db(engine)
        return cls(make_session_factory(engine), settings=settings)

    def state(self) -> PlannerState:
        original = self.session.original_pantry
        return PlannerState(
            pantry=self.session.pantry,
            recipes=self.session.recipes,
            current_plan=self.session.current_plan,
            original_pantry=original.to_list() if original is not None else None,
            history=self.session.history,
            shopping_list=self.session.shopping_list,
        )

    def save(self) -> None:
        with self.session_factory() as db:
            PlannerRepository(db).save_state(self.state())
            db.commit()

    def _mutate(self, operation: Callable[[], T]) -> T:
        # Nothing is written if the operation raises
        result = operation()
        self.save()
        return result

    # =========================================================================
    # Read-only views
    # =========================================================================

    @property
    def pantry(self) -> list[Ingredient]:
        return self.session.pantry

    @property
    def recipes(self) -> list[Recipe]:
        return self.session.recipes

    @property
    def current_plan(self) -> WeeklyMealPlan | None:
        return self.session.current_plan

    @property
    def history(self) -> list[MealPlanHistoryEntry]:
        return self.session.history

    @property
    def shopping_list(self) -> ShoppingList | None:
        return self.session.shopping_list

    def find_recipes(self, min_match: int = 0, search: str = "") -> list[tuple[Recipe, int]]:
        return filter_recipes(self.session.recipes, self.session.stock(), min_match, search)

    def suggest(self, term: str) -> list[str]:
        names = [ingredient.name for ingredient in self.session.pantry]
        names += [req.name for recipe in self.session.recipes for req in recipe.ingredients]
        return suggest_ingredients(term, names, limit=self.settings.suggestion_limit)

    # =========================================================================
    # Pantry and recipes
    # =========================================================================

    def add_ingredient(self, ingredient: Ingredient) -> Ingredient:
        return self._mutate(lambda: self.session.add_ingredient(ingredient))

    def add_ingredient_from_text(self, text: str, category: str | None = None) -> Ingredient:
        """Add a pantry item from free text such as a voice transcript."""
        parsed = parse_ingredient_line(text)
        ingredient = Ingredient(
            name=parsed.name,
            quantity=parsed.quantity,
            unit=parsed.unit,
            category=category or determine_ingredient_category(parsed.name),
        )
        return self.add_ingredient(ingredient)

    def remove_ingredient(self, ingredient_id: str) -> None:
        self._mutate(lambda: self.session.remove_ingredient(ingredient_id))

    def update_quantity(self, ingredient_id: str, quantity: float) -> None:
        self._mutate(lambda: self.session.update_quantity(ingredient_id, quantity))

    def add_recipe(self, recipe: Recipe) -> Recipe:
        return self._mutate(lambda: self.session.add_recipe(recipe))

    def import_recipe(self, recipe: Recipe) -> Recipe:
        """Add a recipe from an importer after tidying its ingredient list."""
        cleaned = recipe.model_copy(
            update={
                "ingredients": clean_imported_ingredients(
                    recipe.ingredients, limit=self.settings.import_ingredient_limit
                )
            }
        )
        logger.info(f"Imported recipe {cleaned.name!r} with {len(cleaned.ingredients)} ingredients")
        return self.add_recipe(cleaned)

    def delete_recipe(self, recipe_id: str) -> None:
        self._mutate(lambda: self.session.delete_recipe(recipe_id))

    def cook(self, recipe_id: str) -> CookResult:
        return self._mutate(lambda: self.session.cook(recipe_id))

    # =========================================================================
    # Plan lifecycle
    # =========================================================================

    def create_plan(self, today: date | None = None) -> WeeklyMealPlan:
        return self._mutate(lambda: self.session.create_plan(today))

    def assign_recipe(self, day: str, meal_type: str, recipe_id: str) -> WeeklyMealPlan:
        return self._mutate(lambda: self.session.assign_recipe(day, meal_type, recipe_id))

    def remove_recipe(self, day: str, meal_type: str) -> WeeklyMealPlan:
        return self._mutate(lambda: self.session.remove_recipe(day, meal_type))

    def consume(self) -> MealPlanHistoryEntry:
        return self._mutate(self.session.consume)

    def cancel(self) -> None:
        self._mutate(self.session.cancel)

    def delete_history(self, entry_id: str) -> bool:
        return self._mutate(lambda: self.session.delete_history(entry_id))

    def clear_history(self) -> None:
        self._mutate(self.session.clear_history)

    # =========================================================================
    # Shopping list
    # =========================================================================

    def generate_shopping_list(self) -> ShoppingList:
        return self._mutate(self.session.generate_shopping_list)

    def toggle_item(self, item_id: str) -> ShoppingList:
        return self._mutate(lambda: self.session.toggle_item(item_id))

    def add_item_to_pantry(self, item_id: str, quantity: float) -> ShoppingList:
        return self._mutate(lambda: self.session.add_item_to_pantry(item_id, quantity))

    def clear_checked_items(self) -> ShoppingList:
        return self._mutate(self.session.clear_checked_items)

    def complete_shopping(self) -> ShoppingList:
        return self._mutate(self.session.complete_shopping)
