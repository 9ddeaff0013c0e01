"""Persistence gateway for planner state.

Every collection is stored as one JSON document under a fixed key, the same
keys the browser front end uses in its local storage, so exported documents
can be loaded as they are. State is read once when a session starts and
written back after each change; nothing else touches storage.
"""

from dataclasses import dataclass, field
from typing import Any, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from pantryplanner.logging_config import get_logger
from pantryplanner.models import StoredDocument
from pantryplanner.schemas import (
    Ingredient,
    MealPlanHistoryEntry,
    Recipe,
    ShoppingList,
    WeeklyMealPlan,
)

logger = get_logger(__name__)

PANTRY_KEY = "recipe-app-ingredients"
RECIPES_KEY = "recipe-app-recipes"
CURRENT_PLAN_KEY = "meal-planner-current"
ORIGINAL_PANTRY_KEY = "meal-planner-original-ingredients"
HISTORY_KEY = "meal-planner-history"
SHOPPING_LIST_KEY = "meal-planner-shopping-list"

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass
class PlannerState:
    """Everything a planning session needs, as loaded from storage."""

    pantry: list[Ingredient] = field(default_factory=list)
    recipes: list[Recipe] = field(default_factory=list)
    current_plan: WeeklyMealPlan | None = None
    original_pantry: list[Ingredient] | None = None
    history: list[MealPlanHistoryEntry] = field(default_factory=list)
    shopping_list: ShoppingList | None = None


class PlannerRepository:
    """Load and save planner documents through a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    # =========================================================================
    # Raw documents
    # =========================================================================

    def get_document(self, key: str) -> Any | None:
        result = self.db.execute(select(StoredDocument).where(StoredDocument.key == key))
        document = result.scalar_one_or_none()
        return document.value if document is not None else None

    def put_document(self, key: str, value: Any) -> None:
        document = self.db.get(StoredDocument, key)
        if document is None:
            self.db.add(StoredDocument(key=key, value=value))
        else:
            document.value = value
        self.db.flush()

    def delete_document(self, key: str) -> None:
        self.db.execute(delete(StoredDocument).where(StoredDocument.key == key))
        self.db.flush()

    # =========================================================================
    # Typed helpers
    # =========================================================================

    def _load_optional_list(self, key: str, model: type[ModelT]) -> list[ModelT] | None:
        value = self.get_document(key)
        if value is None:
            return None
        try:
            return TypeAdapter(list[model]).validate_python(value)  # type: ignore[valid-type]
        except ValidationError as e:
            logger.warning(f"Ignoring unreadable document {key!r}: {e.error_count()} errors")
            return None

    def _load_list(self, key: str, model: type[ModelT]) -> list[ModelT]:
        items = self._load_optional_list(key, model)
        return items if items is not None else []

    def _load_one(self, key: str, model: type[ModelT]) -> ModelT | None:
        value = self.get_document(key)
        if value is None:
            return None
        try:
            return model.model_validate(value)
        except ValidationError as e:
            logger.warning(f"Ignoring unreadable document {key!r}: {e.error_count()} errors")
            return None

    def _save_list(self, key: str, items: list[Any]) -> None:
        self.put_document(key, [item.to_document() for item in items])

    def _save_one(self, key: str, item: Any | None) -> None:
        if item is None:
            self.delete_document(key)
        else:
            self.put_document(key, item.to_document())

    # =========================================================================
    # Collections
    # =========================================================================

    def load_pantry(self) -> list[Ingredient]:
        return self._load_list(PANTRY_KEY, Ingredient)

    def save_pantry(self, pantry: list[Ingredient]) -> None:
        self._save_list(PANTRY_KEY, pantry)

    def load_recipes(self) -> list[Recipe]:
        return self._load_list(RECIPES_KEY, Recipe)

    def save_recipes(self, recipes: list[Recipe]) -> None:
        self._save_list(RECIPES_KEY, recipes)

    def load_current_plan(self) -> WeeklyMealPlan | None:
        return self._load_one(CURRENT_PLAN_KEY, WeeklyMealPlan)

    def save_current_plan(self, plan: WeeklyMealPlan | None) -> None:
        self._save_one(CURRENT_PLAN_KEY, plan)

    def load_original_pantry(self) -> list[Ingredient] | None:
        """The pantry baseline of the active plan; None when missing or unreadable."""
        return self._load_optional_list(ORIGINAL_PANTRY_KEY, Ingredient)

    def save_original_pantry(self, pantry: list[Ingredient] | None) -> None:
        if pantry is None:
            self.delete_document(ORIGINAL_PANTRY_KEY)
        else:
            self._save_list(ORIGINAL_PANTRY_KEY, pantry)

    def load_history(self) -> list[MealPlanHistoryEntry]:
        return self._load_list(HISTORY_KEY, MealPlanHistoryEntry)

    def save_history(self, history: list[MealPlanHistoryEntry]) -> None:
        self._save_list(HISTORY_KEY, history)

    def load_shopping_list(self) -> ShoppingList | None:
        return self._load_one(SHOPPING_LIST_KEY, ShoppingList)

    def save_shopping_list(self, shopping_list: ShoppingList | None) -> None:
        self._save_one(SHOPPING_LIST_KEY, shopping_list)

    # =========================================================================
    # Whole state
    # =========================================================================

    def load_state(self) -> PlannerState:
        """Load everything; missing documents come back empty."""
        state = PlannerState(
            pantry=self.load_pantry(),
            recipes=self.load_recipes(),
            current_plan=self.load_current_plan(),
            original_pantry=self.load_original_pantry(),
            history=self.load_history(),
            shopping_list=self.load_shopping_list(),
        )
        logger.debug(
            f"Loaded state: {len(state.pantry)} pantry items, {len(state.recipes)} recipes, "
            f"plan={'yes' if state.current_plan else 'no'}"
        )
        return state

    def save_state(self, state: PlannerState) -> None:
        self.save_pantry(state.pantry)
        self.save_recipes(state.recipes)
        self.save_current_plan(state.current_plan)
        self.save_original_pantry(state.original_pantry)
        self.save_history(state.history)
        self.save_shopping_list(state.shopping_list)
