"""Pantry, recipe, meal plan and shopping list schemas.

Models use snake_case attributes and camelCase JSON keys, so documents written
by the browser front end (``expiryDate``, ``weekStarting``, ``recipeNames``...)
validate unchanged.
"""

import uuid
from collections.abc import Iterator
from datetime import date, datetime, timedelta, timezone
from typing import Any, Literal, get_args

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

MealType = Literal["breakfast", "snack", "lunch", "dinner"]
DayOfWeek = Literal["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

MEAL_TYPES: tuple[str, ...] = get_args(MealType)
DAYS_OF_WEEK: tuple[str, ...] = get_args(DayOfWeek)


def new_id() -> str:
    """Return a fresh opaque identifier."""
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def week_start_date(today: date | None = None) -> date:
    """Return the Monday of the week containing ``today``."""
    today = today or date.today()
    return today - timedelta(days=today.weekday())


class CamelModel(BaseModel):
    """Base model serialised with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_document(self) -> dict[str, Any]:
        """Dump to a JSON-compatible dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Ingredient(CamelModel):
    """An item of pantry stock."""

    id: str = Field(default_factory=new_id)
    name: str
    quantity: float = Field(ge=0)
    unit: str = ""
    category: str = "other"
    expiry_date: date | None = None
    date_added: datetime = Field(default_factory=utcnow)

    @field_validator("expiry_date", mode="before")
    @classmethod
    def _blank_expiry_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class RecipeIngredient(CamelModel):
    """A recipe's requirement for a named ingredient."""

    name: str
    quantity: float = Field(ge=0)
    unit: str = ""


class Recipe(CamelModel):
    """A stored recipe."""

    id: str = Field(default_factory=new_id)
    name: str
    description: str = ""
    ingredients: list[RecipeIngredient] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)
    cooking_time: int = 0
    servings: int = 1
    source: str = ""
    date_added: datetime = Field(default_factory=utcnow)


class DayMeals(CamelModel):
    """The meal slots of one day in a weekly plan; each slot holds a recipe id."""

    id: str = Field(default_factory=new_id)
    day: DayOfWeek
    breakfast: str | None = None
    snack: str | None = None
    lunch: str | None = None
    dinner: str | None = None

    def recipe_ids(self) -> list[str]:
        """Recipe ids of the occupied slots, in meal order."""
        return [recipe_id for meal in MEAL_TYPES if (recipe_id := getattr(self, meal))]


class WeeklyMealPlan(CamelModel):
    """A week of planned meals."""

    id: str = Field(default_factory=new_id)
    week_starting: date
    meals: list[DayMeals]
    is_consumed: bool = False
    date_created: datetime = Field(default_factory=utcnow)

    @classmethod
    def empty(cls, today: date | None = None) -> "WeeklyMealPlan":
        """Create a plan for the current week with every slot free."""
        return cls(
            week_starting=week_start_date(today),
            meals=[DayMeals(day=day) for day in DAYS_OF_WEEK],
        )

    def day_meals(self, day: str) -> DayMeals | None:
        for meals in self.meals:
            if meals.day == day:
                return meals
        return None

    def recipe_ids(self) -> Iterator[str]:
        """Yield the recipe id of every occupied slot, day by day.

        A recipe planned twice is yielded twice.
        """
        for meals in self.meals:
            yield from meals.recipe_ids()


class MealPlanHistoryEntry(CamelModel):
    """A consumed plan kept for reference."""

    id: str = Field(default_factory=new_id)
    weekly_plan: WeeklyMealPlan
    date_consumed: datetime = Field(default_factory=utcnow)


class ShoppingListItem(CamelModel):
    """One missing ingredient on a shopping list."""

    id: str = Field(default_factory=new_id)
    ingredient_name: str
    required_quantity: float
    unit: str
    available_quantity: float = 0.0
    missing_quantity: float
    recipe_names: list[str] = Field(default_factory=list)
    is_checked: bool = False
    date_added: datetime = Field(default_factory=utcnow)


class ShoppingList(CamelModel):
    """A frozen snapshot of what to buy for a meal plan."""

    id: str = Field(default_factory=new_id)
    week_plan_id: str
    items: list[ShoppingListItem] = Field(default_factory=list)
    date_created: datetime = Field(default_factory=utcnow)
    date_completed: datetime | None = None

    def get_item(self, item_id: str) -> ShoppingListItem | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None
