"""Pytest configuration and shared fixtures."""

from datetime import date

import pytest

from pantryplanner.config import Settings
from pantryplanner.database import create_db_engine, init_db, make_session_factory
from pantryplanner.schemas import Ingredient, Recipe, RecipeIngredient, WeeklyMealPlan

# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "scenario: end-to-end planning scenarios")


# =============================================================================
# Helpers
# =============================================================================


def make_recipe(recipe_id: str, name: str, *ingredients: tuple[str, float, str], **kwargs) -> Recipe:
    """Build a recipe from (name, quantity, unit) tuples."""
    return Recipe(
        id=recipe_id,
        name=name,
        ingredients=[
            RecipeIngredient(name=ing_name, quantity=quantity, unit=unit)
            for ing_name, quantity, unit in ingredients
        ],
        **kwargs,
    )


def make_plan(*slots: tuple[str, str, str], today: date = date(2024, 5, 15)) -> WeeklyMealPlan:
    """Build a plan from (day, meal type, recipe id) tuples."""
    plan = WeeklyMealPlan.empty(today)
    for day, meal_type, recipe_id in slots:
        setattr(plan.day_meals(day), meal_type, recipe_id)
    return plan


# =============================================================================
# Domain Fixtures
# =============================================================================


@pytest.fixture
def pantry():
    """A small pantry."""
    return [
        Ingredient(id="ing-tomato", name="Tomatoes", quantity=2, unit="pcs", category="vegetables"),
        Ingredient(id="ing-pasta", name="Pasta", quantity=500, unit="g", category="grains"),
        Ingredient(id="ing-garlic", name="Garlic", quantity=4, unit="cloves", category="vegetables"),
        Ingredient(id="ing-milk", name="Milk", quantity=1, unit="l", category="dairy"),
    ]


@pytest.fixture
def recipes():
    """Recipes that share some ingredients."""
    return [
        make_recipe(
            "r-pasta",
            "Tomato Pasta",
            ("tomatoes", 3, "pcs"),
            ("pasta", 250, "g"),
            ("garlic", 2, "cloves"),
        ),
        make_recipe(
            "r-soup",
            "Tomato Soup",
            ("tomato sauce", 1, "cup"),
            ("garlic", 1, "clove"),
            ("cream", 100, "ml"),
        ),
        make_recipe(
            "r-pancakes",
            "Pancakes",
            ("flour", 2, "cups"),
            ("milk", 300, "ml"),
            ("egg", 2, "pcs"),
        ),
    ]


@pytest.fixture
def settings():
    """Settings isolated from the environment."""
    return Settings(_env_file=None, database_url="sqlite://")


@pytest.fixture
def session_factory():
    """Session factory on a fresh in-memory SQLite database."""
    engine = create_db_engine("sqlite://")
    init_db(engine)
    yield make_session_factory(engine)
    engine.dispose()
