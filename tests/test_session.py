"""Tests for the meal plan lifecycle."""

from datetime import date

import pytest

from pantryplanner.exceptions import (
    IngredientNotFoundError,
    NoActivePlanError,
    NoShoppingListError,
    PlanAlreadyActiveError,
    RecipeNotFoundError,
    UnknownDayError,
    UnknownMealTypeError,
)
from pantryplanner.plan import MealPlanSession
from pantryplanner.schemas import Ingredient

from .conftest import make_recipe


def quantities(pantry):
    return {ingredient.name: ingredient.quantity for ingredient in pantry}


@pytest.fixture
def session(pantry, recipes):
    return MealPlanSession(pantry=pantry, recipes=recipes)


@pytest.fixture
def planned(session):
    """A session with pasta planned for Monday dinner."""
    session.create_plan(today=date(2024, 5, 15))
    session.assign_recipe("Monday", "dinner", "r-pasta")
    return session


class TestPlanLifecycle:
    """Tests for creating, editing, consuming and cancelling a plan."""

    def test_create_plan(self, session):
        """Test a new plan starts on Monday with empty slots and snapshots the pantry."""
        plan = session.create_plan(today=date(2024, 5, 15))

        assert plan.week_starting == date(2024, 5, 13)
        assert [meals.day for meals in plan.meals][0] == "Monday"
        assert list(plan.recipe_ids()) == []
        assert session.original_pantry is not None
        assert len(session.original_pantry) == 4

    def test_create_while_active(self, planned):
        """Test a second plan cannot replace an active one."""
        with pytest.raises(PlanAlreadyActiveError):
            planned.create_plan()

    def test_assign_projects_pantry(self, planned):
        """Test assigning a recipe shows the projected pantry."""
        assert quantities(planned.pantry)["Pasta"] == 250
        assert quantities(planned.stock())["Pasta"] == 500

    def test_projection_recomputed_from_baseline(self, planned):
        """Test adding meals never deducts earlier meals twice."""
        planned.assign_recipe("Tuesday", "lunch", "r-soup")
        planned.assign_recipe("Wednesday", "dinner", "r-pasta")

        assert quantities(planned.pantry)["Pasta"] == 0
        # 2 + 1 + 2 cloves out of 4: the third deduction does not fit
        assert quantities(planned.pantry)["Garlic"] == 1

    def test_remove_restores_projection(self, planned):
        """Test clearing the only slot brings the pantry back to the baseline."""
        planned.remove_recipe("monday", "dinner")
        assert quantities(planned.pantry) == quantities(planned.stock())

    def test_day_names_are_case_insensitive(self, planned):
        """Test 'tuesday' is accepted."""
        plan = planned.assign_recipe("tuesday", "lunch", "r-soup")
        assert plan.day_meals("Tuesday").lunch == "r-soup"

    def test_invalid_slot(self, planned):
        """Test unknown days, meal types and recipes are rejected."""
        with pytest.raises(UnknownDayError):
            planned.assign_recipe("Someday", "lunch", "r-soup")
        with pytest.raises(UnknownMealTypeError):
            planned.assign_recipe("Monday", "brunch", "r-soup")
        with pytest.raises(RecipeNotFoundError):
            planned.assign_recipe("Monday", "lunch", "nope")

    def test_requires_plan(self, session):
        """Test plan operations need an active plan."""
        with pytest.raises(NoActivePlanError):
            session.assign_recipe("Monday", "dinner", "r-pasta")
        with pytest.raises(NoActivePlanError):
            session.consume()
        with pytest.raises(NoActivePlanError):
            session.cancel()
        with pytest.raises(NoActivePlanError):
            session.generate_shopping_list()

    def test_plan_without_snapshot_is_rejected(self, planned):
        """Test a plan whose baseline went missing raises instead of guessing."""
        planned.original_pantry = None

        with pytest.raises(NoActivePlanError):
            planned.assign_recipe("Tuesday", "lunch", "r-soup")
        with pytest.raises(NoActivePlanError):
            planned.consume()
        with pytest.raises(NoActivePlanError):
            planned.cancel()

    def test_consume(self, planned):
        """Test consuming keeps the projection and records history."""
        plan_id = planned.current_plan.id

        entry = planned.consume()

        assert planned.current_plan is None
        assert planned.original_pantry is None
        assert planned.shopping_list is None
        assert entry.weekly_plan.id == plan_id
        assert entry.weekly_plan.is_consumed
        assert planned.history == [entry]
        assert quantities(planned.pantry)["Pasta"] == 250

    def test_consume_removes_empty_items(self, session):
        """Test used-up ingredients leave the pantry on consume."""
        session.create_plan()
        session.assign_recipe("Monday", "dinner", "r-pasta")
        session.assign_recipe("Tuesday", "dinner", "r-pasta")

        session.consume()

        assert "Pasta" not in quantities(session.pantry)
        assert "Garlic" not in quantities(session.pantry)

    def test_consume_can_keep_empty_items(self, pantry, recipes):
        """Test empty items stay when configured to."""
        session = MealPlanSession(pantry=pantry, recipes=recipes, remove_empty_on_consume=False)
        session.create_plan()
        session.assign_recipe("Monday", "dinner", "r-pasta")
        session.assign_recipe("Tuesday", "dinner", "r-pasta")

        session.consume()

        assert quantities(session.pantry)["Pasta"] == 0

    def test_history_newest_first(self, session):
        """Test consumed plans are prepended."""
        session.create_plan()
        first = session.consume()
        session.create_plan()
        second = session.consume()

        assert session.history == [second, first]
        assert session.delete_history(first.id)
        assert not session.delete_history(first.id)
        session.clear_history()
        assert session.history == []

    def test_cancel_restores_baseline(self, planned, pantry):
        """Test cancelling brings back the pantry from plan creation."""
        planned.cancel()

        assert planned.current_plan is None
        assert quantities(planned.pantry) == quantities(pantry)

    def test_restored_plan_without_baseline(self, pantry, recipes):
        """Test a stored plan without a baseline falls back to the pantry."""
        source = MealPlanSession(pantry=pantry, recipes=recipes)
        plan = source.create_plan()

        session = MealPlanSession(pantry=pantry, recipes=recipes, current_plan=plan)

        assert session.original_pantry is not None
        assert quantities(session.stock()) == quantities(pantry)


class TestPantryEdits:
    """Tests for pantry edits with and without an active plan."""

    def test_add_and_remove_without_plan(self, session):
        """Test edits apply to the live pantry."""
        salt = session.add_ingredient(Ingredient(name="Salt", quantity=1, unit="pinch"))
        assert "Salt" in quantities(session.pantry)

        session.remove_ingredient(salt.id)
        assert "Salt" not in quantities(session.pantry)

    def test_edits_during_plan_go_to_baseline(self, planned):
        """Test stock added mid-plan is part of the baseline and re-projected."""
        planned.add_ingredient(Ingredient(name="Pasta", quantity=1, unit="kg"))
        planned.update_quantity("ing-tomato", 10)

        assert quantities(planned.stock())["Tomatoes"] == 10
        assert quantities(planned.pantry)["Tomatoes"] == 7

        planned.cancel()
        assert quantities(planned.pantry)["Tomatoes"] == 10
        assert len(planned.pantry) == 5

    def test_unknown_ingredient(self, session):
        """Test editing a missing ingredient raises."""
        with pytest.raises(IngredientNotFoundError):
            session.remove_ingredient("nope")
        with pytest.raises(IngredientNotFoundError):
            session.update_quantity("nope", 1)

    def test_negative_quantity(self, session):
        """Test negative stock is rejected."""
        with pytest.raises(ValueError):
            session.update_quantity("ing-tomato", -1)

    def test_delete_planned_recipe_reprojects(self, planned):
        """Test deleting a planned recipe drops its deductions."""
        planned.delete_recipe("r-pasta")
        assert quantities(planned.pantry)["Pasta"] == 500

    def test_cook_short_of_stock(self, planned):
        """Test a recipe the pantry cannot cover is not cooked."""
        result = planned.cook("r-soup")

        assert not result.cooked
        assert result.missing == ["tomato sauce", "cream"]
        assert quantities(planned.stock())["Garlic"] == 4

    def test_cook_during_plan(self, planned):
        """Test cooking outside the plan spends real stock, then re-projects."""
        planned.add_recipe(make_recipe("r-oil", "Garlic Oil", ("garlic", 1, "clove")))

        result = planned.cook("r-oil")

        assert result.cooked
        assert quantities(planned.stock())["Garlic"] == 3
        assert quantities(planned.pantry)["Garlic"] == 1


class TestShopping:
    """Tests for the shopping list held by a session."""

    def test_generate_uses_real_stock(self, planned):
        """Test the list compares with the baseline, not the projection."""
        shopping_list = planned.generate_shopping_list()

        assert [item.ingredient_name for item in shopping_list.items] == ["tomatoes"]
        assert shopping_list.items[0].missing_quantity == 1
        assert planned.shopping_list is shopping_list

    def test_add_bought_item(self, planned):
        """Test buying an item tops up stock and ticks it off."""
        item = planned.generate_shopping_list().items[0]

        shopping_list = planned.add_item_to_pantry(item.id, 1)

        assert shopping_list.items[0].is_checked
        assert quantities(planned.stock())["Tomatoes"] == 3
        # Now the planned meal fits and is deducted
        assert quantities(planned.pantry)["Tomatoes"] == 0

    def test_add_bought_item_keeps_check(self, planned):
        """Test buying an already checked item leaves it checked."""
        item = planned.generate_shopping_list().items[0]
        planned.toggle_item(item.id)

        shopping_list = planned.add_item_to_pantry(item.id, 1)

        assert shopping_list.items[0].is_checked

    def test_clear_and_complete(self, planned):
        """Test clearing checked items and completing the list."""
        item = planned.generate_shopping_list().items[0]
        planned.toggle_item(item.id)

        assert planned.clear_checked_items().items == []
        completed = planned.complete_shopping()

        assert completed.date_completed is not None
        assert planned.shopping_list is None

    def test_requires_list(self, session):
        """Test list operations need a list."""
        with pytest.raises(NoShoppingListError):
            session.toggle_item("x")
        with pytest.raises(NoShoppingListError):
            session.complete_shopping()
