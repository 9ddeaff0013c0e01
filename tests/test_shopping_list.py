"""Tests for shopping list generation and list operations."""

import pytest

from pantryplanner.exceptions import ShoppingItemNotFoundError
from pantryplanner.plan import (
    add_item_to_pantry,
    build_shopping_list,
    clear_checked_items,
    complete_shopping_list,
    toggle_item,
)
from pantryplanner.schemas import Ingredient, ShoppingListItem

from .conftest import make_plan, make_recipe


@pytest.fixture
def tomato_recipes():
    return [
        make_recipe("r-salad", "Tomato Salad", ("tomatoes", 3, "pcs")),
        make_recipe("r-pizza", "Pizza", ("tomato sauce", 1, "cup")),
    ]


class TestBuildShoppingList:
    """Tests for build_shopping_list."""

    @pytest.mark.scenario
    def test_tomatoes_and_tomato_sauce(self, tomato_recipes):
        """Test the shortfall of tomatoes and the whole tomato sauce requirement."""
        pantry = [Ingredient(name="tomatoes", quantity=2, unit="pcs")]
        plan = make_plan(("Monday", "lunch", "r-salad"), ("Tuesday", "dinner", "r-pizza"))

        shopping_list = build_shopping_list(plan, tomato_recipes, pantry)
        items = {item.ingredient_name: item for item in shopping_list.items}

        assert set(items) == {"tomatoes", "tomato sauce"}
        assert items["tomatoes"].required_quantity == 3
        assert items["tomatoes"].available_quantity == 2
        assert items["tomatoes"].missing_quantity == 1
        assert items["tomato sauce"].missing_quantity == 1
        assert items["tomato sauce"].unit == "cup"
        assert shopping_list.week_plan_id == plan.id

    @pytest.mark.scenario
    def test_garlic_across_recipes(self):
        """Test garlic is summed and each recipe is named once."""
        recipes = [
            make_recipe("r1", "Aglio e Olio", ("garlic", 2, "cloves")),
            make_recipe("r2", "Garlic Bread", ("garlic", 1, "cloves")),
        ]
        plan = make_plan(("Monday", "dinner", "r1"), ("Tuesday", "dinner", "r2"))

        shopping_list = build_shopping_list(plan, recipes, [])

        assert len(shopping_list.items) == 1
        item = shopping_list.items[0]
        assert (item.ingredient_name, item.unit, item.missing_quantity) == ("garlic", "cloves", 3)
        assert item.recipe_names == ["Aglio e Olio", "Garlic Bread"]

    def test_covered_requirements_are_omitted(self, pantry, recipes):
        """Test nothing is listed for requirements the pantry covers."""
        plan = make_plan(("Monday", "dinner", "r-pasta"))

        shopping_list = build_shopping_list(plan, recipes, pantry)

        names = [item.ingredient_name for item in shopping_list.items]
        assert names == ["tomatoes"]
        assert all(item.missing_quantity > 0 for item in shopping_list.items)

    def test_unit_mismatch_lists_full_amount(self, pantry, recipes):
        """Test milk in litres does not cover milk in ml."""
        plan = make_plan(("Sunday", "breakfast", "r-pancakes"))

        shopping_list = build_shopping_list(plan, recipes, pantry)
        items = {item.ingredient_name: item for item in shopping_list.items}

        assert items["milk"].available_quantity == 0
        assert items["milk"].missing_quantity == 300
        assert set(items) == {"flour", "milk", "egg"}

    def test_empty_plan(self, pantry, recipes):
        """Test an empty plan gives an empty list."""
        shopping_list = build_shopping_list(make_plan(), recipes, pantry)
        assert shopping_list.items == []

    def test_list_is_a_snapshot(self, tomato_recipes):
        """Test later pantry changes do not alter a generated list."""
        pantry = [Ingredient(name="tomatoes", quantity=2, unit="pcs")]
        plan = make_plan(("Monday", "lunch", "r-salad"))

        shopping_list = build_shopping_list(plan, tomato_recipes, pantry)
        pantry[0] = pantry[0].model_copy(update={"quantity": 10})

        assert shopping_list.items[0].missing_quantity == 1

    def test_inputs_not_mutated(self, pantry, recipes):
        """Test generating a list leaves pantry and plan untouched."""
        plan = make_plan(("Monday", "dinner", "r-pasta"))
        pantry_before = [i.model_copy(deep=True) for i in pantry]
        plan_before = plan.model_copy(deep=True)

        build_shopping_list(plan, recipes, pantry)

        assert pantry == pantry_before
        assert plan == plan_before


class TestListOperations:
    """Tests for toggling, clearing and completing a list."""

    @pytest.fixture
    def shopping_list(self, pantry, recipes):
        plan = make_plan(("Sunday", "breakfast", "r-pancakes"))
        return build_shopping_list(plan, recipes, pantry)

    def test_toggle(self, shopping_list):
        """Test toggling flips only the chosen item and returns a copy."""
        item_id = shopping_list.items[0].id

        toggled = toggle_item(shopping_list, item_id)

        assert toggled.items[0].is_checked
        assert not any(item.is_checked for item in toggled.items[1:])
        assert not shopping_list.items[0].is_checked
        assert not toggle_item(toggled, item_id).items[0].is_checked

    def test_toggle_unknown(self, shopping_list):
        """Test toggling an unknown item raises."""
        with pytest.raises(ShoppingItemNotFoundError):
            toggle_item(shopping_list, "missing")

    def test_clear_checked(self, shopping_list):
        """Test checked items are dropped."""
        toggled = toggle_item(shopping_list, shopping_list.items[0].id)
        cleared = clear_checked_items(toggled)
        assert len(cleared.items) == len(shopping_list.items) - 1

    def test_complete(self, shopping_list):
        """Test completion stamps the list."""
        assert shopping_list.date_completed is None
        assert complete_shopping_list(shopping_list).date_completed is not None


class TestAddItemToPantry:
    """Tests for add_item_to_pantry."""

    def _item(self, name: str, unit: str = "pcs") -> ShoppingListItem:
        return ShoppingListItem(
            ingredient_name=name, required_quantity=3, unit=unit, missing_quantity=3
        )

    def test_tops_up_exact_name(self, pantry):
        """Test an existing item with the same name is increased."""
        updated = add_item_to_pantry(pantry, self._item("tomatoes"), 3)

        assert len(updated) == len(pantry)
        assert updated[0].quantity == 5
        assert pantry[0].quantity == 2

    def test_adds_new_item_with_category(self, pantry):
        """Test an unknown name becomes a new categorised pantry item."""
        updated = add_item_to_pantry(pantry, self._item("Cream", unit="ml"), 200)

        added = updated[-1]
        assert (added.name, added.quantity, added.unit) == ("Cream", 200, "ml")
        assert added.category == "dairy"

    def test_substring_names_are_not_topped_up(self, pantry):
        """Test only an exact name tops up; 'tomato sauce' is a new item."""
        updated = add_item_to_pantry(pantry, self._item("tomato sauce", unit="cup"), 1)
        assert len(updated) == len(pantry) + 1

    def test_negative_quantity(self, pantry):
        """Test negative quantities are rejected."""
        with pytest.raises(ValueError):
            add_item_to_pantry(pantry, self._item("tomatoes"), -1)
