"""Command-line front end for the planner.

Run with: pantryplanner --help
"""

import argparse
import json
import sys
from collections.abc import Sequence

from pydantic import ValidationError

from pantryplanner.config import get_settings
from pantryplanner.exceptions import PlannerError
from pantryplanner.logging_config import configure_logging, get_logger
from pantryplanner.schemas import MEAL_TYPES, Recipe, ShoppingList, WeeklyMealPlan
from pantryplanner.service import PlannerService

logger = get_logger(__name__)


def format_quantity(quantity: float) -> str:
    if quantity == int(quantity):
        return str(int(quantity))
    return f"{quantity:.2f}".rstrip("0").rstrip(".")


def print_shopping_list(shopping_list: ShoppingList | None) -> None:
    if shopping_list is None:
        print("No shopping list. Run 'pantryplanner shopping generate'.")
        return
    if not shopping_list.items:
        print("Nothing to buy: the pantry covers every planned meal.")
        return

    print(f"Shopping list ({len(shopping_list.items)} items)")
    print("-" * 60)
    for item in shopping_list.items:
        mark = "x" if item.is_checked else " "
        amount = f"{format_quantity(item.missing_quantity)} {item.unit}".strip()
        print(f"[{mark}] {item.ingredient_name}: {amount}  ({', '.join(item.recipe_names)})")
        print(f"    id={item.id}")


def print_plan(plan: WeeklyMealPlan | None, service: PlannerService) -> None:
    if plan is None:
        print("No active meal plan. Run 'pantryplanner plan new'.")
        return

    names = {recipe.id: recipe.name for recipe in service.recipes}
    print(f"Week starting {plan.week_starting} (plan {plan.id})")
    print("-" * 60)
    for day_meals in plan.meals:
        slots = [
            f"{meal}: {names.get(recipe_id, recipe_id)}"
            for meal in MEAL_TYPES
            if (recipe_id := getattr(day_meals, meal))
        ]
        print(f"{day_meals.day:<10} {'; '.join(slots) if slots else '-'}")


def cmd_pantry(service: PlannerService, args: argparse.Namespace) -> int:
    if not service.pantry:
        print("Pantry is empty.")
    for ingredient in service.pantry:
        print(
            f"{ingredient.name}: {format_quantity(ingredient.quantity)} {ingredient.unit} "
            f"[{ingredient.category}]  id={ingredient.id}"
        )
    return 0


def cmd_add_ingredient(service: PlannerService, args: argparse.Namespace) -> int:
    ingredient = service.add_ingredient_from_text(" ".join(args.text), category=args.category)
    print(
        f"Added {ingredient.name}: {format_quantity(ingredient.quantity)} {ingredient.unit} "
        f"[{ingredient.category}]"
    )
    return 0


def cmd_recipes(service: PlannerService, args: argparse.Namespace) -> int:
    matches = service.find_recipes(min_match=args.min_match, search=args.search)
    if not matches:
        print("No recipes match.")
    for recipe, percentage in matches:
        print(f"{percentage:>3}%  {recipe.name}  id={recipe.id}")
    return 0


def cmd_import_recipe(service: PlannerService, args: argparse.Namespace) -> int:
    with open(args.file, encoding="utf-8") as f:
        recipe = Recipe.model_validate(json.load(f))
    recipe = service.import_recipe(recipe)
    print(f"Imported {recipe.name} ({len(recipe.ingredients)} ingredients)  id={recipe.id}")
    return 0


def cmd_cook(service: PlannerService, args: argparse.Namespace) -> int:
    result = service.cook(args.recipe_id)
    if not result.cooked:
        print(f"Cannot cook: not enough {', '.join(result.missing)}")
        return 1
    print("Cooked. Ingredients have been used.")
    return 0


def cmd_suggest(service: PlannerService, args: argparse.Namespace) -> int:
    for name in service.suggest(args.term):
        print(name)
    return 0


def cmd_plan(service: PlannerService, args: argparse.Namespace) -> int:
    if args.plan_command == "new":
        print_plan(service.create_plan(), service)
    elif args.plan_command == "assign":
        print_plan(service.assign_recipe(args.day, args.meal, args.recipe_id), service)
    elif args.plan_command == "remove":
        print_plan(service.remove_recipe(args.day, args.meal), service)
    elif args.plan_command == "consume":
        entry = service.consume()
        print(f"Meal plan consumed and moved to history (entry {entry.id}).")
    elif args.plan_command == "cancel":
        service.cancel()
        print("Meal plan cancelled, pantry restored.")
    elif args.plan_command == "history":
        if not service.history:
            print("No consumed plans.")
        for entry in service.history:
            print(f"{entry.date_consumed:%Y-%m-%d}  week of {entry.weekly_plan.week_starting}  "
                  f"id={entry.id}")
    else:
        print_plan(service.current_plan, service)
    return 0


def cmd_shopping(service: PlannerService, args: argparse.Namespace) -> int:
    if args.shopping_command == "generate":
        print_shopping_list(service.generate_shopping_list())
    elif args.shopping_command == "check":
        print_shopping_list(service.toggle_item(args.item_id))
    elif args.shopping_command == "buy":
        print_shopping_list(service.add_item_to_pantry(args.item_id, args.quantity))
    elif args.shopping_command == "clear-checked":
        print_shopping_list(service.clear_checked_items())
    elif args.shopping_command == "complete":
        service.complete_shopping()
        print("Shopping completed, list cleared.")
    else:
        print_shopping_list(service.shopping_list)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pantryplanner",
        description="Pantry, recipes and weekly meal planning",
    )
    parser.add_argument("--database-url", help="Override DATABASE_URL")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    pantry = subparsers.add_parser("pantry", help="List pantry stock")
    pantry.set_defaults(handler=cmd_pantry)

    add = subparsers.add_parser("add-ingredient", help="Add stock from text, e.g. '2 cups rice'")
    add.add_argument("text", nargs="+")
    add.add_argument("--category", "-c", help="Category (guessed when omitted)")
    add.set_defaults(handler=cmd_add_ingredient)

    recipes = subparsers.add_parser("recipes", help="List recipes by pantry coverage")
    recipes.add_argument("--min-match", "-m", type=int, default=0, help="Minimum match %%")
    recipes.add_argument("--search", "-s", default="", help="Search name/description")
    recipes.set_defaults(handler=cmd_recipes)

    import_recipe = subparsers.add_parser("import-recipe", help="Import a recipe JSON file")
    import_recipe.add_argument("file")
    import_recipe.set_defaults(handler=cmd_import_recipe)

    cook = subparsers.add_parser("cook", help="Cook one recipe from the pantry")
    cook.add_argument("recipe_id")
    cook.set_defaults(handler=cmd_cook)

    suggest = subparsers.add_parser("suggest", help="Autocomplete ingredient names")
    suggest.add_argument("term")
    suggest.set_defaults(handler=cmd_suggest)

    plan = subparsers.add_parser("plan", help="Weekly meal plan")
    plan.set_defaults(handler=cmd_plan)
    plan_commands = plan.add_subparsers(dest="plan_command")
    plan_commands.add_parser("show", help="Show the active plan")
    plan_commands.add_parser("new", help="Start a plan for this week")
    assign = plan_commands.add_parser("assign", help="Put a recipe in a meal slot")
    assign.add_argument("day")
    assign.add_argument("meal", choices=MEAL_TYPES)
    assign.add_argument("recipe_id")
    remove = plan_commands.add_parser("remove", help="Clear a meal slot")
    remove.add_argument("day")
    remove.add_argument("meal", choices=MEAL_TYPES)
    plan_commands.add_parser("consume", help="Cook the plan and use up ingredients")
    plan_commands.add_parser("cancel", help="Discard the plan and restore the pantry")
    plan_commands.add_parser("history", help="List consumed plans")

    shopping = subparsers.add_parser("shopping", help="Shopping list")
    shopping.set_defaults(handler=cmd_shopping)
    shopping_commands = shopping.add_subparsers(dest="shopping_command")
    shopping_commands.add_parser("show", help="Show the current list")
    shopping_commands.add_parser("generate", help="Build the list for the active plan")
    check = shopping_commands.add_parser("check", help="Tick or untick an item")
    check.add_argument("item_id")
    buy = shopping_commands.add_parser("buy", help="Add a bought item to the pantry")
    buy.add_argument("item_id")
    buy.add_argument("quantity", type=float)
    shopping_commands.add_parser("clear-checked", help="Drop ticked items")
    shopping_commands.add_parser("complete", help="Finish shopping and clear the list")

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings, verbose=args.verbose)

    try:
        service = PlannerService.open(args.database_url, settings=settings)
        return args.handler(service, args)
    except (PlannerError, ValidationError, ValueError, OSError) as e:
        logger.debug(f"Command failed: {e!r}")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
