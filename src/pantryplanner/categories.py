"""Keyword-based categorisation of ingredients and recipes."""

from collections.abc import Iterable

from pantryplanner.schemas import MealType, Recipe

# Checked in order; the first table with a keyword contained in the name wins.
# A category may appear more than once.
INGREDIENT_CATEGORY_KEYWORDS: list[tuple[str, list[str]]] = [
    ("vegetables", [
        "tomato", "onion", "garlic", "carrot", "potato", "bell pepper", "broccoli",
        "spinach", "lettuce", "cucumber", "celery", "mushroom", "zucchini", "eggplant",
        "cabbage", "kale", "cauliflower",
    ]),
    ("fruits", [
        "apple", "banana", "orange", "lemon", "lime", "berry", "grape", "mango",
        "pineapple", "avocado", "peach", "pear",
    ]),
    ("meat", [
        "chicken", "beef", "pork", "turkey", "lamb", "bacon", "ham", "sausage",
        "fish", "salmon", "tuna", "shrimp", "crab", "lobster", "cod", "tilapia",
        "sardine", "anchovy", "scallop", "oyster", "mussel", "clam",
    ]),
    ("dairy", [
        "milk", "cheese", "butter", "yogurt", "cream", "egg", "mozzarella", "cheddar",
        "parmesan",
    ]),
    ("grains", [
        "rice", "pasta", "bread", "flour", "oats", "quinoa", "barley", "wheat", "noodle",
        "cereal", "couscous", "bulgur",
    ]),
    ("spices", [
        "basil", "oregano", "thyme", "rosemary", "parsley", "cilantro", "mint", "sage",
        "pepper", "salt", "paprika", "cumin", "turmeric", "ginger", "cinnamon", "nutmeg",
        "clove", "bay leaf",
    ]),
    ("pantry", [
        "oil", "vinegar", "sauce", "ketchup", "mustard", "mayo", "salsa", "honey", "syrup",
        "jam", "pickle",
    ]),
    ("beverages", [
        "water", "juice", "soda", "tea", "coffee", "beer", "wine", "smoothie", "shake",
    ]),
    ("pantry", [
        "can", "jar", "bottled", "preserved", "sugar", "baking powder", "baking soda",
        "vanilla", "yeast", "cocoa", "chocolate chip", "almond extract",
    ]),
]

DEFAULT_INGREDIENT_CATEGORY = "other"

MEAL_TYPE_KEYWORDS: dict[str, list[str]] = {
    "breakfast": [
        "pancake", "waffle", "toast", "cereal", "oatmeal", "eggs", "bacon", "sausage",
        "coffee", "tea", "smoothie", "yogurt", "granola", "muesli", "breakfast",
        "morning", "brunch",
    ],
    "snack": [
        "snack", "chip", "cracker", "nuts", "fruit", "cookie", "muffin", "bar", "bite",
        "popcorn", "pretzel", "trail mix",
    ],
    "lunch": [
        "sandwich", "salad", "soup", "wrap", "burger", "pizza", "pasta", "rice",
        "noodle", "lunch", "bowl", "quinoa",
    ],
    "dinner": [
        "steak", "chicken", "fish", "roast", "casserole", "stew", "curry", "dinner",
        "main", "entree", "grill", "bake", "slow cook",
    ],
}


def determine_ingredient_category(name: str) -> str:
    """Guess a pantry category for an ingredient name."""
    lowered = name.lower()
    for category, keywords in INGREDIENT_CATEGORY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return DEFAULT_INGREDIENT_CATEGORY


def categorize_recipe(recipe: Recipe) -> MealType:
    """Guess which meal slot a recipe suits, from keywords then cooking time."""
    search_text = f"{recipe.name} {recipe.description}".lower()

    for meal_type, keywords in MEAL_TYPE_KEYWORDS.items():
        if any(keyword in search_text for keyword in keywords):
            return meal_type  # type: ignore[return-value]

    if recipe.cooking_time <= 15:
        return "snack"
    if recipe.cooking_time <= 30:
        return "breakfast"
    if recipe.cooking_time <= 45:
        return "lunch"
    return "dinner"


def recipes_for_meal_type(recipes: Iterable[Recipe], meal_type: str) -> list[Recipe]:
    return [recipe for recipe in recipes if categorize_recipe(recipe) == meal_type]
