from app.schemas.recipe import Recipe, SearchFilters
from app.services.generator_base import RecipeGenerator
from app.services.generator_factory import get_generator

ANY = "any"


def build_recipe(user_input: str, generator: RecipeGenerator | None = None) -> Recipe:
    return (generator or get_generator()).generate(user_input)


def quick_variant(recipe: Recipe) -> Recipe:
    return recipe.model_copy(
        update={
            "name": f"Quick {recipe.name}",
            "cooking_time": "15 minutes",
            "difficulty": "Easy",
            "tags": [*recipe.tags, "Quick", "Under 30 Minutes"],
        }
    )


def deluxe_variant(recipe: Recipe) -> Recipe:
    return recipe.model_copy(
        update={
            "name": f"Deluxe {recipe.name}",
            "cooking_time": "45 minutes",
            "difficulty": "Medium",
            "tags": [*recipe.tags, "Gourmet", "Special Occasion"],
        }
    )


def search_recipes(query: str, generator: RecipeGenerator | None = None) -> list[Recipe]:
    """Generate one recipe for ``query`` and derive quick and deluxe variants from it."""
    base = build_recipe(query, generator)
    return [base, quick_variant(base), deluxe_variant(base)]


def _is_set(value: str) -> bool:
    cleaned = value.strip()
    return bool(cleaned) and cleaned.lower() != ANY


def build_search_prompt(filters: SearchFilters) -> str:
    lines = ["Generate a recipe that matches these criteria:"]
    if filters.query.strip():
        lines.append(f"Recipe should be related to: {filters.query.strip()}")
    if filters.include_ingredients.strip():
        lines.append(f"Must include these ingredients: {filters.include_ingredients.strip()}")
    if filters.exclude_ingredients.strip():
        lines.append(f"Must NOT include these ingredients: {filters.exclude_ingredients.strip()}")
    dietary = [item.strip() for item in filters.dietary if item.strip()]
    if dietary:
        lines.append(f"Dietary restrictions: {', '.join(dietary)}")
    if _is_set(filters.cuisine_type):
        lines.append(f"Cuisine type: {filters.cuisine_type.strip()}")
    if _is_set(filters.meal_type):
        lines.append(f"Meal type: {filters.meal_type.strip()}")
    if filters.max_cooking_minutes:
        lines.append(f"Maximum cooking time: {filters.max_cooking_minutes} minutes")
    if _is_set(filters.difficulty):
        lines.append(f"Difficulty level: {filters.difficulty.strip()}")
    if filters.max_calories:
        lines.append(f"Maximum calories per serving: {filters.max_calories} calories")
    return "\n".join(lines)


def advanced_search(
    filters: SearchFilters, generator: RecipeGenerator | None = None, count: int = 3
) -> list[Recipe]:
    prompt = build_search_prompt(filters)
    active = generator or get_generator()
    return [active.generate(prompt) for _ in range(count)]
