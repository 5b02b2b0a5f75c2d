import re

from app.schemas.recipe import NutritionalInfo, Recipe
from app.services.image_resolver import fallback_image

FALLBACK_NAME = "Simple Recipe"
DEFAULT_TAGS = ["Quick", "Easy", "30-Minute Recipe"]

# Matched against the lower-cased request; first hit names the main ingredient.
MAIN_INGREDIENTS = (
    "chicken",
    "beef",
    "pork",
    "salmon",
    "shrimp",
    "fish",
    "tofu",
    "chickpeas",
    "lentils",
    "beans",
    "eggs",
    "mushrooms",
    "pasta",
    "rice",
    "noodles",
    "potatoes",
    "spinach",
    "vegetables",
)

CUISINES = (
    "italian",
    "mexican",
    "chinese",
    "japanese",
    "indian",
    "thai",
    "mediterranean",
    "french",
    "korean",
    "greek",
)

_WORD = re.compile(r"[a-z]+(?:-[a-z]+)*")


def _recipe_name(user_input: str) -> str:
    words = user_input.split()[:3]
    if not words:
        return FALLBACK_NAME
    phrase = " ".join(words)
    return f"{phrase[0].upper()}{phrase[1:]} Recipe"


def _main_ingredient(words: set[str]) -> str:
    for candidate in MAIN_INGREDIENTS:
        if candidate in words or candidate.rstrip("s") in words:
            return candidate
    return "main ingredient"


class StubRecipeGenerator:
    """Deterministic recipe synthesized from the request text alone.

    Used whenever the completion pipeline is unavailable or fails. Keyword
    hits in the request adjust tags, time, difficulty and nutrition.
    """

    def generate(self, user_input: str) -> Recipe:
        text = (user_input or "").strip()
        lowered = text.lower()
        words = set(_WORD.findall(lowered))
        name = _recipe_name(text)

        tags: list[str] = []
        cooking_time = "30 minutes"
        difficulty = "Medium"
        calories = "350 kcal"
        fat = "15g"
        cooking_fat = "1 tablespoon olive oil" if "vegan" in words else "1 tablespoon butter"

        if "vegan" in words:
            tags.append("Vegan")
        if "vegetarian" in words:
            tags.append("Vegetarian")
        if "gluten-free" in words:
            tags.append("Gluten-Free")
        if words & {"quick", "fast", "easy"}:
            tags.append("Quick")
            cooking_time = "15 minutes"
            difficulty = "Easy"
        if words & {"healthy", "light"}:
            tags.append("Healthy")
            calories = "280 kcal"
            fat = "10g"
        if "spicy" in words:
            tags.append("Spicy")
        tags.extend(cuisine.capitalize() for cuisine in CUISINES if cuisine in words)

        main = _main_ingredient(words)

        return Recipe(
            name=name,
            tags=tags or list(DEFAULT_TAGS),
            cooking_time=cooking_time,
            difficulty=difficulty,
            servings=4,
            ingredients=[
                f"2 cups {main}",
                cooking_fat,
                "1 onion, chopped",
                "2 cloves garlic, minced",
                "Salt and pepper to taste",
            ],
            instructions=[
                "Prepare all ingredients.",
                "Heat the fat in a pan over medium heat.",
                "Add onions and cook until translucent.",
                "Add garlic and cook for another minute.",
                f"Add the {main} and cook until done.",
                "Season with salt and pepper and serve.",
            ],
            nutritional_info=NutritionalInfo(
                calories=calories,
                protein="15g",
                carbs="30g",
                fat=fat,
            ),
            tips=[
                "Prepare ingredients in advance for quicker cooking",
                "This recipe can be stored in the refrigerator for up to 3 days",
            ],
            image_src=fallback_image(text),
        )
