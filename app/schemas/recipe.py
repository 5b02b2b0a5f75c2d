import math
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.services.errors import RecipeValidationError

DEFAULT_TAGS = ("General",)
DEFAULT_COOKING_TIME = "30 minutes"
DEFAULT_DIFFICULTY = "Medium"
DEFAULT_SERVINGS = 4
NOT_SPECIFIED = "Not specified"

_REQUIRED_FIELDS = ("name", "ingredients", "instructions")


class NutritionalInfo(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    calories: str = NOT_SPECIFIED
    protein: str = NOT_SPECIFIED
    carbs: str = NOT_SPECIFIED
    fat: str = NOT_SPECIFIED


class Recipe(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    name: str = Field(min_length=1)
    tags: list[str] = Field(default_factory=lambda: list(DEFAULT_TAGS))
    cooking_time: str = Field(default=DEFAULT_COOKING_TIME, alias="cookingTime")
    difficulty: str = DEFAULT_DIFFICULTY
    servings: int = Field(default=DEFAULT_SERVINGS, gt=0)
    ingredients: list[str] = Field(min_length=1)
    instructions: list[str] = Field(min_length=1)
    nutritional_info: NutritionalInfo = Field(
        default_factory=NutritionalInfo, alias="nutritionalInfo"
    )
    tips: list[str] = Field(default_factory=list)
    image_src: str | None = Field(default=None, alias="imageSrc")

    @field_validator("name", mode="before")
    @classmethod
    def normalize_name(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        return value.strip()


class GenerateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    user_input: str = Field(alias="userInput")


class SearchRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    query: str


class SearchFilters(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    query: str = ""
    include_ingredients: str = Field(default="", alias="includeIngredients")
    exclude_ingredients: str = Field(default="", alias="excludeIngredients")
    dietary: list[str] = Field(default_factory=list)
    cuisine_type: str = Field(default="Any", alias="cuisineType")
    meal_type: str = Field(default="Any", alias="mealType")
    max_cooking_minutes: int | None = Field(default=60, gt=0, alias="maxCookingMinutes")
    difficulty: str = "Any"
    max_calories: int | None = Field(default=None, gt=0, alias="maxCalories")


def _stringify(item: Any) -> str:
    if item is None:
        return ""
    if isinstance(item, str):
        return item.strip()
    if isinstance(item, Mapping):
        # {"quantity": "2 cups", "item": "flour"} -> "2 cups flour"
        parts = (_stringify(value) for value in item.values())
        return " ".join(part for part in parts if part)
    return str(item).strip()


def _string_list(value: Any) -> list[str] | None:
    if not isinstance(value, (list, tuple)):
        return None
    items = (_stringify(item) for item in value)
    return [item for item in items if item]


def _text_or(value: Any, default: str) -> str:
    return value if isinstance(value, str) else default


def _servings(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return DEFAULT_SERVINGS
    if isinstance(value, float) and not math.isfinite(value):
        return DEFAULT_SERVINGS
    count = int(value)
    return count if count > 0 else DEFAULT_SERVINGS


def _nutrition(value: Any) -> NutritionalInfo:
    if not isinstance(value, Mapping):
        return NutritionalInfo()
    return NutritionalInfo(
        **{
            key: _text_or(value.get(key), NOT_SPECIFIED)
            for key in ("calories", "protein", "carbs", "fat")
        }
    )


def coerce_recipe(data: Any) -> Recipe:
    """Build a well-formed Recipe from an arbitrary decoded JSON value.

    Only a missing ``name``, ``ingredients`` or ``instructions`` is fatal and
    raises RecipeValidationError; every other field is coerced or defaulted.
    Passing an existing Recipe re-coerces its aliased dump, so the operation
    is idempotent.
    """
    if isinstance(data, Recipe):
        data = data.model_dump(by_alias=True)
    if not isinstance(data, Mapping):
        raise RecipeValidationError("recipe")

    for field in _REQUIRED_FIELDS:
        if not data.get(field):
            raise RecipeValidationError(field)

    name = _stringify(data["name"])
    if not name:
        raise RecipeValidationError("name")

    tags = _string_list(data.get("tags"))
    ingredients = _string_list(data["ingredients"]) or ["Ingredients not specified"]
    instructions = _string_list(data["instructions"]) or ["Instructions not specified"]
    image_src = data.get("imageSrc")

    return Recipe(
        name=name,
        tags=list(DEFAULT_TAGS) if tags is None else tags,
        cooking_time=_text_or(data.get("cookingTime"), DEFAULT_COOKING_TIME),
        difficulty=_text_or(data.get("difficulty"), DEFAULT_DIFFICULTY),
        servings=_servings(data.get("servings")),
        ingredients=ingredients,
        instructions=instructions,
        nutritional_info=_nutrition(data.get("nutritionalInfo")),
        tips=_string_list(data.get("tips")) or [],
        image_src=image_src if isinstance(image_src, str) and image_src else None,
    )
