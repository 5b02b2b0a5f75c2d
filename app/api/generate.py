import logging

from fastapi import APIRouter, HTTPException
from fastapi.concurrency import run_in_threadpool

from app.core.config import get_settings
from app.schemas.recipe import GenerateRequest, Recipe, SearchFilters, SearchRequest
from app.services.generator_factory import get_generator
from app.services.recipe_builder import advanced_search, build_recipe, search_recipes

router = APIRouter()
logger = logging.getLogger(__name__)

generate_api_counters = {
    "generate": 0,
    "search": 0,
    "rejected": 0,
}

_EMPTY_INPUT = "Please provide what you'd like to cook."


def _require_text(value: str) -> str:
    cleaned = value.strip()
    if not cleaned:
        generate_api_counters["rejected"] += 1
        raise HTTPException(status_code=400, detail=_EMPTY_INPUT)
    return cleaned


@router.post("/generate", response_model=Recipe)
async def generate_recipe(request: GenerateRequest) -> Recipe:
    user_input = _require_text(request.user_input)
    settings = get_settings()
    recipe = await run_in_threadpool(build_recipe, user_input, get_generator(settings))
    generate_api_counters["generate"] += 1
    logger.info(
        "api_recipe_generation",
        extra={
            "outcome": "success",
            "generator_mode": settings.recipe_generator,
            "input_length": len(user_input),
            "ingredients_count": len(recipe.ingredients),
        },
    )
    return recipe


@router.post("/search", response_model=list[Recipe])
async def search(request: SearchRequest) -> list[Recipe]:
    query = _require_text(request.query)
    settings = get_settings()
    recipes = await run_in_threadpool(search_recipes, query, get_generator(settings))
    generate_api_counters["search"] += 1
    logger.info(
        "api_recipe_search",
        extra={
            "outcome": "success",
            "generator_mode": settings.recipe_generator,
            "search_mode": "simple",
            "results_count": len(recipes),
        },
    )
    return recipes


@router.post("/search/advanced", response_model=list[Recipe])
async def search_advanced(filters: SearchFilters) -> list[Recipe]:
    settings = get_settings()
    recipes = await run_in_threadpool(advanced_search, filters, get_generator(settings))
    generate_api_counters["search"] += 1
    logger.info(
        "api_recipe_search",
        extra={
            "outcome": "success",
            "generator_mode": settings.recipe_generator,
            "search_mode": "advanced",
            "dietary_count": len(filters.dietary),
            "results_count": len(recipes),
        },
    )
    return recipes
