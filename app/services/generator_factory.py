from app.core.config import Settings, get_settings
from app.services.completion_client import CompletionClient
from app.services.generator_base import RecipeGenerator
from app.services.generator_llm import LLMRecipeGenerator
from app.services.generator_stub import StubRecipeGenerator
from app.services.image_resolver import ImageResolver

generator_factory_counters = {
    "fallback": 0,
}


def get_generator(settings: Settings | None = None) -> RecipeGenerator:
    config = settings or get_settings()

    if config.recipe_generator == "llm":
        # A missing key is recoverable: serve mock recipes instead of failing startup.
        if not config.completion_api_key:
            generator_factory_counters["fallback"] += 1
            return StubRecipeGenerator()
        return LLMRecipeGenerator(
            completion_client=CompletionClient(
                api_key=config.completion_api_key,
                model=config.completion_model,
                base_url=config.completion_base_url,
                temperature=config.completion_temperature,
                max_tokens=config.completion_max_tokens,
                timeout_seconds=config.completion_timeout_seconds,
            ),
            image_resolver=ImageResolver(
                search_url=config.image_search_url,
                timeout_seconds=config.image_timeout_seconds,
                enabled=config.image_lookup_enabled,
            ),
        )

    return StubRecipeGenerator()
