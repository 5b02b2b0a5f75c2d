import logging
from typing import Any

from app.schemas.recipe import Recipe, coerce_recipe
from app.services.completion_client import CompletionClient
from app.services.errors import RecipeGenerationError
from app.services.generator_stub import StubRecipeGenerator
from app.services.image_resolver import DEFAULT_IMAGE, ImageResolver
from app.services.recipe_parser import parse_recipe_json

logger = logging.getLogger(__name__)

recipe_generation_counters = {
    "success": 0,
    "fallback": 0,
}


class LLMRecipeGenerator:
    """Completion call, JSON recovery, coercion and image lookup in sequence.

    ``generate`` never raises: any failure along the way yields the
    deterministic recipe from the fallback generator instead.
    """

    def __init__(
        self,
        completion_client: CompletionClient,
        image_resolver: ImageResolver,
        fallback: StubRecipeGenerator | None = None,
    ) -> None:
        self._completion_client = completion_client
        self._image_resolver = image_resolver
        self._fallback = fallback or StubRecipeGenerator()

    def generate(self, user_input: str) -> Recipe:
        text = (user_input or "").strip()
        if not text:
            return self._use_fallback(text, "empty_input")

        try:
            raw_text = self._completion_client.complete(text)
            recipe = coerce_recipe(parse_recipe_json(raw_text))
        except RecipeGenerationError as exc:
            return self._use_fallback(text, exc.error_class)
        except Exception as exc:
            return self._use_fallback(text, exc.__class__.__name__)

        recipe = recipe.model_copy(update={"image_src": self._resolve_image(recipe.name)})
        recipe_generation_counters["success"] += 1
        logger.info(
            "llm_recipe_generation",
            extra={
                "outcome": "success",
                "generator_mode": "llm",
                **self._request_shape_fields(text),
            },
        )
        return recipe

    def _resolve_image(self, name: str) -> str:
        try:
            return self._image_resolver.resolve(name)
        except Exception as exc:
            logger.warning(
                "llm_recipe_image",
                extra={"outcome": "failure", "error_class": exc.__class__.__name__},
            )
            return DEFAULT_IMAGE

    def _use_fallback(self, text: str, error_class: str) -> Recipe:
        recipe_generation_counters["fallback"] += 1
        logger.warning(
            "llm_recipe_generation",
            extra={
                "outcome": "fallback",
                "generator_mode": "llm",
                "error_class": error_class,
                **self._request_shape_fields(text),
            },
        )
        return self._fallback.generate(text)

    @staticmethod
    def _request_shape_fields(text: str) -> dict[str, Any]:
        return {
            "input_length": len(text),
            "word_count": len(text.split()),
        }
