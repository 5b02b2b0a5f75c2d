import os
from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


_TRUTHY = {"1", "true", "yes", "on"}


class Settings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    recipe_generator: Literal["stub", "llm"] = "llm"
    completion_api_key: str | None = None
    completion_base_url: str = "https://api.groq.com/openai/v1"
    completion_model: str = "llama-3.1-8b-instant"
    completion_temperature: float = Field(default=0.7, ge=0, le=2)
    completion_max_tokens: int = Field(default=2048, gt=0)
    completion_timeout_seconds: float = Field(default=20.0, gt=0, le=30)
    image_lookup_enabled: bool = True
    image_search_url: str = "https://source.unsplash.com/featured/"
    image_timeout_seconds: float = Field(default=4.0, gt=0, le=5)

    @field_validator("completion_api_key", mode="before")
    @classmethod
    def _blank_key_is_missing(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value.strip() if isinstance(value, str) else value


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in _TRUTHY


@lru_cache
def get_settings() -> Settings:
    raw = {
        "recipe_generator": os.getenv("RECIPE_GENERATOR", "llm").strip().lower(),
        "completion_api_key": os.getenv("GROQ_API_KEY"),
        "completion_base_url": os.getenv("COMPLETION_BASE_URL", "https://api.groq.com/openai/v1"),
        "completion_model": os.getenv("COMPLETION_MODEL", "llama-3.1-8b-instant"),
        "completion_temperature": os.getenv("COMPLETION_TEMPERATURE", "0.7"),
        "completion_max_tokens": os.getenv("COMPLETION_MAX_TOKENS", "2048"),
        "completion_timeout_seconds": os.getenv("COMPLETION_TIMEOUT_SECONDS", "20"),
        "image_lookup_enabled": _env_flag("IMAGE_LOOKUP_ENABLED", "1"),
        "image_search_url": os.getenv("IMAGE_SEARCH_URL", "https://source.unsplash.com/featured/"),
        "image_timeout_seconds": os.getenv("IMAGE_TIMEOUT_SECONDS", "4"),
    }
    try:
        return Settings.model_validate(raw)
    except ValidationError as exc:
        raise RuntimeError(f"Invalid configuration: {exc}") from exc
