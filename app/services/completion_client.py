import logging
from typing import Any

from app.services.errors import (
    CompletionTimeoutError,
    MalformedResponseError,
    RecipeGenerationError,
    UpstreamError,
)

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a professional chef's assistant. Generate a detailed recipe based on user "
    "input. Respond with a single JSON object matching exactly these fields: "
    '"name" (string), "tags" (array of strings), "cookingTime" (string, e.g. "30 minutes"), '
    '"difficulty" (one of "Easy", "Medium", "Hard"), "servings" (integer), '
    '"ingredients" (array of strings with quantities), "instructions" (array of '
    'strings, in order), "nutritionalInfo" (object with string fields "calories", '
    '"protein", "carbs", "fat") and "tips" (array of strings). No extra keys.'
)


class CompletionClient:
    """Single chat-completion call against an OpenAI-compatible endpoint."""

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str | None = None,
        temperature: float = 0.7,
        max_tokens: int = 2048,
        timeout_seconds: float = 20.0,
        client: Any | None = None,
    ) -> None:
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._timeout_seconds = timeout_seconds
        if client is not None:
            self._client = client
            return

        from openai import OpenAI

        # Retry policy belongs to the caller.
        self._client = OpenAI(api_key=api_key, base_url=base_url, max_retries=0)

    def complete(self, user_input: str) -> str:
        request_kwargs = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": self._user_message(user_input)},
            ],
            "temperature": self._temperature,
            "max_tokens": self._max_tokens,
            "response_format": {"type": "json_object"},
            "timeout": self._timeout_seconds,
        }
        try:
            response = self._client.chat.completions.create(**request_kwargs)
        except Exception as exc:
            error = self._classify_api_error(exc)
            logger.warning(
                "completion_request",
                extra={
                    "outcome": "failure",
                    "error_class": error.error_class,
                    "status_code": getattr(error, "status_code", None),
                },
            )
            raise error from exc

        return self._extract_content(response)

    @staticmethod
    def _user_message(user_input: str) -> str:
        return (
            f'Generate a detailed recipe based on the following: "{user_input}". '
            "Use the specific ingredients mentioned, respect any dietary preferences, "
            "and follow the cuisine type if one is mentioned."
        )

    @staticmethod
    def _classify_api_error(exc: Exception) -> RecipeGenerationError:
        error_name = exc.__class__.__name__
        if error_name == "APITimeoutError" or isinstance(exc, TimeoutError):
            return CompletionTimeoutError("Completion request timed out")

        status_code = getattr(exc, "status_code", None)
        if not isinstance(status_code, int):
            response = getattr(exc, "response", None)
            status_code = getattr(response, "status_code", None)
        if isinstance(status_code, int):
            return UpstreamError(
                f"Completion request failed with status {status_code}",
                status_code=status_code,
            )

        return UpstreamError("Completion request failed")

    @staticmethod
    def _extract_content(response: Any) -> str:
        if isinstance(response, dict):
            choices = response.get("choices")
        else:
            choices = getattr(response, "choices", None)
        if not isinstance(choices, (list, tuple)) or not choices:
            raise MalformedResponseError("Completion response did not include choices")

        choice = choices[0]
        if isinstance(choice, dict):
            message = choice.get("message")
        else:
            message = getattr(choice, "message", None)
        if isinstance(message, dict):
            content = message.get("content")
        else:
            content = getattr(message, "content", None)

        if not isinstance(content, str) or not content.strip():
            raise MalformedResponseError("Completion response did not include message content")
        return content
