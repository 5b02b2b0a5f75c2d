import json
import re
from typing import Any

from app.services.errors import MalformedResponseError

_LEADING_FENCE = re.compile(r"^```[a-zA-Z0-9_-]*\s*")
_TRAILING_FENCE = re.compile(r"\s*```$")
_DECODER = json.JSONDecoder()


def strip_code_fence(text: str) -> str:
    cleaned = text.strip()
    cleaned = _LEADING_FENCE.sub("", cleaned, count=1)
    return _TRAILING_FENCE.sub("", cleaned, count=1).strip()


def extract_first_object(text: str) -> str:
    """Return the first substring that decodes as a complete JSON object."""
    start = text.find("{")
    while start != -1:
        try:
            parsed, end = _DECODER.raw_decode(text, start)
        except json.JSONDecodeError:
            parsed, end = None, start
        if isinstance(parsed, dict):
            return text[start:end]
        start = text.find("{", start + 1)
    return ""


def _load_object(text: str) -> dict[str, Any] | None:
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        return None
    return parsed if isinstance(parsed, dict) else None


def parse_recipe_json(raw_text: str) -> dict[str, Any]:
    """Decode a model reply into a JSON object.

    Tries a direct parse, then the text with code fences stripped, then the
    first complete object embedded in surrounding prose. The first strategy
    that yields an object wins.
    """
    strategies = (
        lambda text: text,
        strip_code_fence,
        extract_first_object,
    )
    for strategy in strategies:
        parsed = _load_object(strategy(raw_text))
        if parsed is not None:
            return parsed

    raise MalformedResponseError("Completion text did not contain a JSON object")
