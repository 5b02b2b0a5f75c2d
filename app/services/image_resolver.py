import logging
import random
import re

import httpx

logger = logging.getLogger(__name__)

_PHOTO = "https://images.unsplash.com/photo-{}?w=800&h=600&fit=crop"

DEFAULT_IMAGE = _PHOTO.format("1546069901-ba9599a7e63c")
DEFAULT_IMAGE_SEARCH_URL = "https://source.unsplash.com/featured/"

FALLBACK_IMAGES = (
    DEFAULT_IMAGE,
    _PHOTO.format("1555939594-58d7cb561ad1"),
    _PHOTO.format("1540189549336-e6e99c3679fe"),
    _PHOTO.format("1565299624946-b28f40a0ae38"),
    _PHOTO.format("1565958011703-44f9829ba187"),
    _PHOTO.format("1482049016688-2d3e1b311543"),
    _PHOTO.format("1484723091739-30a097e8f929"),
    _PHOTO.format("1467003909585-2f8a72700288"),
    _PHOTO.format("1485921325833-c519f76c4927"),
    _PHOTO.format("1473093295043-cdd812d0e601"),
)

CATEGORY_IMAGES = {
    "pasta": _PHOTO.format("1473093295043-cdd812d0e601"),
    "spaghetti": _PHOTO.format("1473093295043-cdd812d0e601"),
    "noodle": _PHOTO.format("1569718212165-3a8278d5f624"),
    "ramen": _PHOTO.format("1569718212165-3a8278d5f624"),
    "curry": _PHOTO.format("1565557623262-b51c2513a641"),
    "salad": _PHOTO.format("1540189549336-e6e99c3679fe"),
    "soup": _PHOTO.format("1547592166-23ac45744acd"),
    "pizza": _PHOTO.format("1565299624946-b28f40a0ae38"),
    "burger": _PHOTO.format("1568901346375-23c9450c58cd"),
    "taco": _PHOTO.format("1565299585323-38d6b0865b47"),
    "salmon": _PHOTO.format("1467003909585-2f8a72700288"),
    "fish": _PHOTO.format("1485921325833-c519f76c4927"),
    "chicken": _PHOTO.format("1598103442097-8b74394b95c6"),
    "steak": _PHOTO.format("1546833999-b9f581a1996d"),
    "rice": _PHOTO.format("1512058564366-18510be2db19"),
    "pancake": _PHOTO.format("1567620905732-2d1ec7ab7445"),
    "breakfast": _PHOTO.format("1484723091739-30a097e8f929"),
    "dessert": _PHOTO.format("1551024601-bec78aea704b"),
    "cake": _PHOTO.format("1578985545062-69928b1d9587"),
    "bowl": _PHOTO.format("1546069901-ba9599a7e63c"),
}

STOP_WORDS = frozenset({"with", "and", "the", "for", "from", "recipe"})

# Dish and cuisine terms that make good image queries.
SEARCH_VOCABULARY = frozenset(
    {
        *CATEGORY_IMAGES,
        "sandwich",
        "stew",
        "risotto",
        "paella",
        "stir",
        "fry",
        "smoothie",
        "bread",
        "pie",
        "cookie",
        "beef",
        "pork",
        "shrimp",
        "tofu",
        "vegan",
        "vegetarian",
        "italian",
        "mexican",
        "thai",
        "indian",
        "chinese",
        "japanese",
        "mediterranean",
        "french",
    }
)

MAX_SEARCH_TERMS = 3
MAX_DUPLICATE_RETRIES = 2

_TOKEN = re.compile(r"[a-z0-9]+")


def _singular(token: str) -> str:
    if token.endswith("es") and token[:-2] in SEARCH_VOCABULARY:
        return token[:-2]
    if token.endswith("s") and token[:-1] in SEARCH_VOCABULARY:
        return token[:-1]
    return token


def _tokens(name: str) -> list[str]:
    return [
        _singular(token)
        for token in _TOKEN.findall((name or "").lower())
        if token not in STOP_WORDS
    ]


def search_keywords(name: str) -> list[str]:
    tokens = _tokens(name)
    if not tokens:
        return ["food"]

    ranked = [token for token in tokens if token in SEARCH_VOCABULARY]
    ranked += [token for token in tokens if token not in SEARCH_VOCABULARY]
    return list(dict.fromkeys(ranked))[:MAX_SEARCH_TERMS]


def category_image(name: str) -> str | None:
    for token in _tokens(name):
        image = CATEGORY_IMAGES.get(token)
        if image is not None:
            return image
    return None


def fallback_image(name: str) -> str:
    return category_image(name) or DEFAULT_IMAGE


class ImageResolver:
    """Best-effort photo lookup for a recipe name. Never raises."""

    def __init__(
        self,
        search_url: str = DEFAULT_IMAGE_SEARCH_URL,
        timeout_seconds: float = 4.0,
        enabled: bool = True,
        client: httpx.Client | None = None,
        rng: random.Random | None = None,
        fallback_pool: tuple[str, ...] = FALLBACK_IMAGES,
    ) -> None:
        self._search_url = search_url
        self._timeout_seconds = timeout_seconds
        self._enabled = enabled
        self._client = client
        self._rng = rng or random.Random()
        self._fallback_pool = fallback_pool

    def resolve(self, name: str) -> str:
        keywords = search_keywords(name)
        if self._enabled:
            url = self._lookup(keywords)
            if url is not None:
                return url

        return self._fallback(name)

    def _lookup(self, keywords: list[str]) -> str | None:
        # The provider sometimes serves a cached redirect. A second request
        # confirms the URL; while it repeats the previous attempt, ask again.
        query_url = f"{self._search_url}?{','.join(['food', *keywords])}"
        previous: str | None = None
        url: str | None = None
        for attempt in range(MAX_DUPLICATE_RETRIES + 1):
            try:
                url = self._fetch(query_url)
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                logger.info(
                    "image_lookup",
                    extra={
                        "outcome": "failure",
                        "error_class": exc.__class__.__name__,
                        "attempt": attempt,
                    },
                )
                return previous
            if url is None:
                return previous
            if previous is not None and url != previous:
                break
            previous = url

        logger.info("image_lookup", extra={"outcome": "success", "attempt": attempt})
        return url

    def _fetch(self, query_url: str) -> str | None:
        headers = {"Cache-Control": "no-cache", "Pragma": "no-cache"}
        if self._client is not None:
            response = self._client.get(
                query_url, headers=headers, timeout=self._timeout_seconds, follow_redirects=True
            )
        else:
            with httpx.Client(timeout=self._timeout_seconds, follow_redirects=True) as client:
                response = client.get(query_url, headers=headers)

        if not response.is_success:
            return None
        return str(response.url)

    def _fallback(self, name: str) -> str:
        image = category_image(name)
        if image is not None:
            return image
        if self._fallback_pool:
            return self._rng.choice(self._fallback_pool)
        return DEFAULT_IMAGE
