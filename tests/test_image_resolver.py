import random

import httpx

from app.services.image_resolver import (
    CATEGORY_IMAGES,
    DEFAULT_IMAGE,
    FALLBACK_IMAGES,
    ImageResolver,
    fallback_image,
    search_keywords,
)

SEARCH_URL = "https://source.unsplash.com/featured/"


def _redirecting_client(targets: list[str], calls: list[httpx.Request]) -> httpx.Client:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "source.unsplash.com":
            calls.append(request)
            target = targets.pop(0) if len(targets) > 1 else targets[0]
            return httpx.Response(302, headers={"location": target})
        return httpx.Response(200, content=b"jpeg")

    return httpx.Client(transport=httpx.MockTransport(handler))


def test_search_keywords_prefers_vocabulary_and_drops_stop_words() -> None:
    assert search_keywords("Creamy Pasta with Chicken and Mushrooms") == [
        "pasta",
        "chicken",
        "creamy",
    ]
    assert search_keywords("The Recipe for Tacos") == ["taco"]
    assert search_keywords("") == ["food"]
    assert search_keywords("with and the") == ["food"]


def test_resolve_returns_redirected_image_url() -> None:
    calls: list[httpx.Request] = []
    client = _redirecting_client(
        [
            "https://images.unsplash.com/photo-pasta-1",
            "https://images.unsplash.com/photo-pasta-2",
        ],
        calls,
    )
    resolver = ImageResolver(search_url=SEARCH_URL, client=client)

    url = resolver.resolve("Spicy Thai Curry")

    assert url == "https://images.unsplash.com/photo-pasta-2"
    assert len(calls) == 2
    assert "curry" in str(calls[0].url)
    assert "food" in str(calls[0].url)
    assert calls[0].headers["cache-control"] == "no-cache"


def test_resolve_retries_when_consecutive_attempts_repeat_url() -> None:
    calls: list[httpx.Request] = []
    client = _redirecting_client(
        [
            "https://images.unsplash.com/photo-a",
            "https://images.unsplash.com/photo-a",
            "https://images.unsplash.com/photo-b",
        ],
        calls,
    )
    resolver = ImageResolver(search_url=SEARCH_URL, client=client)

    assert resolver.resolve("pasta") == "https://images.unsplash.com/photo-b"
    assert len(calls) == 3


def test_resolve_accepts_duplicate_after_exhausting_retries() -> None:
    calls: list[httpx.Request] = []
    client = _redirecting_client(["https://images.unsplash.com/photo-same"], calls)
    resolver = ImageResolver(search_url=SEARCH_URL, client=client)

    assert resolver.resolve("salad") == "https://images.unsplash.com/photo-same"
    assert len(calls) == 3


def test_separate_resolvers_each_retry_a_cached_redirect() -> None:
    calls: list[httpx.Request] = []
    client = _redirecting_client(["https://images.unsplash.com/photo-same"], calls)

    for _ in range(2):
        ImageResolver(search_url=SEARCH_URL, client=client).resolve("soup")

    assert len(calls) == 2 * 3


def test_resolve_keeps_previous_url_when_retry_fails() -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "source.unsplash.com":
            calls.append(request)
            if len(calls) == 1:
                return httpx.Response(
                    302, headers={"location": "https://images.unsplash.com/photo-a"}
                )
            return httpx.Response(503)
        return httpx.Response(200, content=b"jpeg")

    client = httpx.Client(transport=httpx.MockTransport(handler))
    resolver = ImageResolver(search_url=SEARCH_URL, client=client)

    assert resolver.resolve("Chicken Tacos") == "https://images.unsplash.com/photo-a"
    assert len(calls) == 2


def test_resolve_keeps_previous_url_when_retry_times_out() -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "source.unsplash.com":
            calls.append(request)
            if len(calls) > 1:
                raise httpx.ReadTimeout("timed out", request=request)
            return httpx.Response(302, headers={"location": "https://images.unsplash.com/photo-a"})
        return httpx.Response(200, content=b"jpeg")

    client = httpx.Client(transport=httpx.MockTransport(handler))
    resolver = ImageResolver(search_url=SEARCH_URL, client=client)

    assert resolver.resolve("pizza") == "https://images.unsplash.com/photo-a"


def test_resolve_falls_back_to_category_image_on_timeout() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    client = httpx.Client(transport=httpx.MockTransport(handler))
    resolver = ImageResolver(search_url=SEARCH_URL, client=client)

    assert resolver.resolve("Chicken Tacos") == CATEGORY_IMAGES["chicken"]


def test_resolve_falls_back_to_pool_on_error_status() -> None:
    client = httpx.Client(transport=httpx.MockTransport(lambda _: httpx.Response(503)))
    resolver = ImageResolver(search_url=SEARCH_URL, client=client, rng=random.Random(7))

    url = resolver.resolve("Grandma's Mystery Dish")

    assert url in FALLBACK_IMAGES


def test_resolve_uses_placeholder_when_pool_is_empty() -> None:
    resolver = ImageResolver(enabled=False, fallback_pool=())

    assert resolver.resolve("Mystery Dish") == DEFAULT_IMAGE


def test_resolve_with_empty_name_never_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    client = httpx.Client(transport=httpx.MockTransport(handler))
    resolver = ImageResolver(search_url=SEARCH_URL, client=client, timeout_seconds=0.5)

    url = resolver.resolve("")

    assert url.startswith("https://")
    assert httpx.URL(url).host


def test_disabled_resolver_makes_no_request() -> None:
    calls: list[httpx.Request] = []
    client = _redirecting_client(["https://images.unsplash.com/photo-x"], calls)
    resolver = ImageResolver(enabled=False, client=client)

    assert resolver.resolve("pizza") == CATEGORY_IMAGES["pizza"]
    assert calls == []


def test_fallback_image_is_deterministic() -> None:
    assert fallback_image("Beef Burgers") == CATEGORY_IMAGES["burger"]
    assert fallback_image("Something Unusual") == DEFAULT_IMAGE
