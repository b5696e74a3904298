"""Tests for the Brave Search client, against a mocked transport."""
import httpx
import pytest

from app.services.errors import ProviderError
from app.services.search import BraveSearchService

BASE_URL = "https://search.test/res/v1/web/search"


def _service(handler) -> BraveSearchService:
    return BraveSearchService(
        api_key="brave-test",
        base_url=BASE_URL,
        timeout=5,
        transport=httpx.MockTransport(handler),
    )


def _payload(*results):
    return {"type": "search", "web": {"results": list(results)}}


@pytest.mark.asyncio
async def test_search_maps_web_results():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = dict(request.url.params)
        seen["token"] = request.headers["X-Subscription-Token"]
        return httpx.Response(
            200,
            json=_payload(
                {
                    "title": "Docker overview",
                    "url": "https://docs.docker.com/get-started/overview/",
                    "description": "Docker is an open platform.",
                },
                {"title": "No description", "url": "https://example.com/bare"},
            ),
        )

    sources = await _service(handler).search("docker basics", count=5)

    assert seen["params"] == {"q": "docker basics", "count": "5", "search_lang": "en"}
    assert seen["token"] == "brave-test"
    assert [(s.title, s.url, s.snippet) for s in sources] == [
        ("Docker overview", "https://docs.docker.com/get-started/overview/", "Docker is an open platform."),
        ("No description", "https://example.com/bare", ""),
    ]
    assert all(s.relevance_score is None for s in sources)


@pytest.mark.asyncio
async def test_results_without_url_are_dropped_and_count_is_capped():
    results = [{"title": "no url"}] + [
        {"title": f"r{i}", "url": f"https://example.com/{i}"} for i in range(8)
    ]

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=_payload(*results))

    sources = await _service(handler).search("docker", count=5)
    assert [s.url for s in sources] == [f"https://example.com/{i}" for i in range(4)]


@pytest.mark.asyncio
async def test_missing_web_section_means_no_hits():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"type": "search", "query": {"original": "zzz"}})

    assert await _service(handler).search("zzz") == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(429, json={"error": "rate limited"}),
        httpx.Response(200, content=b"not json"),
        httpx.Response(200, json=["unexpected"]),
        httpx.Response(200, json={"web": {"results": "nope"}}),
    ],
)
async def test_bad_responses_raise_provider_error(response):
    with pytest.raises(ProviderError) as exc_info:
        await _service(lambda request: response).search("docker")
    assert exc_info.value.provider == "brave-search"


@pytest.mark.asyncio
async def test_timeout_raises_provider_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("slow", request=request)

    with pytest.raises(ProviderError, match="timed out"):
        await _service(handler).search("docker")


@pytest.mark.asyncio
async def test_check_health_reflects_api_key():
    assert await BraveSearchService(api_key="k").check_health() is True
    assert await BraveSearchService(api_key="").check_health() is False
