from __future__ import annotations

import json

import httpx
import pytest

from webgather.config import Settings
from webgather.errors import ProviderError
from webgather.tools.exa_search import ExaSearchClient
from webgather.tools.searxng_search import SearxngSearchClient


def _json_transport(payload, captured: list[httpx.Request], status_code: int = 200) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(status_code, json=payload)

    return httpx.MockTransport(handler)


def test_settings_sanitize_searxng_host():
    assert Settings(searxng_url="searx.local:8888/").searxng_host == "http://searx.local:8888"
    assert Settings(searxng_url="https://searx.example/").searxng_host == "https://searx.example"
    assert Settings(searxng_url="   ").searxng_host == "http://127.0.0.1:8080"


def test_settings_render_endpoint_defaults_when_blank():
    assert Settings(playwright_service_url="  ").render_endpoint == "http://127.0.0.1:3001/extract"
    assert Settings(playwright_service_url="http://render:9000/x").render_endpoint == "http://render:9000/x"


def test_exa_payload_clamps_results_and_maps_news_topic():
    client = ExaSearchClient(Settings(exa_api_key="k"))

    news = client.build_payload("q", 20, "news")
    general = client.build_payload("q", 0, "general")

    assert news["numResults"] == 15
    assert news["category"] == "news"
    assert news["contents"]["text"]["maxCharacters"] == 1000
    assert general["numResults"] == 1
    assert "category" not in general


@pytest.mark.asyncio
async def test_exa_search_maps_and_caps_results():
    captured: list[httpx.Request] = []
    payload = {
        "results": [
            {
                "url": "https://a.com/1",
                "title": "Title [ad] (2024)",
                "text": "x" * 5000,
                "publishedDate": "2024-01-01",
                "author": "Ann",
            },
            {"url": "https://a.com/2", "title": "Same domain", "text": "y"},
            {"title": "no url"},
        ]
    }
    client = ExaSearchClient(
        Settings(exa_api_key="secret", exa_base_url="https://exa.test"),
        transport=_json_transport(payload, captured),
    )

    result = await client.search("query", 5, "general")

    assert len(result.results) == 1
    record = result.results[0]
    assert record.title == "Title"
    assert len(record.content) == 1000
    assert record.published_date == "2024-01-01"
    assert record.author == "Ann"
    assert result.images == []

    request = captured[0]
    assert str(request.url) == "https://exa.test/search"
    assert request.headers["x-api-key"] == "secret"
    assert json.loads(request.content)["numResults"] == 5


@pytest.mark.asyncio
async def test_exa_search_requires_api_key():
    with pytest.raises(ProviderError):
        await ExaSearchClient(Settings(exa_api_key="")).search("q", 5, "general")


@pytest.mark.asyncio
async def test_exa_search_wraps_http_errors():
    client = ExaSearchClient(
        Settings(exa_api_key="k"),
        transport=_json_transport({}, [], status_code=500),
    )

    with pytest.raises(ProviderError) as excinfo:
        await client.search("q", 5, "general")

    assert "500" in str(excinfo.value)


@pytest.mark.asyncio
async def test_searxng_search_translates_parameters_and_maps_images():
    captured: list[httpx.Request] = []
    payload = {
        "results": [
            {"url": "https://a.com/1", "title": "One", "content": "first", "engine": "bing"},
            {"url": "https://b.com/1", "title": "Two", "snippet": "second", "publishedDate": "2024-02-02"},
            {"url": "https://c.com/1", "title": "Three", "content": "third"},
        ],
        "infoboxes": [
            {
                "images": [
                    {"url": "https://img.com/1.png", "title": "Logo (large)"},
                    {"url": "https://img.com/2.png", "title": "Duplicate domain"},
                    {"title": "missing url"},
                    {"url": "https://cdn.net/4.png"},
                ]
            }
        ],
    }
    client = SearxngSearchClient(
        Settings(searxng_url="searx.local"),
        transport=_json_transport(payload, captured),
    )

    result = await client.search("query", 2, "news")

    assert [r.url for r in result.results] == ["https://a.com/1", "https://b.com/1"]
    assert result.results[0].author == "bing"
    assert result.results[1].content == "second"
    assert result.results[1].published_date == "2024-02-02"
    # First three infobox images are considered; the URL-less one and the
    # same-domain duplicate are dropped.
    assert [(i.url, i.description) for i in result.images] == [("https://img.com/1.png", "Logo")]

    params = captured[0].url.params
    assert captured[0].url.host == "searx.local"
    assert captured[0].url.path == "/search"
    assert params["q"] == "query"
    assert params["format"] == "json"
    assert params["language"] == "en-US"
    assert params["safesearch"] == "1"
    assert params["categories"] == "news"


@pytest.mark.asyncio
async def test_searxng_search_raises_provider_error_on_status():
    client = SearxngSearchClient(Settings(), transport=_json_transport({}, [], status_code=503))

    with pytest.raises(ProviderError) as excinfo:
        await client.search("q", 5, "general")

    assert "503" in str(excinfo.value)
