from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

import main
from webgather.models.events import EventType
from webgather.models.schemas import AggregatedRetrieveResponse, SearchOutcome, SearchResponse
from webgather.services import streaming


def test_build_parser_accepts_repeated_queries():
    args = main.build_parser().parse_args(["search", "-q", "one", "-q", "two", "-n", "5", "-t", "news"])

    assert args.command == "search"
    assert args.query == ["one", "two"]
    assert args.max_results == 5
    assert args.topic == "news"


def test_build_parser_retrieve_subcommand():
    args = main.build_parser().parse_args(["retrieve", "https://a.com", "https://b.com", "--live-crawl", "never"])

    assert args.urls == ["https://a.com", "https://b.com"]
    assert args.live_crawl == "never"


def test_query_event_structure():
    started = streaming.query_started("q", index=0, total=2)
    failed = streaming.query_failed("q", index=1, total=2, error="boom")

    assert started.event == EventType.QUERY_COMPLETION
    assert started.data == {
        "query": "q",
        "index": 0,
        "total": 2,
        "status": "started",
        "resultsCount": 0,
        "imagesCount": 0,
    }
    assert failed.data["status"] == "error"
    assert failed.data["error"] == "boom"
    assert failed.format().startswith("event: query_completion\n")


@pytest.mark.asyncio
async def test_run_search_broadcasts_cli_options():
    response = SearchResponse(searches=[SearchOutcome(query="q", provider="exa")])
    with patch("main.api.search", new=AsyncMock(return_value=response)) as search:
        output = await main.run_search(["q"], 3, "news")

    assert output == {"searches": [{"query": "q", "provider": "exa", "results": [], "images": []}]}
    kwargs = search.await_args.kwargs
    assert kwargs["max_results"] == [3]
    assert kwargs["topics"] == ["news"]


@pytest.mark.asyncio
async def test_run_retrieve_returns_wire_shape():
    response = AggregatedRetrieveResponse(urls=["x"], sources=["error"], error="x: Invalid URL")
    with patch("main.api.retrieve", new=AsyncMock(return_value=response)):
        output = await main.run_retrieve(["x"], None)

    assert output["error"] == "x: Invalid URL"
    assert output["results"] == []
