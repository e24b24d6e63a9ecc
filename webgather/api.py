"""Public entry points: multi-query web search and multi-URL retrieval.

Neither function raises for per-item or batch failures; callers inspect the
returned objects instead.
"""

from __future__ import annotations

from typing import Optional

from webgather.config import Settings
from webgather.models.schemas import (
    AggregatedRetrieveResponse,
    ContentType,
    LiveCrawl,
    RetrieveRequest,
    SearchRequest,
    SearchResponse,
    SearchTopic,
)
from webgather.services.retrieve_executor import RetrieveExecutor
from webgather.services.search_executor import SearchExecutor
from webgather.services.streaming import ProgressSink


async def search(
    queries: list[str],
    max_results: Optional[list[int | None]] = None,
    topics: Optional[list[SearchTopic | None]] = None,
    *,
    sink: Optional[ProgressSink] = None,
    settings: Settings | None = None,
) -> SearchResponse:
    executor = SearchExecutor(settings, sink=sink)
    return await executor.search(SearchRequest(queries=queries, max_results=max_results, topics=topics))


async def retrieve(
    urls: list[str],
    content_types: Optional[list[ContentType]] = None,
    include_summary: Optional[list[bool]] = None,
    live_crawl: Optional[list[LiveCrawl]] = None,
    *,
    sink: Optional[ProgressSink] = None,
    settings: Settings | None = None,
) -> AggregatedRetrieveResponse:
    executor = RetrieveExecutor(settings, sink=sink)
    return await executor.retrieve(
        RetrieveRequest(
            urls=urls,
            content_types=content_types,
            include_summary=include_summary,
            live_crawl=live_crawl,
        )
    )
