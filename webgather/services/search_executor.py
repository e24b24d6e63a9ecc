from __future__ import annotations

import asyncio
from typing import Optional

from loguru import logger

from webgather.config import Settings, settings as default_settings
from webgather.models.schemas import SearchOutcome, SearchRequest, SearchResponse, SearchTopic
from webgather.services import streaming
from webgather.services.streaming import ProgressSink
from webgather.tools.search_provider import SearchProvider


class SearchExecutor:
    """Runs every query of a request concurrently and reports per-query progress."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        provider: SearchProvider | None = None,
        sink: Optional[ProgressSink] = None,
    ):
        self.settings = settings or default_settings
        self.provider = provider or SearchProvider(self.settings)
        self.sink = sink

    async def _resolve(self, query: str, max_results: int, topic: SearchTopic) -> SearchOutcome:
        timeout = self.settings.item_timeout_seconds
        if timeout and timeout > 0:
            return await asyncio.wait_for(self.provider.resolve_query(query, max_results, topic), timeout)
        return await self.provider.resolve_query(query, max_results, topic)

    async def run_single_query(
        self,
        query: str,
        *,
        index: int,
        total: int,
        max_results: int,
        topic: SearchTopic,
    ) -> SearchOutcome:
        streaming.emit(self.sink, streaming.query_started(query, index=index, total=total))

        try:
            outcome = await self._resolve(query, max_results, topic)
        except asyncio.TimeoutError:
            message = f"Search timed out after {self.settings.item_timeout_seconds}s"
            logger.error(f"Web search failed for query '{query}': {message}")
            outcome = SearchOutcome(query=query, provider="error", error=message)
        except Exception as exc:
            logger.exception(f"Web search failed for query '{query}'")
            outcome = SearchOutcome(query=query, provider="error", error=str(exc))

        if outcome.provider == "error":
            event = streaming.query_failed(query, index=index, total=total, error=outcome.error)
        else:
            event = streaming.query_completed(
                query,
                index=index,
                total=total,
                provider=outcome.provider,
                results_count=len(outcome.results),
                images_count=len(outcome.images),
            )
        streaming.emit(self.sink, event)
        return outcome

    async def search(self, request: SearchRequest) -> SearchResponse:
        capped = list(request.queries[: self.settings.max_queries])
        total = len(capped)

        tasks = [
            self.run_single_query(
                query,
                index=index,
                total=total,
                max_results=request.max_results_for(index),
                topic=request.topic_for(index),
            )
            for index, query in enumerate(capped)
        ]
        searches = await asyncio.gather(*tasks)
        return SearchResponse(searches=list(searches))
