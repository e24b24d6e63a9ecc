from __future__ import annotations

import asyncio
import time
from typing import Optional

from loguru import logger

from webgather.config import Settings, settings as default_settings
from webgather.errors import AggregateError
from webgather.models.schemas import (
    AggregatedRetrieveResponse,
    ContentType,
    ExtractionOutcome,
    LiveCrawl,
    NormalizedPage,
    RetrieveRequest,
    broadcast_option,
)
from webgather.services import streaming
from webgather.services.extraction_resolver import ExtractionResolver
from webgather.services.streaming import ProgressSink

DEFAULT_FAILURE = "Failed to extract content"


class RetrieveExecutor:
    """Extracts every URL of a request concurrently and aggregates partial failures."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        resolver: ExtractionResolver | None = None,
        sink: Optional[ProgressSink] = None,
    ):
        self.settings = settings or default_settings
        self.resolver = resolver or ExtractionResolver(self.settings)
        self.sink = sink

    async def _resolve(
        self,
        url: str,
        content_type: ContentType,
        include_summary: bool,
        live_crawl: LiveCrawl,
    ) -> ExtractionOutcome:
        call = self.resolver.resolve_url(url, content_type, include_summary, live_crawl)
        timeout = self.settings.item_timeout_seconds
        if timeout and timeout > 0:
            try:
                return await asyncio.wait_for(call, timeout)
            except asyncio.TimeoutError:
                return ExtractionOutcome(
                    url=url,
                    source="error",
                    response_time=float(timeout),
                    error=f"Retrieve timed out after {timeout}s",
                )
        return await call

    async def _resolve_and_report(
        self,
        index: int,
        total: int,
        url: str,
        content_type: ContentType,
        include_summary: bool,
        live_crawl: LiveCrawl,
    ) -> ExtractionOutcome:
        """Resolve one URL and emit its completion event as soon as it settles."""
        try:
            outcome = await self._resolve(url, content_type, include_summary, live_crawl)
        except Exception:
            streaming.emit(
                self.sink,
                streaming.url_completed(url, index=index, total=total, source="error", success=False),
            )
            raise

        success = outcome.result is not None
        streaming.emit(
            self.sink,
            streaming.url_completed(
                url,
                index=index,
                total=total,
                source=outcome.source if success else "error",
                success=success,
            ),
        )
        return outcome

    async def retrieve(self, request: RetrieveRequest) -> AggregatedRetrieveResponse:
        started = time.monotonic()
        urls = list(request.urls)

        try:
            count = len(urls)
            content_types = broadcast_option(request.content_types, count, "general")
            include_summaries = broadcast_option(request.include_summary, count, True)
            live_crawls = broadcast_option(request.live_crawl, count, "preferred")

            settled = await asyncio.gather(
                *(
                    self._resolve_and_report(
                        i, count, url, content_types[i], include_summaries[i], live_crawls[i]
                    )
                    for i, url in enumerate(urls)
                ),
                return_exceptions=True,
            )

            results: list[NormalizedPage] = []
            sources: list[str] = []
            errors: list[str] = []

            for index, item in enumerate(settled):
                url = urls[index]
                if isinstance(item, BaseException):
                    errors.append(f"{url}: {item}")
                    sources.append("error")
                elif item.result is not None:
                    results.append(item.result)
                    sources.append(item.source)
                else:
                    errors.append(f"{url}: {item.error or DEFAULT_FAILURE}")
                    sources.append("error")

            response_time = time.monotonic() - started
            if not results:
                failure = AggregateError(errors)
                logger.error(f"Retrieve failed for every URL: {failure}")
                return AggregatedRetrieveResponse(
                    urls=urls,
                    results=[],
                    sources=sources,
                    response_time=response_time,
                    error=str(failure),
                )

            return AggregatedRetrieveResponse(
                urls=urls,
                results=results,
                sources=sources,
                response_time=response_time,
                partial_errors=errors or None,
            )
        except Exception as exc:
            logger.exception("Retrieve batch failed")
            return AggregatedRetrieveResponse(
                urls=urls,
                results=[],
                sources=[],
                response_time=time.monotonic() - started,
                error=str(exc) or "Failed to retrieve content",
            )
