from __future__ import annotations

from typing import Protocol

from webgather.models.schemas import ExtractedPayload, LiveCrawl, SearchPayload, SearchTopic


class SearchCapability(Protocol):
    name: str

    async def search(self, query: str, max_results: int, topic: SearchTopic) -> SearchPayload: ...


class ExtractCapability(Protocol):
    name: str

    async def extract(self, url: str, live_crawl: LiveCrawl = "preferred") -> ExtractedPayload | None: ...
