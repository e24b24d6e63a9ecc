from __future__ import annotations

from typing import Any

import httpx

from webgather.config import Settings, settings as default_settings
from webgather.errors import ProviderError
from webgather.models.schemas import (
    IMAGE_LIMIT,
    RESULT_CONTENT_LIMIT,
    ImageRecord,
    ResultRecord,
    SearchPayload,
    SearchTopic,
)
from webgather.tools.web_utils import clean_title, dedupe_by_domain_and_url

USER_AGENT = "webgather-search/1.0"


class SearxngSearchClient:
    """Fallback search capability backed by a self-hosted SearXNG instance."""

    name = "searxng"

    def __init__(self, settings: Settings | None = None, *, transport: httpx.AsyncBaseTransport | None = None):
        self.settings = settings or default_settings
        self._transport = transport

    def build_params(self, query: str, topic: SearchTopic) -> dict[str, str]:
        return {
            "q": query,
            "format": "json",
            "language": "en-US",
            "safesearch": "1",
            "categories": "news" if topic == "news" else "general",
        }

    async def search(self, query: str, max_results: int, topic: SearchTopic) -> SearchPayload:
        endpoint = f"{self.settings.searxng_host}/search"
        try:
            async with httpx.AsyncClient(
                timeout=self.settings.search_timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.get(
                    endpoint,
                    params=self.build_params(query, topic),
                    headers={"Accept": "application/json", "User-Agent": USER_AGENT},
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as exc:
            raise ProviderError(self.name, f"SearXNG failed with status {exc.response.status_code}") from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise ProviderError(self.name, f"SearXNG failed: {exc}") from exc

        return SearchPayload(
            results=dedupe_by_domain_and_url(map_results(data, max_results)),
            images=dedupe_by_domain_and_url(map_images(data)),
        )


def map_results(data: Any, max_results: int) -> list[ResultRecord]:
    raw_results = data.get("results") if isinstance(data, dict) else None
    if not isinstance(raw_results, list):
        return []
    mapped: list[ResultRecord] = []
    for item in raw_results[:max_results]:
        if not isinstance(item, dict) or not item.get("url"):
            continue
        content = item.get("content") or item.get("snippet") or ""
        mapped.append(
            ResultRecord(
                url=str(item["url"]),
                title=clean_title(str(item.get("title") or "")),
                content=str(content)[:RESULT_CONTENT_LIMIT],
                published_date=item.get("publishedDate") or item.get("published_date") or None,
                author=item.get("author") or item.get("engine") or None,
            )
        )
    return mapped


def map_images(data: Any) -> list[ImageRecord]:
    boxes = data.get("infoboxes") if isinstance(data, dict) else None
    if not isinstance(boxes, list):
        return []
    raw_images: list[Any] = []
    for box in boxes:
        if isinstance(box, dict) and isinstance(box.get("images"), list):
            raw_images.extend(box["images"])

    images: list[ImageRecord] = []
    for img in raw_images[:IMAGE_LIMIT]:
        if not isinstance(img, dict):
            continue
        url = img.get("url") if isinstance(img.get("url"), str) else ""
        if not url:
            continue
        title = img.get("title") if isinstance(img.get("title"), str) else "Related image"
        images.append(ImageRecord(url=url, description=clean_title(title)))
    return images
