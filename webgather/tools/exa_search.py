from __future__ import annotations

from typing import Any

import httpx

from webgather.config import Settings, settings as default_settings
from webgather.errors import ProviderError
from webgather.models.schemas import RESULT_CONTENT_LIMIT, ResultRecord, SearchPayload, SearchTopic
from webgather.tools.web_utils import clean_title, dedupe_by_domain_and_url

EXA_MAX_RESULTS = 15


class ExaSearchClient:
    """Primary search capability backed by the Exa ``/search`` endpoint."""

    name = "exa"

    def __init__(self, settings: Settings | None = None, *, transport: httpx.AsyncBaseTransport | None = None):
        self.settings = settings or default_settings
        self._transport = transport

    def build_payload(self, query: str, max_results: int, topic: SearchTopic) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "query": query,
            "type": "auto",
            "numResults": max(1, min(max_results, EXA_MAX_RESULTS)),
            "contents": {"text": {"maxCharacters": RESULT_CONTENT_LIMIT}},
            "livecrawl": "auto",
        }
        if topic == "news":
            payload["category"] = "news"
        return payload

    async def search(self, query: str, max_results: int, topic: SearchTopic) -> SearchPayload:
        if not self.settings.exa_api_key:
            raise ProviderError(self.name, "EXA_API_KEY is not configured")

        endpoint = self.settings.exa_base_url.rstrip("/") + "/search"
        try:
            async with httpx.AsyncClient(
                timeout=self.settings.search_timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    endpoint,
                    json=self.build_payload(query, max_results, topic),
                    headers={
                        "x-api-key": self.settings.exa_api_key,
                        "Content-Type": "application/json",
                    },
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as exc:
            raise ProviderError(self.name, f"Exa search failed with status {exc.response.status_code}") from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise ProviderError(self.name, f"Exa search failed: {exc}") from exc

        return SearchPayload(results=dedupe_by_domain_and_url(map_results(data)), images=[])


def map_results(data: Any) -> list[ResultRecord]:
    raw_results = data.get("results") if isinstance(data, dict) else None
    if not isinstance(raw_results, list):
        return []
    mapped: list[ResultRecord] = []
    for item in raw_results:
        if not isinstance(item, dict) or not item.get("url"):
            continue
        mapped.append(
            ResultRecord(
                url=str(item["url"]),
                title=clean_title(str(item.get("title") or "")),
                content=str(item.get("text") or "")[:RESULT_CONTENT_LIMIT],
                published_date=item.get("publishedDate") or None,
                author=item.get("author") or None,
            )
        )
    return mapped
