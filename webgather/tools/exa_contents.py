from __future__ import annotations

from typing import Any

import httpx

from webgather.config import Settings, settings as default_settings
from webgather.errors import ProviderError
from webgather.models.schemas import PAGE_CONTENT_LIMIT, ExtractedPayload, LiveCrawl


def exa_livecrawl(live_crawl: LiveCrawl | str | None) -> str:
    if live_crawl == "never":
        return "never"
    if live_crawl == "preferred":
        return "preferred"
    return "auto"


class ExaContentsClient:
    """Tier 1 extraction: Exa ``/contents`` with live crawling."""

    name = "exa"

    def __init__(self, settings: Settings | None = None, *, transport: httpx.AsyncBaseTransport | None = None):
        self.settings = settings or default_settings
        self._transport = transport

    async def extract(self, url: str, live_crawl: LiveCrawl = "preferred") -> ExtractedPayload | None:
        if not self.settings.exa_api_key:
            raise ProviderError(self.name, "EXA_API_KEY is not configured")

        endpoint = self.settings.exa_base_url.rstrip("/") + "/contents"
        payload = {
            "urls": [url],
            "text": {"maxCharacters": PAGE_CONTENT_LIMIT, "includeHtmlTags": False},
            "livecrawl": exa_livecrawl(live_crawl),
        }
        try:
            async with httpx.AsyncClient(
                timeout=self.settings.extract_timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    endpoint,
                    json=payload,
                    headers={
                        "x-api-key": self.settings.exa_api_key,
                        "Content-Type": "application/json",
                    },
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as exc:
            raise ProviderError(self.name, f"Exa contents failed with status {exc.response.status_code}") from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise ProviderError(self.name, f"Exa contents failed: {exc}") from exc

        match = _select_match(data, url)
        if match is None:
            return None
        return ExtractedPayload(
            text=str(match.get("text") or ""),
            title=match.get("title") or None,
            author=match.get("author") or None,
            published_date=match.get("publishedDate") or None,
            image=match.get("image") or None,
            favicon=match.get("favicon") or None,
        )


def _select_match(data: Any, url: str) -> dict[str, Any] | None:
    results = data.get("results") if isinstance(data, dict) else None
    if not isinstance(results, list):
        return None
    candidates = [item for item in results if isinstance(item, dict)]
    for item in candidates:
        if item.get("url") == url:
            return item
    return candidates[0] if candidates else None
