from __future__ import annotations

import re

import httpx
from bs4 import BeautifulSoup

from webgather.config import Settings, settings as default_settings
from webgather.errors import ProviderError
from webgather.models.schemas import PAGE_CONTENT_LIMIT, ExtractedPayload, LiveCrawl
from webgather.tools.web_utils import strip_html, truncate

USER_AGENT = "webgather-retrieve/1.0"


def parse_html(html: str) -> ExtractedPayload:
    """Pull title, description, og:image and capped body text out of a raw page."""
    soup = BeautifulSoup(html, "html.parser")

    title = soup.title.get_text().strip() if soup.title else ""
    description_tag = soup.find("meta", attrs={"name": re.compile(r"^description$", re.I)})
    image_tag = soup.find("meta", attrs={"property": re.compile(r"^og:image$", re.I)})

    description = (description_tag.get("content") or "").strip() if description_tag else ""
    image = (image_tag.get("content") or "").strip() if image_tag else ""

    return ExtractedPayload(
        text=truncate(strip_html(html), PAGE_CONTENT_LIMIT),
        title=title or None,
        description=description or None,
        image=image or None,
    )


class HttpFetchClient:
    """Tier 3 extraction: plain GET and HTML parsing."""

    name = "http"

    def __init__(self, settings: Settings | None = None, *, transport: httpx.AsyncBaseTransport | None = None):
        self.settings = settings or default_settings
        self._transport = transport

    async def extract(self, url: str, live_crawl: LiveCrawl = "preferred") -> ExtractedPayload | None:
        try:
            async with httpx.AsyncClient(
                timeout=self.settings.fetch_timeout_seconds,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = await client.get(url, headers={"User-Agent": USER_AGENT})
                response.raise_for_status()
                html = response.text
        except httpx.HTTPStatusError as exc:
            raise ProviderError(self.name, f"HTTP fetch failed with status {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise ProviderError(self.name, f"HTTP fetch failed: {exc}") from exc

        return parse_html(html)
