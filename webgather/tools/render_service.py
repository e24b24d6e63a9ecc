from __future__ import annotations

from typing import Any

import httpx

from webgather.config import Settings, settings as default_settings
from webgather.errors import ProviderError
from webgather.models.schemas import ExtractedPayload, LiveCrawl
from webgather.tools.web_utils import strip_html

RENDER_WAIT_UNTIL = "networkidle"
RENDER_TIMEOUT_MS = 20000


class RenderServiceClient:
    """Tier 2 extraction: a self-hosted headless browser (Playwright) service.

    The service receives ``{url, waitUntil, timeoutMs}`` and answers with any of
    ``text``/``markdown``/``content``/``html`` plus optional metadata.
    """

    name = "playwright"

    def __init__(self, settings: Settings | None = None, *, transport: httpx.AsyncBaseTransport | None = None):
        self.settings = settings or default_settings
        self._transport = transport

    async def extract(self, url: str, live_crawl: LiveCrawl = "preferred") -> ExtractedPayload | None:
        try:
            async with httpx.AsyncClient(
                timeout=self.settings.render_timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    self.settings.render_endpoint,
                    json={"url": url, "waitUntil": RENDER_WAIT_UNTIL, "timeoutMs": RENDER_TIMEOUT_MS},
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as exc:
            raise ProviderError(self.name, f"Render service failed with status {exc.response.status_code}") from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise ProviderError(self.name, f"Render service failed: {exc}") from exc

        if not isinstance(data, dict):
            return None
        metadata = data.get("metadata") if isinstance(data.get("metadata"), dict) else {}

        text = data.get("text") or data.get("markdown") or data.get("content") or data.get("html") or ""
        text = str(text)
        if text.startswith("<"):
            text = strip_html(text)

        return ExtractedPayload(
            text=text,
            title=_first(data.get("title"), metadata.get("title")),
            description=_first(data.get("description"), metadata.get("description")),
            image=_first(data.get("image"), metadata.get("image")),
        )


def _first(*values: Any) -> str | None:
    for value in values:
        if isinstance(value, str) and value:
            return value
    return None
