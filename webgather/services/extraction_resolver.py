from __future__ import annotations

import time
from typing import Callable

from loguru import logger

from webgather.config import Settings, settings as default_settings
from webgather.errors import ValidationError
from webgather.models.schemas import (
    PAGE_CONTENT_LIMIT,
    ContentType,
    ExtractedPayload,
    ExtractionOutcome,
    LiveCrawl,
    NormalizedPage,
)
from webgather.services.attempt import attempt
from webgather.tools.capabilities import ExtractCapability
from webgather.tools.exa_contents import ExaContentsClient
from webgather.tools.http_fetch import HttpFetchClient
from webgather.tools.render_service import RenderServiceClient
from webgather.tools.web_utils import is_http_url, summarize, to_favicon, truncate

INVALID_URL_ERROR = "Invalid URL. URL must start with http:// or https://"
ALL_TIERS_FAILED_ERROR = "All extraction methods failed"


def validate_url(url: str) -> None:
    if not is_http_url(url):
        raise ValidationError(INVALID_URL_ERROR)


def _has_text(payload: ExtractedPayload) -> bool:
    return bool(payload.text and payload.text.strip())


def page_from_primary(url: str, payload: ExtractedPayload) -> NormalizedPage:
    return NormalizedPage(
        url=url,
        title=payload.title or url,
        description=summarize(payload.text),
        content=truncate(payload.text, PAGE_CONTENT_LIMIT),
        author=payload.author,
        published_date=payload.published_date,
        image=payload.image,
        favicon=payload.favicon or to_favicon(url),
    )


def page_from_fallback(url: str, payload: ExtractedPayload) -> NormalizedPage:
    return NormalizedPage(
        url=url,
        title=payload.title or url,
        description=summarize(payload.description) if payload.description else summarize(payload.text),
        content=truncate(payload.text, PAGE_CONTENT_LIMIT),
        image=payload.image,
        favicon=to_favicon(url),
    )


class ExtractionResolver:
    """Per-URL extraction across ordered tiers, stopping at the first with text.

    Tier 1 is the primary extraction API, tier 2 the headless render service,
    tier 3 a plain HTTP fetch. Any tier failure (raised or empty) advances to
    the next tier; only exhausting every tier yields a null result.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        tiers: list[ExtractCapability] | None = None,
    ):
        self.settings = settings or default_settings
        self.tiers: list[ExtractCapability] = tiers if tiers is not None else [
            ExaContentsClient(self.settings),
            RenderServiceClient(self.settings),
            HttpFetchClient(self.settings),
        ]

    async def resolve_url(
        self,
        url: str,
        content_type: ContentType = "general",
        include_summary: bool = True,
        live_crawl: LiveCrawl = "preferred",
    ) -> ExtractionOutcome:
        started = time.monotonic()

        def elapsed() -> float:
            return time.monotonic() - started

        try:
            validate_url(url)
        except ValidationError as exc:
            return ExtractionOutcome(
                url=url,
                source="validation",
                response_time=elapsed(),
                error=str(exc),
            )

        try:
            for position, tier in enumerate(self.tiers):
                result = await attempt(
                    tier.name,
                    url,
                    lambda tier=tier: tier.extract(url, live_crawl),
                    is_empty=lambda payload: not _has_text(payload),
                )
                if not result.ok:
                    if not result.empty:
                        logger.warning(f"{tier.name} retrieve failed for {url}: {result.error}")
                    continue

                build: Callable[[str, ExtractedPayload], NormalizedPage] = (
                    page_from_primary if position == 0 else page_from_fallback
                )
                return ExtractionOutcome(
                    url=url,
                    source=tier.name,  # type: ignore[arg-type]
                    response_time=elapsed(),
                    result=build(url, result.value),
                )

            return ExtractionOutcome(
                url=url,
                source="error",
                response_time=elapsed(),
                error=ALL_TIERS_FAILED_ERROR,
            )
        except Exception as exc:
            logger.exception(f"Retrieve failed for {url}")
            return ExtractionOutcome(
                url=url,
                source="error",
                response_time=elapsed(),
                error=str(exc) or "Failed to retrieve content",
            )
