from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from webgather.config import Settings
from webgather.errors import ProviderError, ValidationError
from webgather.models.schemas import ExtractedPayload
from webgather.services.extraction_resolver import INVALID_URL_ERROR, ExtractionResolver, validate_url
from webgather.tools.http_fetch import parse_html


class FakeTier:
    def __init__(self, name: str, **mock_kwargs):
        self.name = name
        self.extract = AsyncMock(**mock_kwargs)


def _resolver(*tiers: FakeTier) -> ExtractionResolver:
    return ExtractionResolver(Settings(), tiers=list(tiers))


@pytest.mark.asyncio
async def test_invalid_url_is_rejected_without_network_calls():
    tier1 = FakeTier("exa")
    tier2 = FakeTier("playwright")
    tier3 = FakeTier("http")

    outcome = await _resolver(tier1, tier2, tier3).resolve_url("not-a-url")

    assert outcome.source == "validation"
    assert outcome.result is None
    assert "http://" in (outcome.error or "")
    tier1.extract.assert_not_awaited()
    tier2.extract.assert_not_awaited()
    tier3.extract.assert_not_awaited()


@pytest.mark.asyncio
async def test_primary_tier_builds_page_with_fallbacks():
    tier1 = FakeTier("exa", return_value=ExtractedPayload(text="Article body " * 50, author="Ann"))
    tier2 = FakeTier("playwright")

    outcome = await _resolver(tier1, tier2).resolve_url("https://example.com/a", live_crawl="never")

    assert outcome.source == "exa"
    page = outcome.result
    assert page is not None
    assert page.title == "https://example.com/a"
    assert len(page.description) == 240
    assert page.author == "Ann"
    assert page.favicon == "https://www.google.com/s2/favicons?domain=example.com&sz=128"
    assert page.language == "en"
    tier1.extract.assert_awaited_once_with("https://example.com/a", "never")
    tier2.extract.assert_not_awaited()


@pytest.mark.asyncio
async def test_empty_primary_falls_through_to_render_tier_and_skips_fetch():
    tier1 = FakeTier("exa", return_value=ExtractedPayload(text="   "))
    tier2 = FakeTier(
        "playwright",
        return_value=ExtractedPayload(text="Rendered text", title="Rendered", description="Short"),
    )
    tier3 = FakeTier("http")

    outcome = await _resolver(tier1, tier2, tier3).resolve_url("https://example.com")

    assert outcome.source == "playwright"
    assert outcome.result is not None
    assert outcome.result.title == "Rendered"
    assert outcome.result.description == "Short"
    tier3.extract.assert_not_awaited()


@pytest.mark.asyncio
async def test_raising_tiers_are_swallowed_until_fetch_succeeds():
    tier1 = FakeTier("exa", side_effect=ProviderError("exa", "quota"))
    tier2 = FakeTier("playwright", side_effect=RuntimeError("render down"))
    tier3 = FakeTier("http", return_value=ExtractedPayload(text="x" * 9000))

    outcome = await _resolver(tier1, tier2, tier3).resolve_url("https://example.com")

    assert outcome.source == "http"
    assert outcome.result is not None
    assert len(outcome.result.content) == 8000
    assert outcome.result.description.endswith("…")


@pytest.mark.asyncio
async def test_all_tiers_failing_yields_null_result():
    tier1 = FakeTier("exa", return_value=None)
    tier2 = FakeTier("playwright", side_effect=ProviderError("playwright", "down"))
    tier3 = FakeTier("http", return_value=ExtractedPayload(text=""))

    outcome = await _resolver(tier1, tier2, tier3).resolve_url("https://example.com")

    assert outcome.source == "error"
    assert outcome.result is None
    assert outcome.error == "All extraction methods failed"
    assert outcome.response_time >= 0


@pytest.mark.asyncio
async def test_normalizing_same_payload_twice_is_identical():
    payload = ExtractedPayload(text="Same content " * 1000, title="T")
    tier = FakeTier("exa", return_value=payload)
    resolver = _resolver(tier)

    first = await resolver.resolve_url("https://example.com")
    second = await resolver.resolve_url("https://example.com")

    assert first.result == second.result
    assert len(first.result.content) <= 8000


def test_validate_url_raises_for_non_http_schemes():
    with pytest.raises(ValidationError, match="must start with http"):
        validate_url("ftp://example.com")

    validate_url("https://example.com")


@pytest.mark.asyncio
async def test_invalid_url_outcome_carries_validation_message():
    outcome = await _resolver(FakeTier("exa")).resolve_url("example.com")

    assert outcome.error == INVALID_URL_ERROR


@pytest.mark.asyncio
async def test_render_tier_description_is_capped():
    tier1 = FakeTier("exa", return_value=None)
    tier2 = FakeTier("playwright", return_value=ExtractedPayload(text="body", description="e" * 500))

    outcome = await _resolver(tier1, tier2).resolve_url("https://example.com")

    assert outcome.source == "playwright"
    assert len(outcome.result.description) == 240
    assert outcome.result.description.endswith("…")


@pytest.mark.asyncio
async def test_fetch_tier_meta_description_is_capped():
    page = parse_html(
        '<html><head><meta name="description" content="' + "d" * 1000 + '"></head>'
        "<body><p>Body text.</p></body></html>"
    )
    tier1 = FakeTier("exa", return_value=None)
    tier2 = FakeTier("playwright", return_value=None)
    tier3 = FakeTier("http", return_value=page)

    outcome = await _resolver(tier1, tier2, tier3).resolve_url("https://example.com")

    assert outcome.source == "http"
    assert len(outcome.result.description) <= 240
    assert outcome.result.content.endswith("Body text.")
