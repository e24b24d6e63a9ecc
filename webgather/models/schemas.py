from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Sequence, TypeVar

SearchTopic = Literal["general", "news"]
ContentType = Literal["general", "twitter", "youtube", "tiktok", "instagram"]
LiveCrawl = Literal["never", "auto", "preferred"]
SearchProviderName = Literal["exa", "searxng", "error"]
ExtractionSource = Literal["exa", "playwright", "http", "validation", "error"]

DEFAULT_MAX_RESULTS = 10
MAX_RESULTS_CEILING = 20
RESULT_CONTENT_LIMIT = 1000
IMAGE_LIMIT = 3
PAGE_CONTENT_LIMIT = 8000
SUMMARY_LIMIT = 240

T = TypeVar("T")


def pick_option(values: Sequence[T | None] | None, index: int, default: T) -> T:
    """Per-item option lookup: the value at ``index``, else the first, else ``default``."""
    if not values:
        return default
    if index < len(values) and values[index] is not None:
        return values[index]  # type: ignore[return-value]
    if values[0] is not None:
        return values[0]  # type: ignore[return-value]
    return default


def broadcast_option(values: Sequence[T] | None, count: int, default: T) -> list[T]:
    """Expand an option list to ``count`` entries.

    A single value is broadcast to every item; longer lists are zipped by
    index and missing tail entries fall back to ``default``.
    """
    if not values:
        return [default] * count
    if len(values) == 1:
        return [values[0]] * count
    return [values[i] if i < len(values) and values[i] is not None else default for i in range(count)]


# --- Search ---


@dataclass(slots=True)
class SearchRequest:
    queries: list[str]
    max_results: list[int | None] | None = None
    topics: list[SearchTopic | None] | None = None

    def max_results_for(self, index: int) -> int:
        requested = pick_option(self.max_results, index, DEFAULT_MAX_RESULTS) or DEFAULT_MAX_RESULTS
        return max(1, min(int(requested), MAX_RESULTS_CEILING))

    def topic_for(self, index: int) -> SearchTopic:
        topic = pick_option(self.topics, index, "general")
        return "news" if topic == "news" else "general"


@dataclass(frozen=True, slots=True)
class ResultRecord:
    url: str
    title: str
    content: str
    published_date: str | None = None
    author: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "title": self.title,
            "content": self.content,
            "published_date": self.published_date,
            "author": self.author,
        }


@dataclass(frozen=True, slots=True)
class ImageRecord:
    url: str
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {"url": self.url, "description": self.description}


@dataclass(frozen=True, slots=True)
class SearchPayload:
    """What a search capability hands back for one query."""

    results: list[ResultRecord] = field(default_factory=list)
    images: list[ImageRecord] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class SearchOutcome:
    query: str
    provider: SearchProviderName
    results: list[ResultRecord] = field(default_factory=list)
    images: list[ImageRecord] = field(default_factory=list)
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "query": self.query,
            "provider": self.provider,
            "results": [r.to_dict() for r in self.results],
            "images": [i.to_dict() for i in self.images],
        }


@dataclass(slots=True)
class SearchResponse:
    searches: list[SearchOutcome] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"searches": [s.to_dict() for s in self.searches]}


# --- Retrieve ---


@dataclass(slots=True)
class RetrieveRequest:
    urls: list[str]
    content_types: list[ContentType] | None = None
    include_summary: list[bool] | None = None
    live_crawl: list[LiveCrawl] | None = None


@dataclass(frozen=True, slots=True)
class ExtractedPayload:
    """Raw fields a single extraction tier produced for one URL."""

    text: str
    title: str | None = None
    description: str | None = None
    author: str | None = None
    published_date: str | None = None
    image: str | None = None
    favicon: str | None = None


@dataclass(frozen=True, slots=True)
class NormalizedPage:
    url: str
    title: str
    description: str
    content: str
    favicon: str
    language: str = "en"
    author: str | None = None
    published_date: str | None = None
    image: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "title": self.title,
            "description": self.description,
            "content": self.content,
            "author": self.author,
            "publishedDate": self.published_date,
            "image": self.image,
            "favicon": self.favicon,
            "language": self.language,
        }


@dataclass(frozen=True, slots=True)
class ExtractionOutcome:
    url: str
    source: ExtractionSource
    response_time: float
    result: NormalizedPage | None = None
    error: str | None = None


@dataclass(slots=True)
class AggregatedRetrieveResponse:
    urls: list[str]
    results: list[NormalizedPage] = field(default_factory=list)
    sources: list[str] = field(default_factory=list)
    response_time: float = 0.0
    error: str | None = None
    partial_errors: list[str] | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "urls": self.urls,
            "results": [r.to_dict() for r in self.results],
            "sources": self.sources,
            "response_time": self.response_time,
        }
        if self.error is not None:
            payload["error"] = self.error
        if self.partial_errors:
            payload["partial_errors"] = self.partial_errors
        return payload
