from __future__ import annotations

from typing import Any, Callable, Optional

from loguru import logger

from webgather.models.events import EventType, QueryStatus, SSEEvent

ProgressSink = Callable[[SSEEvent], Any]


def query_started(query: str, *, index: int, total: int) -> SSEEvent:
    return SSEEvent(
        event=EventType.QUERY_COMPLETION,
        data={
            "query": query,
            "index": index,
            "total": total,
            "status": QueryStatus.STARTED.value,
            "resultsCount": 0,
            "imagesCount": 0,
        },
    )


def query_completed(
    query: str,
    *,
    index: int,
    total: int,
    provider: str,
    results_count: int,
    images_count: int,
) -> SSEEvent:
    return SSEEvent(
        event=EventType.QUERY_COMPLETION,
        data={
            "query": query,
            "index": index,
            "total": total,
            "status": QueryStatus.COMPLETED.value,
            "provider": provider,
            "resultsCount": results_count,
            "imagesCount": images_count,
        },
    )


def query_failed(query: str, *, index: int, total: int, error: str | None = None) -> SSEEvent:
    data: dict[str, Any] = {
        "query": query,
        "index": index,
        "total": total,
        "status": QueryStatus.ERROR.value,
        "provider": "error",
        "resultsCount": 0,
        "imagesCount": 0,
    }
    if error:
        data["error"] = error
    return SSEEvent(event=EventType.QUERY_COMPLETION, data=data)


def url_completed(url: str, *, index: int, total: int, source: str, success: bool) -> SSEEvent:
    return SSEEvent(
        event=EventType.URL_COMPLETION,
        data={"url": url, "index": index, "total": total, "source": source, "success": success},
    )


def emit(sink: Optional[ProgressSink], event: SSEEvent) -> None:
    """Fire-and-forget delivery; a failing sink never reaches the caller."""
    if sink is None:
        return
    try:
        sink(event)
    except Exception as exc:
        logger.warning(f"Progress sink rejected {event.event.value} event: {exc}")
