"""webgather - resilient web search and content retrieval

Simple CLI for running searches and URL retrieval.
"""

import argparse
import asyncio
import json

from webgather import api
from webgather.config import settings
from webgather.models.events import EventType, SSEEvent
from webgather.services.logger import configure_logging


def print_event(event: SSEEvent) -> None:
    data = event.data

    if event.event == EventType.QUERY_COMPLETION:
        position = f"[{data.get('index', 0) + 1}/{data.get('total', 0)}]"
        status = data.get("status")
        if status == "started":
            print(f"{position} searching: {data.get('query')}")
        elif status == "completed":
            print(
                f"{position} done via {data.get('provider')}: "
                f"{data.get('resultsCount')} results, {data.get('imagesCount')} images"
            )
        else:
            print(f"{position} failed: {data.get('query')}")

    elif event.event == EventType.URL_COMPLETION:
        mark = "+" if data.get("success") else "!"
        print(f"[{mark}] {data.get('url')} ({data.get('source')})")


async def run_search(queries: list[str], max_results: int | None, topic: str | None) -> dict:
    response = await api.search(
        queries,
        max_results=[max_results] if max_results else None,
        topics=[topic] if topic else None,
        sink=print_event,
        settings=settings,
    )
    return response.to_dict()


async def run_retrieve(urls: list[str], live_crawl: str | None) -> dict:
    response = await api.retrieve(
        urls,
        live_crawl=[live_crawl] if live_crawl else None,
        sink=print_event,
        settings=settings,
    )
    return response.to_dict()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="webgather search and retrieval")
    subparsers = parser.add_subparsers(dest="command", required=True)

    search_parser = subparsers.add_parser("search", help="Run one or more web searches")
    search_parser.add_argument("--query", "-q", action="append", required=True, help="Search query (repeatable)")
    search_parser.add_argument("--max-results", "-n", type=int, help="Max results per query (1-20)")
    search_parser.add_argument("--topic", "-t", choices=["general", "news"], help="Topic for every query")

    retrieve_parser = subparsers.add_parser("retrieve", help="Extract content from URLs")
    retrieve_parser.add_argument("urls", nargs="+", help="URLs to retrieve")
    retrieve_parser.add_argument("--live-crawl", choices=["never", "auto", "preferred"], help="Crawl preference")

    return parser


def main(argv: list[str] | None = None):
    args = build_parser().parse_args(argv)
    configure_logging(settings)

    if args.command == "search":
        output = asyncio.run(run_search(args.query, args.max_results, args.topic))
    else:
        output = asyncio.run(run_retrieve(args.urls, args.live_crawl))

    print(json.dumps(output, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
