from __future__ import annotations

import re
from typing import Iterable, Protocol, TypeVar
from urllib.parse import urlparse

from bs4 import BeautifulSoup

NO_SUMMARY = "No summary available"
ELLIPSIS = "…"

_HTTP_URL = re.compile(r"^https?://", re.IGNORECASE)
_DOMAIN = re.compile(r"^https?://([^/?#]+)(?:[/?#]|$)", re.IGNORECASE)
_BRACKETED = re.compile(r"\[.*?\]")
_PARENTHESIZED = re.compile(r"\(.*?\)")
_WHITESPACE = re.compile(r"\s+")


def is_http_url(url: str) -> bool:
    return isinstance(url, str) and bool(_HTTP_URL.match(url))


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text or "").strip()


def strip_html(html: str) -> str:
    """Drop script/style blocks and markup, then fold whitespace."""
    if not html:
        return ""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style"]):
        tag.decompose()
    return collapse_whitespace(soup.get_text(" "))


def clean_title(title: str) -> str:
    """Remove bracketed and parenthetical segments from a title."""
    title = _BRACKETED.sub("", title or "")
    title = _PARENTHESIZED.sub("", title)
    return collapse_whitespace(title)


def summarize(text: str, max_length: int = 240) -> str:
    if not text:
        return NO_SUMMARY
    normalized = collapse_whitespace(text)
    if len(normalized) > max_length:
        return normalized[: max_length - 1] + ELLIPSIS
    return normalized


def truncate(text: str, max_length: int) -> str:
    return (text or "")[:max_length]


def to_favicon(url: str) -> str:
    try:
        host = urlparse(url).hostname
    except ValueError:
        return ""
    if not host:
        return ""
    return f"https://www.google.com/s2/favicons?domain={host}&sz=128"


def extract_domain(url: str | None) -> str:
    """Host portion of an http(s) URL; the raw string when it does not parse."""
    if not url or not isinstance(url, str):
        return ""
    match = _DOMAIN.match(url)
    return match.group(1) if match else url


class HasUrl(Protocol):
    url: str


U = TypeVar("U", bound=HasUrl)


def dedupe_by_domain_and_url(items: Iterable[U]) -> list[U]:
    """Keep the first item per URL *and* per domain, preserving order.

    A second item from an already-seen domain is dropped even when its URL
    differs.
    """
    seen_urls: set[str] = set()
    seen_domains: set[str] = set()
    kept: list[U] = []
    for item in items:
        domain = extract_domain(item.url)
        if item.url in seen_urls or domain in seen_domains:
            continue
        seen_urls.add(item.url)
        seen_domains.add(domain)
        kept.append(item)
    return kept
