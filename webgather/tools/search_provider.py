from __future__ import annotations

from loguru import logger

from webgather.config import Settings, settings as default_settings
from webgather.services.attempt import Attempt, attempt
from webgather.models.schemas import SearchOutcome, SearchPayload, SearchTopic
from webgather.tools.capabilities import SearchCapability
from webgather.tools.exa_search import ExaSearchClient
from webgather.tools.searxng_search import SearxngSearchClient
from webgather.tools.web_utils import dedupe_by_domain_and_url


class SearchProvider:
    """Resolves one query: primary search first, fallback only on zero results.

    A primary call that raises is not retried against the fallback; the query
    resolves to an ``error`` outcome instead.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        primary: SearchCapability | None = None,
        fallback: SearchCapability | None = None,
    ):
        self.settings = settings or default_settings
        self.primary = primary or ExaSearchClient(self.settings)
        self.fallback = fallback or SearxngSearchClient(self.settings)

    async def _call(
        self,
        capability: SearchCapability,
        query: str,
        max_results: int,
        topic: SearchTopic,
        *,
        require_results: bool,
    ) -> Attempt[SearchPayload]:
        return await attempt(
            capability.name,
            query,
            lambda: capability.search(query, max_results, topic),
            is_empty=(lambda payload: not payload.results) if require_results else None,
        )

    async def resolve_query(self, query: str, max_results: int, topic: SearchTopic = "general") -> SearchOutcome:
        try:
            primary = await self._call(self.primary, query, max_results, topic, require_results=True)
            if primary.ok:
                return _outcome(query, primary)
            if not primary.empty:
                return _failed(query, str(primary.error))

            logger.info(f"{self.primary.name} returned no results for '{query}', trying {self.fallback.name}")
            # The fallback is the last stop, so an empty answer is still a valid outcome.
            fallback = await self._call(self.fallback, query, max_results, topic, require_results=False)
            if fallback.ok:
                return _outcome(query, fallback)
            return _failed(query, str(fallback.error))
        except Exception as exc:
            logger.exception(f"Web search failed for query '{query}'")
            return _failed(query, str(exc))


def _outcome(query: str, result: Attempt[SearchPayload]) -> SearchOutcome:
    payload = result.value or SearchPayload()
    return SearchOutcome(
        query=query,
        provider=result.provider,  # type: ignore[arg-type]
        results=dedupe_by_domain_and_url(payload.results),
        images=dedupe_by_domain_and_url(payload.images),
    )


def _failed(query: str, message: str) -> SearchOutcome:
    logger.error(f"Web search failed for query '{query}': {message}")
    return SearchOutcome(query=query, provider="error", results=[], images=[], error=message)
