from __future__ import annotations

from kbfirst.config import settings
from kbfirst.models.interfaces import SearchResponse
from kbfirst.tools import brave_search, serper_search
from kbfirst.tools.serper_search import SearchError

MAX_RESULTS_CAP = 10

__all__ = ["MAX_RESULTS_CAP", "SearchError", "recency_bucket", "search"]


def recency_bucket(recency_days: int | None) -> str | None:
    """Map a day window onto the providers' fixed recency filters."""
    if not recency_days or recency_days <= 0:
        return None
    if recency_days <= 7:
        return "week"
    if recency_days <= 31:
        return "month"
    if recency_days <= 365:
        return "year"
    return None


async def search(
    query: str,
    top_k: int = 5,
    recency_days: int | None = None,
) -> SearchResponse:
    provider = settings.search_provider.lower().strip()
    max_results = max(min(int(top_k), MAX_RESULTS_CAP), 1)
    time_range = recency_bucket(recency_days)

    if provider == "serper":
        results = await serper_search.search(
            query,
            max_results=max_results,
            time_range=time_range,
        )
        return SearchResponse(results=results, provider="serper")

    if provider == "brave":
        results = await brave_search.search(
            query,
            max_results=max_results,
            time_range=time_range,
        )
        return SearchResponse(results=results, provider="brave")

    raise ValueError(f"Unsupported SEARCH_PROVIDER: {settings.search_provider}")
