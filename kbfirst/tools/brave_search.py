from __future__ import annotations

from typing import Any

import httpx

from kbfirst.config import settings
from kbfirst.models.interfaces import SearchHit
from kbfirst.tools.serper_search import SearchError

BRAVE_SEARCH_URL = "https://api.search.brave.com/res/v1/web/search"

FRESHNESS_MAP = {
    "week": "pw",
    "month": "pm",
    "year": "py",
}


async def search(
    query: str,
    *,
    max_results: int = 10,
    time_range: str | None = None,
) -> list[SearchHit]:
    """Execute a Brave web search and normalize results."""
    if not settings.brave_api_key:
        raise SearchError("BRAVE_API_KEY is not configured")

    params: dict[str, Any] = {
        "q": query,
        "count": max_results,
    }
    if time_range and time_range in FRESHNESS_MAP:
        params["freshness"] = FRESHNESS_MAP[time_range]

    async with httpx.AsyncClient(timeout=settings.search_timeout_s) as client:
        response = await client.get(
            BRAVE_SEARCH_URL,
            params=params,
            headers={
                "Accept": "application/json",
                "X-Subscription-Token": settings.brave_api_key,
            },
        )
        if not response.is_success:
            raise SearchError(
                f"Brave search failed: {response.status_code}",
                status_code=response.status_code,
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise SearchError(
                "Brave search returned invalid JSON",
                status_code=response.status_code,
            ) from exc

    web = (payload.get("web") or {}) if isinstance(payload, dict) else {}
    raw_results = (web.get("results") or []) if isinstance(web, dict) else []
    hits: list[SearchHit] = []
    for item in raw_results:
        url = item.get("url", "") or ""
        if not url:
            continue
        snippets = item.get("extra_snippets", []) or []
        description = item.get("description", "") or ""
        hits.append(
            SearchHit(
                title=item.get("title", "") or "",
                url=url,
                snippet=description.strip() or " ".join(snippets).strip(),
                # page_age is ISO; age is a display string that may not parse
                published_at=item.get("page_age") or item.get("age") or None,
            )
        )
    return hits
