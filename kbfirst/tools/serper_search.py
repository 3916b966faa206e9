from __future__ import annotations

from typing import Any

import httpx

from kbfirst.config import settings
from kbfirst.models.interfaces import SearchHit

TBS_MAP = {
    "week": "qdr:w",
    "month": "qdr:m",
    "year": "qdr:y",
}


class SearchError(RuntimeError):
    """Search provider rejected the request or is not configured."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


def map_organic(payload: dict[str, Any]) -> list[SearchHit]:
    items = payload.get("organic") or []
    hits: list[SearchHit] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        url = str(item.get("link") or "")
        if not url:
            continue
        hits.append(
            SearchHit(
                title=str(item.get("title") or ""),
                url=url,
                snippet=str(item.get("snippet") or ""),
                published_at=item.get("date") or None,
            )
        )
    return hits


async def search(
    query: str,
    *,
    max_results: int = 10,
    time_range: str | None = None,
) -> list[SearchHit]:
    """Execute a Serper (Google) web search and normalize the organic results."""
    if not settings.serper_api_key:
        raise SearchError("SERPER_API_KEY is not configured")

    body: dict[str, Any] = {"q": query, "num": max_results}
    if time_range and time_range in TBS_MAP:
        body["tbs"] = TBS_MAP[time_range]

    async with httpx.AsyncClient(timeout=settings.search_timeout_s) as client:
        response = await client.post(
            settings.serper_base_url.rstrip("/") + "/search",
            json=body,
            headers={
                "X-API-KEY": settings.serper_api_key,
                "Content-Type": "application/json",
            },
        )
        if not response.is_success:
            raise SearchError(
                f"Serper search failed: {response.status_code}",
                status_code=response.status_code,
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise SearchError(
                "Serper search returned invalid JSON",
                status_code=response.status_code,
            ) from exc

    return map_organic(payload if isinstance(payload, dict) else {})
