from __future__ import annotations

import uuid

from kbfirst.agents.orchestrator import build_query
from kbfirst.agents.policy import RetrievalPolicy
from kbfirst.agents.url_selector import choose_best
from kbfirst.models.interfaces import PageSource, SearchFn
from kbfirst.models.schemas import CrawlRequest, CrawlResult
from kbfirst.services.logger import log_stage
from kbfirst.tools import web_utils


async def crawl(
    request: CrawlRequest,
    search: SearchFn,
    pages: PageSource,
    *,
    policy: RetrievalPolicy | None = None,
    request_id: str | None = None,
) -> CrawlResult:
    """Search, pick the best-ranked hit and return its extracted page.

    Unlike the answer path there is no quality gate and no fallback candidate:
    every failure is raised to the caller.
    """
    policy = policy or RetrievalPolicy.from_settings()
    request_id = request_id or uuid.uuid4().hex
    query = (request.query or "").strip()
    if not query:
        raise ValueError("query is required")

    search_query = build_query(query, request.site)
    response = await search(search_query, request.top_k, request.recency_days)
    log_stage(request_id, "crawl_search", "ok", query=search_query, hits=len(response.results))
    if not response.results:
        raise LookupError("No search results found")

    best = choose_best(
        response.results,
        recency_days=request.recency_days,
        allow_hints=policy.allow_hints,
        blocklist=policy.blocklist,
    )
    if best is None:
        raise LookupError("No suitable result after filtering")

    url = web_utils.clean_url(best.url)
    max_chars = request.max_chars if request.max_chars is not None else policy.max_chars
    page = await pages.fetch_and_extract(url, max_chars)
    log_stage(request_id, "crawl_fetch", "ok", url=url, chars=len(page.text))

    return CrawlResult(
        url=url,
        title=page.title,
        text=page.text,
        links=page.links,
        published_at=page.published_at,
    )
