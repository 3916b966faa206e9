from __future__ import annotations

import uuid

import httpx
from loguru import logger

from kbfirst.agents.policy import RetrievalPolicy
from kbfirst.agents.sufficiency import canonical_site_hint, is_sufficient, is_time_sensitive
from kbfirst.agents.url_selector import choose_best
from kbfirst.models.interfaces import (
    ExtractedPage,
    KnowledgeBase,
    PageSource,
    RetrievalResult,
    SearchFn,
    SearchHit,
)
from kbfirst.models.schemas import KB_PLACEHOLDER_URL, AnswerPayload, AnswerRequest, Source
from kbfirst.services.logger import log_stage
from kbfirst.tools import web_utils
from kbfirst.tools.kb_retriever import KnowledgeBaseError
from kbfirst.tools.page_fetcher import PageFetchError
from kbfirst.tools.search_provider import SearchError

QUESTION_REQUIRED = "question is required"
NO_SEARCH_RESULTS = "No search results found."
NO_QUALITY_SOURCE = "No authoritative recent source found."

MAX_CANDIDATES = 2


def build_query(question: str, site: str | None) -> str:
    return f"site:{site} {question}" if site else question


def candidate_order(hits: list[SearchHit], best: SearchHit | None) -> list[SearchHit]:
    """Top pick plus at most one fallback with a different URL."""
    if not hits:
        return []
    primary = best or hits[0]
    order = [primary]
    fallback = next((h for h in hits if h.url != primary.url), None)
    if fallback is not None:
        order.append(fallback)
    return order[:MAX_CANDIDATES]


class AnswerOrchestrator:
    """KB-first answer pipeline with a web fallback.

    Flow:
      1. Retrieve context from the knowledge base
      2. If it is sufficient, answer from it and stop
      3. Otherwise search the web (optionally pinned to a canonical site)
      4. Rank hits and fetch at most two candidates behind a quality gate
      5. Answer from the first page that passes, or report that none did

    Collaborators are injected so every external call can be faked.
    """

    def __init__(
        self,
        kb: KnowledgeBase,
        search: SearchFn,
        pages: PageSource,
        *,
        policy: RetrievalPolicy | None = None,
    ):
        self.kb = kb
        self.search = search
        self.pages = pages
        self.policy = policy or RetrievalPolicy.from_settings()

    async def answer(self, request: AnswerRequest, request_id: str | None = None) -> AnswerPayload:
        request_id = request_id or uuid.uuid4().hex
        question = (request.question or "").strip()

        if not question:
            log_stage(request_id, "validate", "rejected", reason="empty_question")
            return AnswerPayload(
                answer=QUESTION_REQUIRED, sources=[], method="kb", reason="question_required"
            )

        kb = await self._lookup_kb(question, request_id)
        if kb is not None and is_sufficient(question, kb.text, pattern=self.policy.time_sensitive):
            log_stage(request_id, "kb_sufficient", "kb", chars=len(kb.text))
            sources = kb.sources[: self.policy.max_sources] or [Source(url=KB_PLACEHOLDER_URL)]
            return AnswerPayload(answer=kb.text, sources=sources, method="kb", reason="kb_sufficient")
        log_stage(request_id, "kb_sufficient", "insufficient", found=kb is not None)

        return await self._answer_from_web(question, request, request_id)

    async def _lookup_kb(self, question: str, request_id: str) -> RetrievalResult | None:
        try:
            kb = await self.kb.retrieve(question)
        except KnowledgeBaseError as exc:
            log_stage(request_id, "kb_lookup", "error", error=str(exc))
            if not self.policy.kb_fail_open:
                raise
            return None
        log_stage(request_id, "kb_lookup", "hit" if kb else "empty")
        return kb

    async def _answer_from_web(
        self,
        question: str,
        request: AnswerRequest,
        request_id: str,
    ) -> AnswerPayload:
        site = request.site or canonical_site_hint(question, self.policy.canonical_sites)
        query = build_query(question, site)

        try:
            response = await self.search(query, request.top_k, request.recency_days)
            hits = response.results
        except (SearchError, httpx.HTTPError) as exc:
            log_stage(request_id, "web_search", "error", query=query, error=str(exc))
            return AnswerPayload(
                answer=NO_SEARCH_RESULTS, sources=[], method="web", reason="search_failed"
            )

        log_stage(request_id, "web_search", "ok", query=query, hits=len(hits), provider=response.provider)
        if not hits:
            return AnswerPayload(
                answer=NO_SEARCH_RESULTS, sources=[], method="web", reason="no_search_results"
            )

        best = choose_best(
            hits,
            recency_days=request.recency_days,
            allow_hints=self.policy.allow_hints,
            blocklist=self.policy.blocklist,
        )
        candidates = candidate_order(hits, best.hit if best else None)
        log_stage(
            request_id,
            "rank",
            "ok",
            best=best.url if best else None,
            score=best.score if best else None,
            candidates=[c.url for c in candidates],
        )

        max_chars = request.max_chars if request.max_chars is not None else self.policy.max_chars
        time_sensitive = is_time_sensitive(question, self.policy.time_sensitive)

        for attempt, hit in enumerate(candidates, start=1):
            stage = "fetch_primary" if attempt == 1 else "fetch_fallback"
            try:
                url = web_utils.clean_url(hit.url)
                page = await self.pages.fetch_and_extract(url, max_chars)
            except (PageFetchError, httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
                log_stage(request_id, stage, "failed", url=hit.url, error=str(exc))
                continue

            gate = self._quality_gate(page, time_sensitive)
            if gate:
                log_stage(request_id, stage, "rejected", url=url, gate=gate)
                continue

            log_stage(request_id, stage, "web", url=url)
            return AnswerPayload(
                answer=page.text[: self.policy.answer_chars],
                sources=[Source(url=url, title=page.title, published_at=page.published_at)],
                method="web",
                reason="web_page",
            )

        logger.info(f"No candidate passed the quality gate for request {request_id}")
        return AnswerPayload(
            answer=NO_QUALITY_SOURCE, sources=[], method="web", reason="no_quality_source"
        )

    def _quality_gate(self, page: ExtractedPage, time_sensitive: bool) -> str | None:
        """Name of the failed check, or None when the page is usable."""
        if len(page.text or "") <= self.policy.min_page_chars:
            return "too_short"
        if time_sensitive and not page.published_at:
            return "undated"
        return None
