"""Function entry points: one invocation per question, nothing shared between them."""

from __future__ import annotations

import asyncio
import uuid
from typing import Any

from kbfirst.agents.orchestrator import AnswerOrchestrator
from kbfirst.agents.policy import RetrievalPolicy
from kbfirst.agents.web_crawler import crawl
from kbfirst.config import settings
from kbfirst.models.schemas import AnswerRequest, CrawlRequest
from kbfirst.services.logger import log_event
from kbfirst.tools import search_provider
from kbfirst.tools.kb_retriever import KnowledgeBaseRetriever
from kbfirst.tools.page_fetcher import PageFetcher


def _request_id(context: Any) -> str:
    return str(getattr(context, "aws_request_id", "") or uuid.uuid4().hex)


def _arguments(event: dict[str, Any] | None) -> dict[str, Any]:
    # GraphQL resolvers send unset arguments as explicit nulls
    arguments = (event or {}).get("arguments") or {}
    return {key: value for key, value in arguments.items() if value is not None}


def build_orchestrator() -> AnswerOrchestrator:
    return AnswerOrchestrator(
        KnowledgeBaseRetriever(),
        search_provider.search,
        PageFetcher(),
        policy=RetrievalPolicy.from_settings(settings),
    )


def parse_answer_request(event: dict[str, Any] | None) -> AnswerRequest:
    return AnswerRequest.model_validate(
        {
            "topK": settings.default_top_k,
            "recencyDays": settings.default_recency_days,
            **_arguments(event),
        }
    )


def parse_crawl_request(event: dict[str, Any] | None) -> CrawlRequest:
    return CrawlRequest.model_validate(
        {
            "topK": settings.default_top_k,
            "recencyDays": settings.crawler_recency_days,
            **_arguments(event),
        }
    )


async def answer_question(request: AnswerRequest, request_id: str | None = None) -> dict[str, Any]:
    payload = await build_orchestrator().answer(request, request_id=request_id)
    return payload.to_response()


async def crawl_web(request: CrawlRequest, request_id: str | None = None) -> dict[str, Any]:
    result = await crawl(
        request,
        search_provider.search,
        PageFetcher(),
        policy=RetrievalPolicy.from_settings(settings),
        request_id=request_id,
    )
    return result.to_response()


def answer_handler(event: dict[str, Any] | None, context: Any = None) -> dict[str, Any]:
    request_id = _request_id(context)
    request = parse_answer_request(event)
    log_event("answer_request", "answer handler triggered", request_id=request_id)
    return asyncio.run(answer_question(request, request_id=request_id))


def crawl_handler(event: dict[str, Any] | None, context: Any = None) -> dict[str, Any]:
    request_id = _request_id(context)
    request = parse_crawl_request(event)
    log_event("crawl_request", "crawl handler triggered", request_id=request_id)
    return asyncio.run(crawl_web(request, request_id=request_id))
