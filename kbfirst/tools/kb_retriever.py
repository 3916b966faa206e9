from __future__ import annotations

import asyncio
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from kbfirst.config import settings
from kbfirst.models.interfaces import RetrievalResult
from kbfirst.models.schemas import KB_PLACEHOLDER_URL, Source
from kbfirst.tools import web_utils

TOP_CHUNKS = 3


class KnowledgeBaseError(RuntimeError):
    pass


def parse_retrieval_results(results: list[dict[str, Any]]) -> RetrievalResult | None:
    """Join the top chunks into one snippet and collect their S3 locations."""
    if not results:
        return None

    pieces: list[str] = []
    sources: list[Source] = []
    for result in results[:TOP_CHUNKS]:
        text = str((result.get("content") or {}).get("text") or "")
        if text:
            pieces.append(text)
        uri = ((result.get("location") or {}).get("s3Location") or {}).get("uri")
        if uri:
            sources.append(Source(url=uri))

    return RetrievalResult(
        text=web_utils.normalize_whitespace(" ".join(pieces)),
        sources=sources or [Source(url=KB_PLACEHOLDER_URL)],
    )


class KnowledgeBaseRetriever:
    """Bedrock Knowledge Base lookup. One retrieve call per question, no retries."""

    def __init__(
        self,
        knowledge_base_id: str | None = None,
        *,
        region: str | None = None,
        client: Any | None = None,
    ):
        self.knowledge_base_id = knowledge_base_id or settings.kb_id
        self.region = region or settings.kb_region
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = boto3.client("bedrock-agent-runtime", region_name=self.region)
        return self._client

    def _retrieve_sync(self, question: str) -> list[dict[str, Any]]:
        response = self.client.retrieve(
            knowledgeBaseId=self.knowledge_base_id,
            retrievalQuery={"text": question},
        )
        return list(response.get("retrievalResults") or [])

    async def retrieve(self, question: str) -> RetrievalResult | None:
        if not self.knowledge_base_id:
            raise KnowledgeBaseError("KB_ID is not configured")
        try:
            results = await asyncio.to_thread(self._retrieve_sync, question)
        except (BotoCoreError, ClientError) as exc:
            raise KnowledgeBaseError(
                f"Knowledge base retrieve failed for {self.knowledge_base_id}: {exc}"
            ) from exc
        return parse_retrieval_results(results)
