from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

AnswerMethod = Literal["kb", "web"]
AnswerReason = Literal[
    "question_required",
    "kb_sufficient",
    "web_page",
    "no_search_results",
    "search_failed",
    "no_quality_source",
]

KB_PLACEHOLDER_URL = "Bedrock Knowledge Base"

DEFAULT_TOP_K = 5


# --- Requests ---


class AnswerRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question: str | None = None
    top_k: int = Field(default=DEFAULT_TOP_K, alias="topK")
    recency_days: int | None = Field(default=180, alias="recencyDays")
    site: str | None = None
    max_chars: int | None = Field(default=None, alias="maxChars")

    @field_validator("top_k", mode="before")
    @classmethod
    def _null_top_k(cls, value: Any) -> Any:
        return DEFAULT_TOP_K if value is None else value


class CrawlRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    query: str | None = None
    top_k: int = Field(default=DEFAULT_TOP_K, alias="topK")
    recency_days: int | None = Field(default=60, alias="recencyDays")
    site: str | None = None
    max_chars: int | None = Field(default=None, alias="maxChars")

    @field_validator("top_k", mode="before")
    @classmethod
    def _null_top_k(cls, value: Any) -> Any:
        return DEFAULT_TOP_K if value is None else value


# --- Responses ---


class Source(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    url: str
    title: str | None = None
    published_at: str | None = Field(default=None, alias="publishedAt")


class AnswerPayload(BaseModel):
    answer: str
    sources: list[Source]
    method: AnswerMethod
    reason: AnswerReason

    def to_response(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class CrawlResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    url: str
    title: str
    text: str
    links: list[str]
    published_at: str | None = Field(default=None, alias="publishedAt")

    def to_response(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
