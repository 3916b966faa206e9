from __future__ import annotations

from dataclasses import dataclass, field
from typing import Awaitable, Callable, Protocol

from kbfirst.models.schemas import Source


@dataclass(slots=True)
class RetrievalResult:
    text: str
    sources: list[Source] = field(default_factory=list)


@dataclass(slots=True)
class SearchHit:
    title: str
    url: str
    snippet: str = ""
    published_at: str | None = None


@dataclass(slots=True)
class ScoredHit:
    hit: SearchHit
    score: float

    @property
    def url(self) -> str:
        return self.hit.url


@dataclass(slots=True)
class ExtractedPage:
    url: str
    title: str
    text: str
    links: list[str] = field(default_factory=list)
    published_at: str | None = None


@dataclass
class SearchResponse:
    results: list[SearchHit]
    provider: str


class KnowledgeBase(Protocol):
    async def retrieve(self, question: str) -> RetrievalResult | None: ...


class PageSource(Protocol):
    async def fetch_and_extract(self, url: str, max_chars: int) -> ExtractedPage: ...


SearchFn = Callable[[str, int, "int | None"], Awaitable[SearchResponse]]
