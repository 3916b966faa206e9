"""Domain-trust and recency ranking for web search hits."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Iterable

from kbfirst.models.interfaces import ScoredHit, SearchHit
from kbfirst.tools import web_utils

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
ONE_DAY_SECONDS = 86400.0

PREFERRED_TLDS = (".gov", ".edu")


def score_domain(url: str, allow_hints: Iterable[str] = ()) -> float:
    host = web_utils.extract_hostname(url)
    if any(host.endswith(tld) for tld in PREFERRED_TLDS):
        return 3.0
    if any(host.startswith(hint) or f".{hint}" in host for hint in allow_hints):
        return 2.0
    if host.endswith(".org"):
        return 1.5
    return 1.0


def recency_cutoff(recency_days: int | None, now: datetime | None = None) -> datetime:
    if not recency_days:
        return EPOCH
    return (now or datetime.now(timezone.utc)) - timedelta(days=recency_days)


def score_date(published_at: str | None, cutoff: datetime) -> float:
    """Days past the cutoff, floored at zero; unparseable dates score zero."""
    published = web_utils.parse_timestamp(published_at)
    if published is None:
        return 0.0
    return max(0.0, (published - cutoff).total_seconds() / ONE_DAY_SECONDS)


def score_hit(hit: SearchHit, cutoff: datetime, allow_hints: Iterable[str] = ()) -> float:
    domain_score = score_domain(hit.url, allow_hints)
    date_score = score_date(hit.published_at, cutoff)
    return domain_score * 2 + (1 if date_score > 0 else 0)


def rank_hits(
    hits: list[SearchHit],
    *,
    recency_days: int | None = None,
    allow_hints: Iterable[str] = (),
    blocklist: Iterable[str] = (),
    now: datetime | None = None,
) -> list[ScoredHit]:
    allow_hints = tuple(allow_hints)
    blocklist = tuple(blocklist)
    cutoff = recency_cutoff(recency_days, now)

    scored = [
        ScoredHit(hit=hit, score=score_hit(hit, cutoff, allow_hints))
        for hit in hits
        if web_utils.is_valid_url(hit.url)
        and not any(blocked in hit.url for blocked in blocklist)
    ]
    # sorted() is stable, ties keep search order
    return sorted(scored, key=lambda s: s.score, reverse=True)


def choose_best(
    hits: list[SearchHit],
    *,
    recency_days: int | None = None,
    allow_hints: Iterable[str] = (),
    blocklist: Iterable[str] = (),
    now: datetime | None = None,
) -> ScoredHit | None:
    ranked = rank_hits(
        hits,
        recency_days=recency_days,
        allow_hints=allow_hints,
        blocklist=blocklist,
        now=now,
    )
    return ranked[0] if ranked else None
