from __future__ import annotations

from datetime import datetime, timezone

from kbfirst.agents.url_selector import (
    EPOCH,
    choose_best,
    rank_hits,
    recency_cutoff,
    score_date,
    score_domain,
)
from kbfirst.models.interfaces import SearchHit

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


def _hit(url: str, published_at: str | None = None) -> SearchHit:
    return SearchHit(title=url, url=url, published_at=published_at)


def test_score_domain_tiers():
    assert score_domain("https://www.irs.gov/forms") == 3.0
    assert score_domain("https://cs.stanford.edu/") == 3.0
    assert score_domain("https://nodejs.org/en", allow_hints=("nodejs.org",)) == 2.0
    assert score_domain("https://docs.python.org/3/", allow_hints=("python.org",)) == 2.0
    assert score_domain("https://www.python.org/") == 1.5
    assert score_domain("https://example.com/") == 1.0


def test_gov_outranks_com_with_identical_recency():
    hits = [
        _hit("https://blog.example.com/post", "2024-05-01"),
        _hit("https://www.agency.gov/post", "2024-05-01"),
    ]
    best = choose_best(hits, recency_days=180, now=NOW)
    assert best is not None
    assert best.url == "https://www.agency.gov/post"
    assert best.score == 7.0


def test_blocklisted_urls_are_never_chosen():
    hits = [
        _hit("https://www.agency.gov/spam-mirror"),
        _hit("https://pinterest.com/pin/1"),
        _hit("https://example.com/ok"),
    ]
    best = choose_best(hits, blocklist=("spam-mirror", "pinterest"), now=NOW)
    assert best is not None
    assert best.url == "https://example.com/ok"

    assert choose_best(hits[:2], blocklist=("spam-mirror", "pinterest"), now=NOW) is None


def test_invalid_urls_are_dropped():
    hits = [_hit("ftp://files.example.gov/x"), _hit("not a url"), _hit("https://example.com/")]
    ranked = rank_hits(hits, now=NOW)
    assert [r.url for r in ranked] == ["https://example.com/"]


def test_recent_date_adds_one_point():
    hits = [
        _hit("https://a.example.com/old", "2023-01-01"),
        _hit("https://b.example.com/new", "2024-05-20"),
    ]
    ranked = rank_hits(hits, recency_days=30, now=NOW)
    assert ranked[0].url == "https://b.example.com/new"
    assert ranked[0].score == 3.0
    assert ranked[1].score == 2.0


def test_without_recency_any_parseable_date_counts():
    ranked = rank_hits([_hit("https://a.example.com/", "Mar 3, 2010")], now=NOW)
    assert ranked[0].score == 3.0


def test_unparseable_date_scores_zero():
    assert score_date("3 days ago", EPOCH) == 0.0
    assert score_date(None, EPOCH) == 0.0


def test_ties_keep_search_order():
    hits = [_hit(f"https://site{i}.example.com/") for i in range(5)]
    ranked = rank_hits(hits, now=NOW)
    assert [r.url for r in ranked] == [h.url for h in hits]


def test_ranking_is_deterministic():
    hits = [
        _hit("https://example.com/a", "2024-05-01"),
        _hit("https://example.org/b"),
        _hit("https://example.edu/c"),
    ]
    first = choose_best(hits, recency_days=180, now=NOW)
    second = choose_best(list(hits), recency_days=180, now=NOW)
    assert first is not None and second is not None
    assert first.url == second.url == "https://example.edu/c"


def test_recency_cutoff():
    assert recency_cutoff(None, NOW) == EPOCH
    assert recency_cutoff(0, NOW) == EPOCH
    assert recency_cutoff(1, NOW) == datetime(2024, 5, 31, tzinfo=timezone.utc)
