from __future__ import annotations

import argparse
from unittest.mock import AsyncMock, patch

import httpx
import pytest

import main
from kbfirst.tools.page_fetcher import PageFetchError
from kbfirst.tools.search_provider import SearchError


def _crawl_args(**overrides) -> argparse.Namespace:
    values = {
        "question": None,
        "crawl": "widgets",
        "top_k": None,
        "recency_days": None,
        "site": None,
        "max_chars": None,
    }
    values.update(overrides)
    return argparse.Namespace(**values)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        LookupError("No search results found"),
        SearchError("Serper search failed: 500", status_code=500),
        PageFetchError("fetch failed: 404", status_code=404),
        httpx.ConnectError("down"),
    ],
)
async def test_crawl_errors_exit_with_status_one(error, capsys):
    with patch("main.crawl_web", new=AsyncMock(side_effect=error)):
        code = await main.run(_crawl_args())

    assert code == 1
    assert str(error) in capsys.readouterr().err


@pytest.mark.asyncio
async def test_crawl_prints_json_result(capsys):
    result = {"url": "https://a.example.com/", "title": "A", "text": "body", "links": []}
    with patch("main.crawl_web", new=AsyncMock(return_value=result)) as crawl_web:
        code = await main.run(_crawl_args(top_k=3))

    assert code == 0
    assert '"url": "https://a.example.com/"' in capsys.readouterr().out
    assert crawl_web.await_args.args[0].top_k == 3
