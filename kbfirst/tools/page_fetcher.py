from __future__ import annotations

from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup

from kbfirst.config import settings
from kbfirst.models.interfaces import ExtractedPage
from kbfirst.tools import web_utils

# Tried in order; the first one with non-empty text wins, then <body>.
CONTENT_SELECTORS = (
    "main",
    '[role="main"]',
    ".article, .content, .post, .docMainContainer, .markdown",
)

DATE_SELECTORS = (
    ('meta[property="article:published_time"]', "content"),
    ('meta[name="pubdate"]', "content"),
    ('meta[name="date"]', "content"),
    ("time[datetime]", "datetime"),
)

NON_CONTENT_TAGS = ("script", "style", "noscript", "template")

MAX_LINKS = 20


class PageFetchError(RuntimeError):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class UnsupportedContentType(PageFetchError):
    pass


def _selector_text(soup: BeautifulSoup, selector: str) -> str:
    return " ".join(el.get_text(" ") for el in soup.select(selector))


def _extract_body(soup: BeautifulSoup) -> str:
    for selector in CONTENT_SELECTORS:
        text = web_utils.normalize_whitespace(_selector_text(soup, selector))
        if text:
            return text
    root = soup.body or soup
    return web_utils.normalize_whitespace(root.get_text(" "))


def _extract_links(soup: BeautifulSoup, base_url: str) -> list[str]:
    links: list[str] = []
    seen: set[str] = set()
    for anchor in soup.select("a[href]"):
        href = str(anchor.get("href") or "").strip()
        if not href:
            continue
        try:
            resolved = urljoin(base_url, href)
        except ValueError:
            continue
        if not web_utils.is_valid_url(resolved) or resolved in seen:
            continue
        seen.add(resolved)
        links.append(resolved)
        if len(links) >= MAX_LINKS:
            break
    return links


def extract_published_at(soup: BeautifulSoup) -> str | None:
    """First present date marker, parsed; None when missing or unparseable."""
    raw = None
    for selector, attr in DATE_SELECTORS:
        el = soup.select_one(selector)
        value = el.get(attr) if el is not None else None
        if value:
            raw = str(value)
            break
    parsed = web_utils.parse_timestamp(raw)
    return web_utils.to_iso_timestamp(parsed) if parsed else None


def extract_page(url: str, html: str, max_chars: int) -> ExtractedPage:
    soup = BeautifulSoup(html, "html.parser")
    title = soup.title.get_text().strip() if soup.title else ""
    # Dates live in <head>; read them before stripping anything.
    published_at = extract_published_at(soup)
    links = _extract_links(soup, url)

    for tag in soup.find_all(list(NON_CONTENT_TAGS)):
        tag.decompose()
    text = web_utils.truncate(_extract_body(soup), max_chars)

    return ExtractedPage(
        url=url,
        title=title,
        text=text,
        links=links,
        published_at=published_at,
    )


class PageFetcher:
    """Single-shot HTML fetch with a hard timeout, then main-content extraction."""

    def __init__(
        self,
        *,
        timeout_ms: int | None = None,
        user_agent: str | None = None,
    ):
        self.timeout_ms = int(timeout_ms if timeout_ms is not None else settings.fetch_timeout_ms)
        self.user_agent = user_agent or settings.fetch_user_agent

    async def fetch_and_extract(self, url: str, max_chars: int) -> ExtractedPage:
        timeout_seconds = max(self.timeout_ms / 1000.0, 0.001)
        try:
            async with httpx.AsyncClient(
                timeout=timeout_seconds,
                follow_redirects=True,
            ) as client:
                response = await client.get(url, headers={"User-Agent": self.user_agent})
        except httpx.TimeoutException as exc:
            raise PageFetchError(f"fetch timed out after {self.timeout_ms}ms: {url}") from exc
        except httpx.InvalidURL as exc:
            raise PageFetchError(f"invalid url: {url!r}") from exc

        if not response.is_success:
            raise PageFetchError(
                f"fetch failed: {response.status_code}",
                status_code=response.status_code,
            )

        content_type = response.headers.get("content-type", "").lower()
        if "text/html" not in content_type:
            raise UnsupportedContentType(f"Unsupported content-type: {content_type}")

        return extract_page(url, response.text, max_chars)
