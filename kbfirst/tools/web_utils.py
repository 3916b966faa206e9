from __future__ import annotations

import re
from datetime import datetime, timezone
from urllib.parse import urlsplit, urlunsplit

from dateutil import parser as date_parser

ELLIPSIS = "…"


def is_valid_url(url: str) -> bool:
    """Absolute http(s) URL with a host."""
    try:
        result = urlsplit(url)
        return result.scheme in ("http", "https") and bool(result.hostname)
    except ValueError:
        return False


def clean_url(url: str) -> str:
    """Drop the fragment. Raises ValueError for anything that is not an absolute URL."""
    parts = urlsplit(url)
    if not parts.scheme or not parts.netloc:
        raise ValueError(f"Not an absolute URL: {url!r}")
    return urlunsplit((parts.scheme, parts.netloc, parts.path or "/", parts.query, ""))


def extract_hostname(url: str) -> str:
    try:
        return (urlsplit(url).hostname or "").lower()
    except ValueError:
        return ""


def normalize_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def truncate(text: str, max_chars: int) -> str:
    if max_chars <= 0 or len(text) <= max_chars:
        return text
    return text[:max_chars] + ELLIPSIS


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse a date string into an aware UTC datetime; naive values are taken as UTC."""
    if not value or not value.strip():
        return None
    try:
        parsed = date_parser.parse(value.strip())
    except (ValueError, OverflowError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def to_iso_timestamp(value: datetime) -> str:
    """Millisecond ISO-8601 in UTC with a trailing Z."""
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
