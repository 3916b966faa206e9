"""Heuristics for deciding whether knowledge-base context can answer a question.

No date-range parsing happens here: a time-sensitive question only needs the
context to *mention* a date for it to count as current enough.
"""

from __future__ import annotations

import re
from typing import Iterable, Pattern

from kbfirst.config import settings

ISO_DATE = re.compile(r"\b20\d{2}[-/](0?[1-9]|1[0-2])[-/](0?[1-9]|[12]\d|3[01])\b")
MONTH_NAME_DATE = re.compile(
    r"\b(Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)[a-z]*\s+\d{1,2},\s+20\d{2}\b",
    re.IGNORECASE,
)

CanonicalTable = list[tuple[Pattern[str], str]]


def compile_time_sensitive(pattern: str | None = None) -> Pattern[str]:
    return re.compile(pattern or settings.time_sensitive_pattern, re.IGNORECASE)


def compile_canonical_table(mapping: dict[str, str] | Iterable[tuple[str, str]] | None = None) -> CanonicalTable:
    """Compile a pattern -> site table; insertion order is match priority."""
    if mapping is None:
        mapping = settings.canonical_sites
    items = mapping.items() if isinstance(mapping, dict) else mapping
    return [(re.compile(pattern, re.IGNORECASE), site) for pattern, site in items]


TIME_SENSITIVE = compile_time_sensitive()


def is_time_sensitive(question: str, pattern: Pattern[str] | None = None) -> bool:
    return bool((pattern or TIME_SENSITIVE).search(question or ""))


def has_date_token(text: str) -> bool:
    return bool(ISO_DATE.search(text) or MONTH_NAME_DATE.search(text))


def is_sufficient(
    question: str,
    kb_text: str | None,
    *,
    pattern: Pattern[str] | None = None,
) -> bool:
    if not kb_text or not kb_text.strip():
        return False
    if is_time_sensitive(question, pattern) and not has_date_token(kb_text):
        return False
    return True


def canonical_site_hint(question: str, table: CanonicalTable) -> str | None:
    for regex, site in table:
        if regex.search(question):
            return site
    return None
