from __future__ import annotations

from dataclasses import dataclass, field
from typing import Pattern

from kbfirst.agents.sufficiency import (
    CanonicalTable,
    compile_canonical_table,
    compile_time_sensitive,
)
from kbfirst.config import Settings, settings as default_settings


@dataclass(frozen=True)
class RetrievalPolicy:
    """Tunables shared by the answer orchestrator and the web crawler."""

    time_sensitive: Pattern[str] = field(default_factory=compile_time_sensitive)
    canonical_sites: CanonicalTable = field(default_factory=compile_canonical_table)
    allow_hints: tuple[str, ...] = ()
    blocklist: tuple[str, ...] = ()
    max_chars: int = 4000
    min_page_chars: int = 200
    answer_chars: int = 400
    max_sources: int = 2
    kb_fail_open: bool = False

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "RetrievalPolicy":
        settings = settings or default_settings
        return cls(
            time_sensitive=compile_time_sensitive(settings.time_sensitive_pattern),
            canonical_sites=compile_canonical_table(settings.canonical_sites),
            allow_hints=tuple(h.lower() for h in settings.allowlist),
            blocklist=tuple(settings.blocklist),
            max_chars=int(settings.max_chars),
            kb_fail_open=bool(settings.kb_fail_open),
        )
