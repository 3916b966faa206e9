from __future__ import annotations

import pytest

from kbfirst.agents.sufficiency import (
    canonical_site_hint,
    compile_canonical_table,
    compile_time_sensitive,
    has_date_token,
    is_sufficient,
    is_time_sensitive,
)


@pytest.mark.parametrize(
    "question",
    ["What is Node?", "What is the latest Node version?", "", "   "],
)
def test_empty_kb_text_is_never_sufficient(question):
    assert is_sufficient(question, "") is False
    assert is_sufficient(question, "   \n\t") is False
    assert is_sufficient(question, None) is False


def test_time_sensitive_question_needs_a_date_in_context():
    question = "What is the latest Node version?"
    assert is_sufficient(question, "Node 20 was released") is False
    assert is_sufficient(question, "Node 20 was released on 2023-04-18") is True


def test_non_time_sensitive_question_accepts_any_text():
    assert is_sufficient("Who wrote the onboarding guide?", "The platform team wrote it.") is True


def test_time_sensitive_matching_is_case_insensitive_and_whole_word():
    assert is_time_sensitive("CURRENT pricing tiers")
    assert is_time_sensitive("what's the LTS line")
    assert not is_time_sensitive("concurrently running jobs")
    assert not is_time_sensitive("")


@pytest.mark.parametrize(
    "text",
    [
        "shipped 2024/1/5",
        "shipped 2024-01-05",
        "as of Jan 5, 2024",
        "as of September 12, 2023",
    ],
)
def test_date_tokens_are_recognized(text):
    assert has_date_token(text)


@pytest.mark.parametrize("text", ["shipped in 2024", "2024-13-01", "Jan 2024", "1999-01-01"])
def test_non_dates_are_not_date_tokens(text):
    assert not has_date_token(text)


def test_custom_time_sensitive_pattern():
    pattern = compile_time_sensitive(r"\bforecast\b")
    assert is_sufficient("weather forecast", "sunny", pattern=pattern) is False
    assert is_sufficient("latest news", "sunny", pattern=pattern) is True


def test_canonical_site_hint_uses_first_matching_row():
    table = compile_canonical_table(
        {
            r"\bnode(\.js)?\b": "nodejs.org",
            r"\breact\b": "react.dev",
        }
    )
    assert canonical_site_hint("How do I upgrade Node.js?", table) == "nodejs.org"
    assert canonical_site_hint("React and Node together", table) == "nodejs.org"
    assert canonical_site_hint("Using React hooks", table) == "react.dev"
    assert canonical_site_hint("Rust lifetimes", table) is None


def test_default_canonical_table_covers_aws():
    table = compile_canonical_table()
    assert canonical_site_hint("bedrock knowledge base limits", table) == "docs.aws.amazon.com"
