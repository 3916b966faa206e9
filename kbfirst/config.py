from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Bedrock knowledge base
    kb_id: str = ""
    kb_region: str = "ap-southeast-2"
    kb_fail_open: bool = False  # treat KB errors as "insufficient" and go to the web

    # Search provider
    search_provider: str = "serper"  # serper | brave
    serper_api_key: str = ""
    serper_base_url: str = "https://google.serper.dev"
    brave_api_key: str = ""
    search_timeout_s: float = 30.0

    # Ranking (JSON arrays of domain substrings)
    allowlist: list[str] = []
    blocklist: list[str] = []

    # Page fetch / extraction
    max_chars: int = 4000
    fetch_timeout_ms: int = 8000
    fetch_user_agent: str = "KBFirstBot/1.0 (+https://github.com/kbfirst/kbfirst)"

    # Retrieval policy
    time_sensitive_pattern: str = (
        r"\b(latest|current|today|version|release|lts|price|rate|schedule|policy"
        r"|ranking|score|outage|deadline|updated)\b"
    )
    canonical_sites: dict[str, str] = {
        r"\bnode(\.js)?\b": "nodejs.org",
        r"\breact\b": "react.dev",
        r"\bpython\b": "python.org",
        r"\baws|bedrock\b": "docs.aws.amazon.com",
    }
    default_top_k: int = 5
    default_recency_days: int = 180
    crawler_recency_days: int = 60

    # App
    app_log_level: str = "INFO"
    noisy_log_level: str = "WARNING"
    log_dir: str = ""  # empty disables the file sink (read-only function filesystems)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()
