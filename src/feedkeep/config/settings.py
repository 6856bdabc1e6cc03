"""Configuration management using pydantic-settings.

Supports environment variables and .env file loading.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration.

    Feed lists and filter definitions live in the feeds file (see
    ``feedkeep.models.feed.load_feed_collection``); this class only carries
    process-level knobs.
    """

    model_config = SettingsConfigDict(
        env_prefix="FEEDKEEP_",
        env_file=(".env", ".env.local"),  # .env.local overrides .env
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "feedkeep"
    log_level: str = "INFO"
    log_json: bool = False

    # Storage
    db_type: str = Field(
        default="sqlite",
        description="Snapshot storage backend: sqlite or json",
    )
    db_path: Path = Field(
        default=Path("data/feedkeep.db"),
        description="SQLite database path (used when db_type=sqlite)",
    )
    json_path: Path = Field(
        default=Path("data/feedkeep.json"),
        description="Snapshot file path (used when db_type=json)",
    )

    # Feeds and filters
    feeds_file: Path = Field(
        default=Path("feeds.json"),
        description="JSON document with the feed list and filter definitions",
    )

    # Fetching
    feed_timeout: float = Field(
        default=15.0,
        gt=0,
        description="Per-feed time budget in seconds, raced against each fetch",
    )
    request_timeout: float = Field(
        default=10.0,
        gt=0,
        description="HTTP timeout in seconds used by the transport",
    )
    user_agent: str = "feedkeep/0.1 (RSS Reader)"
    feed_cache_ttl: float = Field(
        default=30.0,
        ge=0,
        description="Seconds a parsed feed is reused before it is fetched again (0 disables)",
    )

    # Reconciliation
    match_by_hash: bool = Field(
        default=False,
        description="Fall back to content-hash matching when an item link changed",
    )

    # Schedule
    refresh_interval_minutes: int = Field(default=60, ge=1)


settings = Settings()
