"""Configuration loading for HN Reader."""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

HN_DAILY_FEED_URL = "https://www.daemonology.net/hn-daily/index.rss"

PACKAGE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_prefix="HNREADER_", populate_by_name=True)

    # Server settings
    host: str = Field(default="0.0.0.0", description="Interface to listen on")
    port: int = Field(
        default=8080,
        validation_alias=AliasChoices("PORT", "HNREADER_PORT"),
        description="Port to listen on",
    )
    shutdown_grace_seconds: int = Field(
        default=30, description="Time allowed for in-flight requests on shutdown"
    )

    # Feed settings
    feed_url: str = Field(default=HN_DAILY_FEED_URL, description="Digest RSS feed URL")
    fetch_timeout: float = Field(default=30.0, description="Total feed fetch timeout in seconds")

    # Sync settings
    sync_interval: float = Field(default=2 * 60 * 60, description="Seconds between automatic syncs")
    serialize_syncs: bool = Field(
        default=False, description="Skip a sync trigger while another sync is running"
    )

    # Database settings
    db_path: str = Field(default="db/hn_reader.db", description="SQLite database file")
    db_max_open: int = Field(default=25, description="Maximum open database connections")
    db_max_idle: int = Field(default=5, description="Maximum idle database connections kept")
    db_max_lifetime: float = Field(
        default=5 * 60, description="Seconds before a pooled connection is recycled"
    )

    # Presentation settings
    templates_dir: str = Field(
        default=str(PACKAGE_DIR / "templates"), description="Jinja2 templates directory"
    )
    static_dir: str = Field(
        default=str(PACKAGE_DIR / "static"), description="Static assets directory"
    )

    # Application settings
    log_level: str = Field(default="INFO", description="Logging level")
    log_json: bool = Field(default=True, description="Emit JSON log lines")

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate the port is in the TCP range."""
        if not 0 < v < 65536:
            raise ValueError(f"PORT {v} is not a valid TCP port.")
        return v

    @field_validator("fetch_timeout", "sync_interval", "db_max_lifetime")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        """Validate durations are positive."""
        if v <= 0:
            raise ValueError("Durations must be greater than zero.")
        return v

    @field_validator("db_max_open")
    @classmethod
    def validate_max_open(cls, v: int) -> int:
        """Validate at least one connection may be opened."""
        if v < 1:
            raise ValueError("HNREADER_DB_MAX_OPEN must be at least 1.")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate the log level is a known logging level name."""
        v = v.strip().upper()
        if not isinstance(logging.getLevelName(v), int):
            raise ValueError(f"HNREADER_LOG_LEVEL '{v}' is not a valid logging level.")
        return v

    @model_validator(mode="after")
    def validate_pool_limits(self) -> "Settings":
        """Validate the idle limit does not exceed the open limit."""
        if not 0 <= self.db_max_idle <= self.db_max_open:
            raise ValueError(
                "HNREADER_DB_MAX_IDLE must be between 0 and HNREADER_DB_MAX_OPEN."
            )
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
