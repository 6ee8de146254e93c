"""Application settings loaded from environment variables."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven configuration with sensible defaults."""

    header_formats_file: Path | None = Field(default=None, alias="HEADER_FORMATS_FILE")
    required_metadata_keys: list[str] = Field(
        default_factory=lambda: ["layout", "title"], alias="REQUIRED_METADATA_KEYS"
    )
    liquid_highlight: bool = Field(default=True, alias="LIQUID_HIGHLIGHT")
    log_level: str = Field(default="info", alias="LOG_LEVEL")
    metrics_enabled: bool = Field(default=True, alias="METRICS_ENABLED")
    service_version: str = Field(default="0.1.0", alias="SERVICE_VERSION")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()
