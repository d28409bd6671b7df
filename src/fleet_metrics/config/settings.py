"""Service settings loaded from environment variables / ``.env``."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ApiSettings(BaseSettings):
    """HTTP boundary settings. Every field can be overridden with a
    ``FLEET_METRICS_<FIELD>`` environment variable."""

    model_config = SettingsConfigDict(
        env_prefix="FLEET_METRICS_",
        env_file=".env",
        extra="ignore",
    )

    app_name: str = "Transport Dashboard Metrics API"
    version: str = "2.1.0"
    allowed_origins: list[str] = Field(
        default_factory=lambda: [
            "http://localhost:3000",
            "http://localhost:8080",
            "http://127.0.0.1:3000",
        ],
    )
    api_key: str | None = Field(
        default=None,
        description="When set, requests presenting a different X-API-Key are rejected. "
                    "Requests without a key are always let through.",
    )
    request_log_file: Path | None = Field(default=None, description="Append-only JSON-lines request log")
    log_level: str = "INFO"
    default_page_size: int = Field(default=50, ge=1)
    max_page_size: int = Field(default=500, ge=1)
