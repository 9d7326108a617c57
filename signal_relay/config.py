"""Application settings loaded from environment / .env file."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Auth ─────────────────────────────────────────
    webhook_secret: str | None = Field(
        default=None,
        description="Shared secret; when unset every request is accepted",
    )

    # ── Storage ──────────────────────────────────────
    redis_url: str = "redis://localhost:6379/0"
    signals_key: str = "tv:signals"
    signals_max: int = Field(default=5000, ge=1, description="Records kept in the list (LTRIM)")
    store_raw: bool = Field(default=False, description="Persist the original payload as well")

    # ── Forwarding ───────────────────────────────────
    vessel_url: str | None = Field(default=None, description="Downstream URL for compact signals")
    forward_timeout_sec: float = 7.0

    # ── Request handling ─────────────────────────────
    body_read_timeout_ms: int = 25

    # ── App ──────────────────────────────────────────
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    log_json: bool = True
    app_env: str = "production"


settings = Settings()
