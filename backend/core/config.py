"""core/config.py — Application configuration via Pydantic BaseSettings.

Loads environment variables from .env (and the OS environment).
Import `settings` from this module wherever configuration is needed.

Usage:
    from core.config import settings

    client = ScoutingApiClient(settings.upstream_api_url)
    if settings.is_production:
        ...
"""

from __future__ import annotations

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# .env lives in the project root (one level above backend/)
_ENV_FILE = Path(__file__).parent.parent.parent / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Upstream REST API (source of truth for every resource)
    upstream_api_url: str = "http://localhost:8080/api"
    upstream_uploads_url: str = "http://localhost:8080/uploads"
    upstream_timeout_seconds: float = 15.0

    # Session store
    database_url: str = "sqlite:///./scouting_portal.db"
    session_cookie_name: str = "portal_session"
    session_ttl_hours: int = 24

    # Application
    environment: str = "development"
    log_level: str = "DEBUG"

    # CORS — list of allowed origins for the browser frontend
    allowed_origins: list[str] = [
        "http://localhost:5173",   # Vite dev server
        "http://localhost:3000",   # CRA fallback
    ]

    @field_validator("log_level", mode="before")
    @classmethod
    def _uppercase_log_level(cls, v: str) -> str:
        return v.upper()

    @field_validator("upstream_api_url", "upstream_uploads_url", mode="after")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


# Singleton — import this everywhere
settings = Settings()
