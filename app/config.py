"""Application configuration settings."""
from __future__ import annotations

import os
from functools import lru_cache

from pydantic import BaseModel, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Runtime toggles -----------------------------------------------------
# Execution environment: "dev" | "test" | "staging" | "prod"
ENV = os.getenv("NL_ENV", "dev").lower()

# Private notes attached to a consent entry are bounded.
NOTE_MAX_LENGTH = 500

# Entropy for invitation and session tokens (secrets.token_urlsafe).
INVITATION_TOKEN_BYTES = 32
SESSION_TOKEN_BYTES = 32


class Settings(BaseSettings):
    """Environment configuration for the Nos Limites backend."""

    app_env: str = ENV
    database_url: str = "sqlite:///noslimites.db"
    SECRET_KEY: str = "change-me"
    FRONTEND_URL: str = "http://localhost:5173"
    CORS_ALLOW_ORIGINS: list[str] = [
        "https://noslimites.app",
        "http://localhost:5173",
    ]
    SENTRY_DSN: str | None = None
    PROMETHEUS_ENABLED: bool = False
    ALLOW_DB_CREATE_ALL: bool = False
    LOG_LEVEL: str = "INFO"
    SESSION_TTL_DAYS: int = 30

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("FRONTEND_URL")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        """Invitation links are built by appending ``/invite/<token>``."""

        return value.rstrip("/")


class AppInfo(BaseModel):
    name: str = "noslimites-backend"
    version: str = "0.1.0"


settings = Settings()


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings."""

    return settings


__all__ = [
    "ENV",
    "NOTE_MAX_LENGTH",
    "INVITATION_TOKEN_BYTES",
    "SESSION_TOKEN_BYTES",
    "Settings",
    "AppInfo",
    "settings",
    "get_settings",
]
