"""
Configuration and settings for the journal backend.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    api_prefix: str = Field(default="/api")

    # Store selection. "auto" picks sql when DATABASE_URL is set, else memory.
    store_backend: Literal["auto", "memory", "sql", "firestore"] = Field(
        default="auto", alias="STORE_BACKEND"
    )

    # Database (Postgres expected, e.g. a Supabase connection string)
    database_url: Optional[str] = Field(default=None, alias="DATABASE_URL")

    # Firestore project; falls back to the ambient Google credentials.
    firestore_project: Optional[str] = Field(
        default=None, alias="FIRESTORE_PROJECT"
    )

    # Development toggles
    use_in_memory_backends: bool = Field(
        default=False, alias="JOURNAL_USE_IN_MEMORY_BACKENDS"
    )

    # Server-side dates and attendance checks use this zone.
    timezone: str = Field(default="Asia/Jakarta", alias="JOURNAL_TIMEZONE")

    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    def resolved_store_backend(self) -> str:
        if self.use_in_memory_backends:
            return "memory"
        if self.store_backend != "auto":
            return self.store_backend
        return "sql" if self.database_url else "memory"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
