"""Application configuration using Pydantic Settings."""
from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or a ``.env`` file."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Hosted store. Both unset means demo mode with an in-memory store.
    SUPABASE_URL: Optional[str] = None
    SUPABASE_KEY: Optional[str] = None

    # Dashboard
    PAGE_SIZE: int = 24
    SHOW_MUTATION_ERRORS: bool = False

    # Login
    ALLOW_LOGIN: bool = True
    MAX_SESSIONS: int = 20
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: Optional[str] = None
    STAFF_USERNAME: str = "staff"
    STAFF_PASSWORD: Optional[str] = None
    SUPPORT_EMAIL: str = "support@example.com"

    # Demo data
    SEATING_CSV: Optional[str] = None
    DEMO_TABLE_COUNT: int = 30

    LOG_LEVEL: str = "INFO"

    @property
    def uses_supabase(self) -> bool:
        return bool(self.SUPABASE_URL and self.SUPABASE_KEY)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
