"""
Application configuration using pydantic-settings.

Loads configuration from environment variables with sensible defaults.
"""
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    debug: bool = False
    log_level: str = "INFO"
    environment: str = "development"

    # Error tracking
    sentry_dsn: Optional[str] = None

    # Request limits for the HTTP adapter
    max_text_chars: int = 5_000_000
    max_positioned_words: int = 500_000

    # Table reconstruction (pixels / counts)
    column_tolerance_px: float = 20.0
    column_assign_tolerance_px: float = 30.0
    min_table_rows: int = 3
    min_numeric_tokens_per_row: int = 2


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
