"""
Application configuration using Pydantic Settings.

All values can be overridden through environment variables or a .env file.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ===========================================
    # Environment
    # ===========================================
    ENVIRONMENT: Literal["local", "test"] = "local"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # ===========================================
    # Database
    # ===========================================
    DATABASE_URL: str = "sqlite+aiosqlite:///./cadence.db"

    # ===========================================
    # Calendar
    # ===========================================
    # IANA zone used for rules created without an explicit timezone
    TIMEZONE: str = "UTC"

    # ===========================================
    # Recurring task generation
    # ===========================================
    # Generate instances this many hours before they are due
    GENERATION_LOOKAHEAD_HOURS: int = Field(24, ge=0)
    # Upper bound of occurrences generated per definition in one run
    MAX_CATCH_UP_OCCURRENCES: int = Field(30, ge=1)
    # Background trigger period
    GENERATION_INTERVAL_MINUTES: int = Field(15, ge=1)

    # ===========================================
    # Server
    # ===========================================
    HOST: str = "127.0.0.1"
    PORT: int = 8000

    @property
    def is_test(self) -> bool:
        """Check if running in the test environment."""
        return self.ENVIRONMENT == "test"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures settings are loaded only once.
    """
    return Settings()
