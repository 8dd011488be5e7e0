"""Configuration management for trapmail.

Settings are loaded from environment variables (or a .env file) using
Pydantic settings. The store root is selected by ``TRAPMAIL_STORE``.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_STORE_PATH = Path("/tmp")


class Settings(BaseSettings):
    """Application settings with environment variable support.

    All settings can be overridden via environment variables with
    the TRAPMAIL_ prefix (e.g., TRAPMAIL_STORE).
    """

    model_config = SettingsConfigDict(
        env_prefix="TRAPMAIL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Mail store
    store: Path = Field(
        default=DEFAULT_STORE_PATH,
        description="Directory where captured mail is written",
    )

    # Application Configuration
    log_level: str = Field(
        default="WARNING",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings: Application settings instance.
    """
    return Settings()
