"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables (``EXTRATABLE_*``)."""

    model_config = SettingsConfigDict(
        env_prefix="EXTRATABLE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Rendering
    show_titles: bool = True
    show_indices: bool = False

    # Editing
    enable_editing: bool = True
    block_language: str = "extratable"

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
