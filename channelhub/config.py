"""
Configuration management for the Channel Hub backend.
Uses pydantic-settings for environment variable loading.
"""
from datetime import timedelta
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Configuration
    app_name: str = "Channel Hub"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server Configuration
    host: str = "0.0.0.0"
    port: int = 8000

    # Rate Limiting
    refresh_rate_limit: str = "5/minute"

    # Scrape source
    source_url: str = "https://www.robertofreijo.com/acestream-ids/"
    fetch_timeout_seconds: float = 20.0
    user_agent: str = "Mozilla/5.0 (compatible; ChannelHub/0.1)"

    # Storage
    data_dir: str = "data"
    catalog_file: str = "channels.json"
    favorites_dirname: str = "favorites"

    # Cache Configuration
    cache_ttl_hours: int = 24

    # Pydantic V2 configuration
    model_config = SettingsConfigDict(env_prefix="CHANNELHUB_", env_file=".env")

    @property
    def catalog_path(self) -> Path:
        return Path(self.data_dir) / self.catalog_file

    @property
    def favorites_dir(self) -> Path:
        return Path(self.data_dir) / self.favorites_dirname

    @property
    def cache_ttl(self) -> timedelta:
        return timedelta(hours=self.cache_ttl_hours)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
