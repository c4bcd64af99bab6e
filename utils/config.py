"""
Configuration Utility - Environment Variables Management

Centralized configuration loading from .env files using pydantic-settings.
Type-safe access to all environment variables with validation.

Only the process entry point reads settings; components receive the plain
values they need through their constructors.

Usage:
    from utils.config import get_settings

    settings = get_settings()
    playlist_url = settings.M3U
    cache_dir = settings.CACHE_DIR
"""

from datetime import time
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Upstream sources
    M3U: Optional[str] = Field(default=None)
    XML_TV: Optional[str] = Field(default=None)
    USER_AGENT: str = Field(default="ilovetv")
    FETCH_TIMEOUT: float = Field(default=5.0)

    # Cache layout
    CACHE_DIR: str = Field(default="./ilovetv_cache")
    PLAYLIST_NAME: str = Field(default="ilovetv.m3u")
    XMLTV_NAME: str = Field(default="xmltv.xml")

    # Scheduler Configuration
    REFRESH_TIME: time = Field(default=time(5, 30))
    CATCH_UP_CUTOFF: time = Field(default=time(19, 0))
    STARTUP_RETRIES: int = Field(default=0, ge=0)
    SCHEDULED_RETRIES: int = Field(default=10, ge=0)
    RETRY_DELAY_SECONDS: float = Field(default=30.0, ge=0)

    # HTTP Server Configuration
    SERVER_HOST: str = Field(default="127.0.0.1")
    SERVER_PORT: int = Field(default=5050)

    # Logging Configuration
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = Field(default="text")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Singleton Settings instance
    """
    return Settings()
