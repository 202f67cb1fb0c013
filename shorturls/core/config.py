"""Application configuration settings."""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="SHORTURLS_",
        extra="ignore",
    )

    # Application
    app_title: str = "URL Shortener Service"
    app_version: str = "0.1.0"
    app_description: str = "In-memory URL shortening service with click analytics"
    base_url: str = "http://localhost:3000"
    host: str = "0.0.0.0"
    port: int = 3000

    # Registry
    default_validity_minutes: int = 30
    # Ten years
    max_validity_minutes: int = 5_256_000
    max_generation_attempts: int = 1000
    generated_code_bytes: int = 4
    min_short_code_length: int = 4
    max_short_code_length: int = 20

    # Expired record sweep (0 disables it)
    purge_interval_seconds: int = 0
    purge_grace_minutes: int = 0

    # Logging
    log_level: str = "INFO"
    log_server_url: Optional[str] = None
    log_server_token: Optional[str] = None
    log_server_timeout: float = 10.0


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
