"""Application configuration via environment variables.

Provides type-safe settings loading using pydantic-settings.
Environment variables can be loaded from a .env file.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Environment Variables:
        REDIS_URL: Redis connection string for the shared transaction cache
        TTL_IN_SECONDS: Expiry of transaction facts written by validators
        REDIS_SOCKET_TIMEOUT: Cache client timeout in seconds
        LOG_LEVEL: Logging level (default INFO)
        LOG_JSON: Emit JSON log lines (default True)
        ENVIRONMENT: Deployment environment name
        DEBUG: Enable debug mode (default False)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Transaction cache
    REDIS_URL: str = "redis://localhost:6379/0"
    TTL_IN_SECONDS: int = 3600
    REDIS_SOCKET_TIMEOUT: float = 5.0

    # Application
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True
    ENVIRONMENT: str = "development"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache for singleton behavior.
    Call get_settings.cache_clear() to reload settings.
    """
    return Settings()
