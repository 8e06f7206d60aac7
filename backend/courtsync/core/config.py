"""
Application configuration using pydantic-settings.
All config is loaded from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "CourtSync Admin Console"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Document store
    STORE_BACKEND: str = "memory"  # memory, redis
    SEED_DEMO_DATA: bool = False

    # Redis
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_KEY_PREFIX: str = "courtsync"

    # Admin sessions
    SESSION_TTL_MINUTES: int = 720  # 12 hours
    MIN_PASSWORD_LENGTH: int = 6
    ALLOW_SIGNUP: bool = True

    # Mark-processed + delete-booking in one batch when the store supports it
    ATOMIC_CANCELLATIONS: bool = False

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
    }


@lru_cache()
def get_settings() -> Settings:
    return Settings()
