"""Application configuration and environment variables."""
from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = "sqlite+aiosqlite:///./lending.db"

    # JWT Authentication
    jwt_secret: str = "your-secret-key-change-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expiration_hours: int = 24

    # Application
    app_name: str = "Library Lending Service"
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:3000"]

    # Paging
    default_page_size: int = 20
    max_page_size: int = 100

    # Attempts for a unit of work that loses an optimistic-lock race
    lock_retry_attempts: int = 3

    # Notification queues
    info_queue: str = "info"
    email_info_queue: str = "email-info"
    performance_info_queue: str = "performance-info"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "LENDING_",
        "extra": "ignore"
    }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
