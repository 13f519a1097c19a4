"""Configuration settings for the ticketing seat booking client."""

from functools import lru_cache
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    # Backend API Configuration
    api_base_url: str = "http://localhost:8080"
    api_timeout_seconds: float = 10.0

    # Application Configuration
    debug: bool = False
    environment: str = "development"

    # Session Storage Configuration
    session_store: str = "memory"  # "memory" or "redis"
    redis_url: str = "redis://localhost:6379/0"
    session_key_prefix: str = "ticketing:session:"

    # Error Handling Configuration
    enable_retry_mechanisms: bool = True
    max_retry_attempts: int = 3
    retry_base_delay: float = 0.5
    retry_max_delay: float = 5.0

    # Logging Configuration
    log_level: str = "INFO"
    enable_json_logging: bool = False
    log_file: Optional[str] = None

    # Mock Backend Configuration
    mock_server_host: str = "127.0.0.1"
    mock_server_port: int = 8080

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "TICKETING_",
    }


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
