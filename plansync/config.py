"""Application configuration using Pydantic Settings."""
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PLANSYNC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Remote canonical store
    remote_api_url: str = "http://localhost:8000"
    remote_timeout_seconds: float = 15.0
    remote_max_retries: int = 2
    remote_retry_base_delay: float = 0.5

    # Session
    auth_token: Optional[str] = None

    # Local persistence
    data_dir: str = ".plansync"

    # Local API
    api_host: str = "127.0.0.1"
    api_port: int = 8765
    debug: bool = False

    # CORS
    cors_origins: str = "http://localhost:3000,http://localhost:8081"

    # Logging
    log_level: str = "INFO"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",")]


settings = Settings()
