"""Configuration management for Timeloop."""

import logging
from pathlib import Path
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="TIMELOOP_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Application
    app_name: str = "Timeloop"
    debug: bool = False
    log_level: str = "INFO"
    cli_log_level: str = "WARNING"  # Keep command output clean

    # Paths
    data_dir: Path = Path("data")

    # Database
    database_url: str = "sqlite+aiosqlite:///data/timeloop.db"

    # API (local only by default)
    api_host: str = "127.0.0.1"
    api_port: int = 8000

    # Tracking defaults
    default_category_color: str = "#6366f1"
    search_limit: int = 10  # Max results for title search
    recent_records_limit: int = 50

    # Rate limiting (requests per minute) on mutation endpoints
    rate_limit_enabled: bool = True
    rate_limit_default: str = "120/minute"

    def setup_directories(self) -> None:
        """Ensure required directories exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    settings = Settings()
    settings.setup_directories()
    return settings


def configure_logging(settings: Settings, level: str | None = None) -> None:
    """Configure root logging once for the running process."""
    level = logging.DEBUG if settings.debug else (level or settings.log_level).upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
