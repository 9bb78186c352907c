"""
Application Configuration

All settings loaded from environment variables.
"""

import os
from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings

# Default SQLite location: backend/data/stockbars.db
DATA_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "data")


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Application
    app_name: str = "StockBars Backend"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Database (any SQLAlchemy async URL)
    database_url: Optional[str] = None  # Defaults to SQLite under ./data
    database_echo: bool = False

    # Redis
    redis_url: str = "redis://localhost:6379"
    cache_region: str = "stockPrices"
    cache_ttl_seconds: int = 0  # 0 = no expiry

    # CORS (Frontend URL)
    allowed_origins: list[str] = ["http://localhost:3000"]

    # Polygon API
    polygon_api_key: Optional[str] = None
    polygon_base_url: str = "https://api.polygon.io"
    polygon_timeout_seconds: float = 30.0
    polygon_default_limit: int = 120

    # Pagination
    default_page_size: int = 20
    max_page_size: int = 500

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    @property
    def resolved_database_url(self) -> str:
        if self.database_url:
            return self.database_url
        return f"sqlite+aiosqlite:///{os.path.join(DATA_DIR, 'stockbars.db')}"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
