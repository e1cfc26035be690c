from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings
from functools import lru_cache

_BACKEND_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _BACKEND_DIR / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "JM Couros Client Manager"
    app_version: str = "0.1.0"
    app_env: str = "development"
    cors_origins: list[str] = ["http://localhost:5173"]

    # Durable storage — one key holds the whole client collection
    storage_backend: Literal["database", "file"] = "database"
    database_url: str = "sqlite+aiosqlite:///data/jm_couros.db"
    storage_dir: str = "data"
    storage_key: str = "jm_couros_clients"

    # OpenRouter configuration
    openrouter_api_key: str = ""
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    openrouter_app_name: str = "JM Couros"

    # Client insight generation via OpenRouter
    insight_model: str = "google/gemini-2.5-flash"
    insight_temperature: float = 0.7
    insight_max_tokens: int = 600
    insight_timeout_seconds: float = 60.0
    insight_language: str = "Brazilian Portuguese"

    # Record photos
    max_image_size_mb: int = 5

    # Logging — per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_sql: str = "WARNING"           # sqlalchemy.engine — SQL statements
    log_level_http: str = "WARNING"          # httpx / httpcore — outbound HTTP
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error
    log_level_storage: str = "INFO"          # record store + storage adapters
    log_level_openrouter: str = "INFO"       # OpenRouter client + enrichment

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }

    @property
    def max_image_bytes(self) -> int:
        return self.max_image_size_mb * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance — reads .env once."""
    return Settings()
