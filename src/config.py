"""
Application configuration loaded from environment variables (prefix RAILFEED_).
"""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="RAILFEED_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── REST API ──────────────────────────────────────────────────────────────
    # "host:port"; an empty host listens on all interfaces (":8080")
    api_address: str = "localhost:8080"
    access_log: bool = False
    startup_timeout: float = 5.0
    shutdown_timeout: float = 5.0

    # Logging
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
