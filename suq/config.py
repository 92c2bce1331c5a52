"""Application configuration."""
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_env: str = "development"
    app_name: str = "Suq"

    # MongoDB (product catalog)
    mongodb_uri: Optional[str] = None
    mongodb_db: str = "suq"
    mongodb_server_selection_timeout_ms: int = 5000

    # Users and sessions; in-memory SQLite when unset
    database_url: Optional[str] = None

    # Sessions
    session_cookie_name: str = "suq.session_token"
    session_ttl_days: int = 7
    # Signs password-reset and verification tokens
    secret_key: str = "change-me-in-production"

    # Access guard
    login_path: str = "/auth"
    protected_paths: list[str] = ["/seller", "/order"]

    cors_origins: list[str] = ["*"]

    log_level: str = "INFO"
    log_file: Optional[str] = None

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def secure_cookies(self) -> bool:
        return self.app_env == "production"

    @property
    def session_ttl_seconds(self) -> int:
        return self.session_ttl_days * 24 * 60 * 60


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
