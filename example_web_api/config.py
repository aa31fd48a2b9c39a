from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_name: str = "Example Web API"
    app_version: str = "1.0.0"

    # Session cookie (carries the anti-forgery token)
    # Empty means a random key is generated at startup; sessions then
    # do not survive a restart.
    secret_key: str = ""
    session_cookie: str = "pets_session"
    session_https_only: bool = False

    # Anti-forgery token lookup on POST requests
    antiforgery_field_name: str = "csrf_token"
    antiforgery_header_name: str = "X-CSRF-Token"

    # Longest value accepted for a single form field
    max_field_length: int = 4096

    cors_origins: list[str] = ["*"]  # In production, specify exact origins

    log_level: str = "INFO"

    class Config:
        env_prefix = "PETS_"
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
