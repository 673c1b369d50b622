"""
Configuration management using pydantic-settings.
All settings loaded from environment variables (12-factor app).
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Analytics backend
    api_base_url: str = Field(
        default="http://localhost:8080/api",
        description="Analytics backend base URL",
    )
    api_timeout_seconds: float = Field(
        default=30.0, gt=0.0, description="HTTP request timeout in seconds"
    )
    api_token: str = Field(default="", description="Bearer token (empty disables auth header)")

    # Request queue
    request_queue_max_concurrent: int = Field(
        default=2, ge=1, description="Max simultaneous in-flight detail requests"
    )
    request_queue_delay_seconds: float = Field(
        default=0.2, ge=0.0, description="Pause after each task settles before its slot reopens"
    )

    # Logging
    log_level: str = Field(default="info", description="Log level")
    log_format: str = Field(default="json", description="Log format (json|console)")

    # Development
    dev_mode: bool = Field(default=True, description="Development mode")

    @field_validator("api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URL so paths can be joined with a single slash."""
        return v.rstrip("/")

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Only json and console renderers are supported."""
        v = v.lower()
        if v not in ("json", "console"):
            raise ValueError("log_format must be 'json' or 'console'")
        return v


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Uses lru_cache to ensure singleton behavior.
    """
    return Settings()
