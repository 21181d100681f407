"""
Application settings and configuration management.

Uses pydantic-settings for environment variable loading.
"""

from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "InterviewDesk"
    app_version: str = "0.1.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # Question policy (count and time limit per difficulty)
    easy_question_count: int = Field(default=2, ge=0)
    easy_time_limit_seconds: int = Field(default=20, gt=0)
    medium_question_count: int = Field(default=2, ge=0)
    medium_time_limit_seconds: int = Field(default=60, gt=0)
    hard_question_count: int = Field(default=2, ge=0)
    hard_time_limit_seconds: int = Field(default=120, gt=0)

    # Timing
    tick_interval_seconds: float = Field(default=1.0, gt=0)
    evaluation_timeout_seconds: float = Field(default=30.0, gt=0)

    # Resume upload
    max_resume_bytes: int = 10 * 1024 * 1024  # 10 MiB

    # CORS - stored as comma-separated string in env
    cors_origins_str: str = Field(
        default="http://localhost:3000,http://localhost:8000",
        validation_alias="cors_origins"
    )

    @computed_field
    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
