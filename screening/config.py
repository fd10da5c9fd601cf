"""Configuration management using Pydantic Settings."""
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SCREENING_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Clinical Screening Engine"
    app_version: str = "1.0.0"

    # Logging
    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"

    # Composite risk: weight for instruments absent from the weight table
    composite_fallback_weight: float = Field(default=0.1, gt=0, le=1)

    # Recommendation triggers
    emergency_factor_threshold: int = Field(default=3, ge=1)
    mmse_emergency_threshold: int = Field(default=10, ge=0, le=30)
    social_engagement_age: int = Field(default=65, ge=0, le=130)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
