"""
Configuration management for the promotions service.

Values come from environment variables or a local ``.env`` file.
"""

from functools import lru_cache
from typing import List, Union

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Environment Settings
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # API
    cors_origins: Union[List[str], str] = ["http://localhost:3000"]

    # Promotions
    default_location_slug: str = "columbus"
    default_customer_type: str = "new"
    promotion_display_limit: int = 5
    suggestion_max_distance: int = 2

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("cors_origins", mode="before")
    def parse_cors_origins(cls, v):
        """Parse CORS origins from string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("log_level")
    def normalize_log_level(cls, v):
        return v.upper()

    @field_validator("promotion_display_limit")
    def validate_display_limit(cls, v):
        if not 1 <= v <= 5:
            raise ValueError("PROMOTION_DISPLAY_LIMIT must be between 1 and 5")
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Returns:
        Settings instance with environment variables loaded
    """
    return Settings()


# Export settings instance for easy import
settings = get_settings()
