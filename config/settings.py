"""
Application settings loaded from environment variables.

Uses pydantic-settings for validation and type safety.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    """
    Application settings.

    All values loaded from .env file or environment variables.
    Validation happens automatically on startup.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),  # Check current dir, then parent
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra env vars
    )

    # ===================
    # PAGE FETCH PROXY
    # ===================
    page_fetch_proxy_url: Optional[str] = Field(
        None,
        description="Proxy endpoint that fetches product pages server-side"
    )
    page_fetch_timeout_seconds: float = Field(
        default=15.0,
        gt=0,
        le=120,
        description="Timeout for a single page fetch through the proxy"
    )

    # ===================
    # FILE IMPORT
    # ===================
    max_upload_size_mb: int = Field(
        default=20,
        ge=1,
        le=200,
        description="Maximum size of an uploaded spec sheet"
    )

    # ===================
    # EXTRACTION
    # ===================
    prefer_metric: bool = Field(
        default=True,
        description="Offer metric unit suggestions (False = imperial)"
    )
    confidence_mode: str = Field(
        default="balanced",
        pattern="^(strict|balanced|aggressive)$",
        description="Default confidence filter shown to reviewers"
    )

    # ===================
    # SESSION STORES
    # ===================
    preview_ttl_minutes: int = Field(
        default=30,
        ge=1,
        le=1440,
        description="How long a parsed preview stays available for apply/diff"
    )
    paste_history_size: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Number of recent parses kept in paste history"
    )

    # ===================
    # APP SETTINGS
    # ===================
    environment: str = Field(
        default="development",
        pattern="^(development|staging|production)$",
        description="Application environment"
    )
    debug: bool = Field(
        default=True,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level"
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API host"
    )
    api_port: int = Field(
        default=8000,
        ge=1000,
        le=65535,
        description="API port"
    )

    # ===================
    # COMPUTED PROPERTIES
    # ===================
    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"

    @property
    def page_fetch_configured(self) -> bool:
        """Check if the page fetch proxy is configured."""
        return bool(self.page_fetch_proxy_url)

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload.

    Returns:
        Settings: Application settings

    Raises:
        ValidationError: If env vars are invalid
    """
    return Settings()


# For convenient imports: from config.settings import settings
settings = get_settings()
