"""
Configuration Module

This module handles loading and validating environment variables using Pydantic Settings.
All application configuration is centralized here for easy management and type safety.

Classes:
    Settings: Main configuration class that loads all environment variables

Usage:
    from songlist.config import settings

    platforms = settings.qqmusic_platforms
    api_url = settings.backend_url
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import List, Literal
from pathlib import Path

# Only use Docker secrets directory if it exists to avoid noisy warnings in self-hosted setups
_secrets_dir = Path("/run/secrets")
_secrets_dir_str = str(_secrets_dir) if _secrets_dir.is_dir() else None

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class Settings(BaseSettings):
    """
    Application Settings

    Loads configuration from environment variables with validation.
    Every field has a default so the service boots without an env file.

    Attributes:
        environment: Current environment (development/production/testing)
        backend_host: Host to bind the backend server
        backend_port: Port to bind the backend server
        frontend_url: Frontend URL for CORS configuration
        log_level: Logging level
        http_timeout_seconds: Deadline applied to every outbound provider request
        qqmusic_platforms: Platform identities tried in order against the paginated API
        qqmusic_page_size: Songs requested per paginated call
        qqmusic_error_response_length: Body size the paginated API uses for its error payload
        qqmusic_max_redirect_depth: How many short-link hops are followed before giving up
        qqmusic_details_param: Query parameter carrying the playlist id on details pages
    """

    # Application Configuration
    environment: Literal["development", "production", "testing"] = "development"

    # Server Configuration
    backend_host: str = "0.0.0.0"
    backend_port: int = 8000

    # Frontend Configuration
    frontend_url: str = "http://localhost:5173"
    frontend_allowed_origins: str | None = None

    # Logging Configuration
    log_level: str = "INFO"
    log_timezone: str = "Asia/Shanghai"
    log_dir: str = "/data/logs"
    log_file_enabled: bool = False

    # Outbound HTTP
    http_timeout_seconds: float = 15.0

    # QQ Music provider
    qqmusic_platforms: List[str] = [
        "-1",
        "android",
        "iphone",
        "h5",
        "wxfshare",
        "iphone_wx",
        "windows",
    ]
    qqmusic_page_size: int = 1000
    qqmusic_error_response_length: int = 108
    qqmusic_max_redirect_depth: int = 3
    qqmusic_details_param: str = "id"
    qqmusic_user_agent: str = DEFAULT_USER_AGENT

    model_config = SettingsConfigDict(
        env_file="../.env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        secrets_dir=_secrets_dir_str,
        extra="ignore"
    )

    @property
    def backend_url(self) -> str:
        """
        Construct the full backend URL

        Returns:
            str: Full backend URL (e.g., http://localhost:8000)
        """
        return f"http://{self.backend_host}:{self.backend_port}"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode"""
        return self.environment == "development"

    @property
    def allowed_origins(self) -> list[str]:
        """
        Allowed origins for CORS.

        Returns:
            list[str]: Origins parsed from frontend_allowed_origins or frontend_url.
        """
        if self.frontend_allowed_origins:
            return [o.strip() for o in self.frontend_allowed_origins.split(",") if o.strip()]
        return [self.frontend_url]


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance

    Uses lru_cache to ensure settings are loaded only once and cached.
    Services receive the instance explicitly; this is the place routes get it from.

    Returns:
        Settings: Cached settings instance

    Example:
        from songlist.config import get_settings
        settings = get_settings()
        print(settings.qqmusic_page_size)
    """
    return Settings()


# Global settings instance for convenience
settings = get_settings()
