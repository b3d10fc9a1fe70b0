# =============================================================================
# DevOps Web App - Configuration
# =============================================================================
"""
Application configuration using Pydantic Settings.

Loads configuration from environment variables with sensible defaults
for local development. Settings are resolved once per process and then
passed to the application factory, so every environment-gated behaviour
(error detail, docs, log format) reads from a single object.
"""

from functools import lru_cache
from typing import List

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


PRODUCTION = "production"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        host: Interface the HTTP server binds to
        port: TCP port the HTTP server listens on
        environment: Current environment (development/staging/production)
        allowed_origins: Comma-separated CORS allow-list, or "*"
        log_level: Logging verbosity level
        service_name: Name of this service for logging and status
        app_version: Version reported by the metadata endpoints
        rate_limit_max_requests: Requests allowed per client per window
        rate_limit_window_seconds: Length of the rate-limit window
        rate_limit_storage_uri: Storage backend for rate-limit counters
        max_body_bytes: Largest accepted request body
    """

    # Server Configuration
    host: str = "0.0.0.0"
    port: int = 3000

    # Application Configuration
    environment: str = Field(
        default="development",
        validation_alias=AliasChoices("environment", "node_env"),
    )
    log_level: str = "INFO"
    service_name: str = "devops-webapp"
    app_version: str = "1.0.0"

    # CORS Configuration
    allowed_origins: str = "*"

    # Rate Limiting Configuration
    rate_limit_max_requests: int = Field(default=100, ge=1)
    rate_limit_window_seconds: int = Field(default=15 * 60, ge=1)
    rate_limit_storage_uri: str = "memory://"

    # Body Parsing Configuration
    max_body_bytes: int = Field(default=10 * 1024 * 1024, ge=1)

    # Pydantic Settings Configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def is_production(self) -> bool:
        """True when running in production mode."""
        return self.environment.strip().lower() == PRODUCTION

    @property
    def allowed_origins_list(self) -> List[str]:
        """Parse the comma-separated origin allow-list."""
        origins = [o.strip() for o in self.allowed_origins.split(",") if o.strip()]
        return origins or ["*"]


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses LRU cache to avoid re-reading environment variables
    on every request.

    Returns:
        Settings: Application configuration instance
    """
    return Settings()
