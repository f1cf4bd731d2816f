"""
Configuration for the Callboard analytics service.
"""

from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: str = Field(
        default="development",
        description="Environment: development, staging, production",
    )

    # Service settings
    service_name: str = Field(default="callboard-analytics", description="Service name")
    version: str = Field(default="1.0.0", description="Service version")
    host: str = Field(default="0.0.0.0", description="Host to bind")
    port: int = Field(default=8000, ge=1024, le=65535, description="Port")
    debug: bool = Field(default=False, description="Debug mode")
    docs_enabled: bool = Field(default=True, description="Serve OpenAPI docs")

    # Logging
    log_level: str = Field(default="info", description="Log level")
    log_format: str = Field(default="json", description="Log renderer: json or console")

    # API settings
    api_prefix: str = Field(default="/api/v1", description="API prefix")
    cors_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"],
        description="Allowed CORS origins",
    )

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./callboard.db",
        description="Session store connection URL",
    )
    database_pool_size: int = Field(default=5, ge=1)
    database_max_overflow: int = Field(default=10, ge=0)
    create_tables: bool = Field(
        default=False,
        description="Create tables on startup (development only)",
    )

    # Analytics
    analytics_default_days: int = Field(
        default=7,
        ge=1,
        description="Default window for the global analytics view",
    )
    agent_analytics_default_days: int = Field(
        default=30,
        ge=1,
        description="Default window for the per-agent analytics view",
    )
    recent_calls_limit: int = Field(default=10, ge=1, le=100)
    analytics_zero_fill: bool = Field(
        default=False,
        description="Emit zero points for dates without sessions",
    )

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in ("json", "console"):
            raise ValueError("log_format must be 'json' or 'console'")
        return v

    @property
    def is_production(self) -> bool:
        return self.environment.lower() in ("production", "prod", "staging")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings."""
    return Settings()
