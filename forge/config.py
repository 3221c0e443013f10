"""
Application configuration using Pydantic settings.
"""
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Geometry
    map_provider: str = Field(
        default="spherical",
        description="Geometry provider used for area/perimeter ('spherical' or 'projected')"
    )

    # Cost estimation
    default_currency: str = Field(
        default="INR",
        description="Currency recorded on new site evaluations"
    )

    # Storage
    storage_backend: str = Field(
        default="memory",
        description="Record storage backend ('memory' or 'mongo')"
    )
    mongo_uri: str = Field(
        default="mongodb://localhost:27017/forge",
        description="MongoDB connection string"
    )
    mongo_database: str = Field(
        default="forge",
        description="MongoDB database name"
    )

    # Elevation API Configuration
    elevation_api_base_url: str = Field(
        default="https://api.open-elevation.com",
        description="Base URL for the elevation lookup API"
    )
    elevation_api_timeout: float = Field(
        default=30.0,
        description="Timeout in seconds for elevation lookups"
    )

    # Retry Configuration
    max_retry_attempts: int = Field(
        default=3,
        description="Maximum number of retry attempts for API calls"
    )
    retry_backoff_multiplier: int = Field(
        default=1,
        description="Multiplier for exponential backoff"
    )
    retry_min_wait: int = Field(
        default=4,
        description="Minimum wait time in seconds between retries"
    )
    retry_max_wait: int = Field(
        default=10,
        description="Maximum wait time in seconds between retries"
    )

    # Proposals
    proposal_title: str = Field(
        default="Forge Farm Infrastructure Proposal",
        description="Heading printed on generated proposal PDFs"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )

    # CORS Configuration
    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins (use specific origins in production)"
    )

    # Rate Limiting
    rate_limit_enabled: bool = Field(
        default=True,
        description="Whether per-client rate limiting is applied"
    )
    rate_limit_requests: int = Field(
        default=100,
        description="Maximum requests per minute per client"
    )

    # Application Settings
    app_name: str = Field(
        default="Forge Site Evaluation API",
        description="Application name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )
    debug: bool = Field(
        default=False,
        description="Debug mode"
    )

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
