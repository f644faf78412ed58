# src/files_manager/config/settings.py
from typing import Optional
from functools import lru_cache
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEPLOYMENT_MODES = ["local-dev", "redis", "aws-prod"]


class Settings(BaseSettings):
    """
    Single source of truth for all application settings.

    Configuration precedence:
    1. Environment variables (highest priority)
    2. .env file (if exists)
    3. Default values in this class (lowest priority)

    Usage:
        from files_manager.config.settings import get_settings
        settings = get_settings()
        folder_path = settings.folder_path
    """

    app_name: str = Field(
        default="files-manager",
        description="Application name"
    )

    # Deployment Mode
    deployment_mode: str = Field(
        default="local-dev",
        description="Deployment mode: local-dev, redis, or aws-prod"
    )

    # Storage Configuration
    folder_path: str = Field(
        default="/tmp/files_manager",
        description="Storage root for uploaded payloads and thumbnails"
    )

    # Document Database
    db_host: str = Field(default="localhost", description="Document database host")
    db_port: int = Field(default=27017, description="Document database port")
    db_database: str = Field(default="files_manager", description="Document database name")
    sqlite_path: str = Field(
        default="files_manager.db",
        description="SQLite document file used in local-dev mode"
    )

    # Session store and Redis job queue
    redis_host: str = Field(default="localhost", description="Redis host")
    redis_port: int = Field(default=6379, description="Redis port")
    session_ttl_seconds: int = Field(
        default=24 * 60 * 60,
        description="Lifetime of an authentication token"
    )

    # Job queue
    queue_name: str = Field(default="fileQueue", description="Thumbnail job queue name")
    job_max_attempts: int = Field(default=3, description="Attempts before a thumbnail job is dropped")

    # SQS transport (aws-prod)
    aws_region: str = Field(default="us-east-1", alias="AWS_DEFAULT_REGION")
    aws_endpoint_url: Optional[str] = Field(default=None, alias="AWS_ENDPOINT_URL")
    sqs_queue_url: Optional[str] = Field(default=None, alias="SQS_QUEUE_URL")

    # HTTP server
    port: int = Field(default=5000, description="HTTP server port")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator('deployment_mode')
    @classmethod
    def validate_deployment_mode(cls, v):
        """Validate deployment mode is one of the allowed values."""
        if v not in DEPLOYMENT_MODES:
            raise ValueError(f"Invalid deployment_mode: {v}. Must be one of {DEPLOYMENT_MODES}")
        return v

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one Settings instance per process.
    """
    return Settings()
