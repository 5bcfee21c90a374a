"""
Base configuration settings.

Shared .env loading for the settings classes that inherit it, plus the
process log level applied at startup.

Dependencies: pydantic_settings
System role: Foundation for the application and database settings
"""

from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict
from pydantic import Field


class BaseSettings(PydanticBaseSettings):
    """Base configuration class reading .env and the LOG_LEVEL variable."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field(
        default="INFO",
        description="Root log level passed to configure_logging at startup",
    )
