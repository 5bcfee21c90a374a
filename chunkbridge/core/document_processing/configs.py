"""
Configuration settings for the document ingestion pipeline.

Provides environment-based configuration for chunking, retry, concurrency,
deadline and upload handling.

Dependencies: pydantic, pydantic_settings
System role: Centralized pipeline configuration
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class IngestionPipelineSettings(BaseSettings):
    """Settings for the chunk + dual-write ingestion pipeline."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="INGESTION_",
        case_sensitive=False,
        extra="ignore",
    )

    # Chunking settings
    chunk_size: int = Field(
        default=1000,
        gt=0,
        description="Maximum chunk size in characters",
    )
    chunk_overlap: int = Field(
        default=200,
        ge=0,
        description="Overlap between consecutive chunks",
    )

    # Retry settings for transient external failures
    max_attempts: int = Field(
        default=3,
        ge=1,
        description="Attempts per external call (embed, vector upsert, row insert)",
    )
    initial_backoff_s: float = Field(
        default=0.5,
        ge=0.0,
        description="Initial exponential backoff between retries in seconds",
    )
    max_backoff_s: float = Field(
        default=8.0,
        ge=0.0,
        description="Upper bound for a single backoff sleep in seconds",
    )

    # Scheduling
    max_concurrency: int = Field(
        default=1,
        ge=1,
        description="Chunks written concurrently per document (1 = strictly sequential)",
    )
    document_timeout_s: float | None = Field(
        default=300.0,
        description="Deadline for one document ingestion in seconds (None disables)",
    )

    # Upload handling
    max_upload_bytes: int = Field(
        default=25 * 1024 * 1024,
        description="Maximum accepted upload size in bytes",
    )
    upload_directory: str | None = Field(
        default=None,
        description="Parent directory for temporary upload files (system temp if None)",
    )


@lru_cache
def get_pipeline_settings() -> IngestionPipelineSettings:
    """
    Get cached pipeline settings instance.

    Returns:
        IngestionPipelineSettings: Singleton settings loaded from environment
    """
    return IngestionPipelineSettings()
