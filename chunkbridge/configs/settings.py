"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from chunkbridge.configs.base import BaseSettings
from chunkbridge.configs.database import DatabaseSettings
from chunkbridge.configs.vector_store import VectorStoreSettings
from chunkbridge.core.document_processing.configs import IngestionPipelineSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    database: DatabaseSettings = DatabaseSettings()
    vector_store: VectorStoreSettings = VectorStoreSettings()
    ingestion: IngestionPipelineSettings = IngestionPipelineSettings()


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from chunkbridge.configs import get_settings
        settings = get_settings()
    """
    return Settings()
