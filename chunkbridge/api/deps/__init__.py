"""API-specific dependencies."""

# Re-export common dependencies
from .dependencies import (
    ServiceCache,
    get_ingestion_service,
    get_service_cache,
)

__all__ = [
    "ServiceCache",
    "get_ingestion_service",
    "get_service_cache",
]
