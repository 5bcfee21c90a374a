"""
Core business logic module.

Contains the chunking + dual-write pipeline and the exception hierarchy.
"""

from chunkbridge.core.exceptions import (
    IngestionException,
    ValidationError,
    StoreNotInitializedError,
    ExternalServiceError,
    TransientExternalError,
    PermanentExternalError,
    ParsingError,
    MetadataParseError,
    PartialConsistencyError,
    IngestionTimeoutError,
)

__all__ = [
    "IngestionException",
    "ValidationError",
    "StoreNotInitializedError",
    "ExternalServiceError",
    "TransientExternalError",
    "PermanentExternalError",
    "ParsingError",
    "MetadataParseError",
    "PartialConsistencyError",
    "IngestionTimeoutError",
]
