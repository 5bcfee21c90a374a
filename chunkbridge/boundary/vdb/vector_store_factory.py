"""
Vector index factory for selecting between in-memory (dev) and S3 Vectors (prod).

Depends on VECTOR_STORE_STORE_TYPE environment variable.
Provides consistent interface regardless of underlying implementation.

Dependencies: chunkbridge.boundary.vdb, chunkbridge.configs
System role: Vector index instantiation and selection
"""

import logging

from chunkbridge.boundary.vdb.memory_index import InMemoryVectorIndex
from chunkbridge.boundary.vdb.s3_vectors_index import S3VectorsIndex
from chunkbridge.configs import Settings, get_settings
from chunkbridge.core.document_processing.ports import VectorIndex

logger = logging.getLogger(__name__)


def get_vector_index(settings: Settings | None = None) -> VectorIndex:
    """
    Factory function to get vector index based on environment configuration.

    Args:
        settings: Application settings (loaded from environment if None)

    Returns:
        InMemoryVectorIndex or S3VectorsIndex: Configured vector index

    Raises:
        ValueError: If the configured store type is invalid
    """
    settings = settings or get_settings()
    store_type = settings.vector_store.store_type.lower()

    if store_type == "memory":
        logger.info(f"{__name__}:get_vector_index - Creating in-memory vector index (local dev mode)")
        return InMemoryVectorIndex(index_name=settings.vector_store.index_name)

    if store_type == "s3":
        logger.info(f"{__name__}:get_vector_index - Creating S3 Vectors index (production mode)")
        return S3VectorsIndex(
            vectors_bucket=settings.vector_store.vectors_bucket,
            index_name=settings.vector_store.index_name,
            region=settings.vector_store.aws_region,
        )

    raise ValueError(
        f"Invalid VECTOR_STORE_STORE_TYPE: {store_type}. "
        f"Must be 'memory' (dev) or 's3' (production)."
    )
