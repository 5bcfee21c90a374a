"""
Dependency injection container.

Factory functions for FastAPI dependencies. Long-lived collaborators
(vector index, embedder, pipeline) live in a ServiceCache; the database
session is request-scoped.

Dependencies: chunkbridge.configs, chunkbridge.application, chunkbridge.boundary
System role: DI container for service injection
"""

import logging

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from chunkbridge.application.services import IngestionService, PdfProcessingService
from chunkbridge.boundary.db.chunk_record_store import SqlChunkRecordStore
from chunkbridge.boundary.db.connection import get_async_db
from chunkbridge.configs import Settings, get_settings
from chunkbridge.core.document_processing.entrypoint import DocumentPipeline
from chunkbridge.core.document_processing.ports import Embedder, VectorIndex

logger = logging.getLogger(__name__)


class ServiceCache:
    """Container for cached service instances."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings
        self._vector_index: VectorIndex | None = None
        self._embedder: Embedder | None = None
        self._pipeline: DocumentPipeline | None = None
        self._pdf_service: PdfProcessingService | None = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    def initialize(self) -> None:
        """
        Create the vector index handle.

        A failure is logged and leaves the handle unset, so ingestion requests
        answer 503 until a later initialize() succeeds.
        """
        if self._vector_index is not None:
            return
        try:
            from chunkbridge.boundary.vdb.vector_store_factory import get_vector_index

            self._vector_index = get_vector_index(self.settings)
        except Exception as e:
            logger.exception(
                f"{__name__}:initialize - Vector index initialization failed",
                extra={"error": str(e)},
            )
            self._vector_index = None

    @property
    def vector_index(self) -> VectorIndex | None:
        """Cached vector index, or None when not (yet) initialized."""
        return self._vector_index

    @property
    def embedder(self) -> Embedder:
        """Get cached Bedrock embedder."""
        if self._embedder is None:
            from chunkbridge.core.document_processing.tasks import EmbeddingTask

            vs = self.settings.vector_store
            self._embedder = EmbeddingTask(
                model_id=vs.embedding_model,
                region=vs.embedding_region,
                dimension=vs.embedding_dimension,
            )
        return self._embedder

    @property
    def pipeline(self) -> DocumentPipeline:
        """Get cached document pipeline."""
        if self._pipeline is None:
            self._pipeline = DocumentPipeline(
                embedder=self.embedder,
                settings=self.settings.ingestion,
            )
        return self._pipeline

    @property
    def pdf_service(self) -> PdfProcessingService:
        """Get cached PDF processing service."""
        if self._pdf_service is None:
            self._pdf_service = PdfProcessingService(
                pipeline=self.pipeline,
                upload_directory=self.settings.ingestion.upload_directory,
            )
        return self._pdf_service

    def clear(self) -> None:
        """Clear all cached instances."""
        self._vector_index = None
        self._embedder = None
        self._pipeline = None
        self._pdf_service = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


def get_ingestion_service(
    db: AsyncSession = Depends(get_async_db),
    cache: ServiceCache = Depends(get_service_cache),
) -> IngestionService:
    """
    Get ingestion service instance.

    Args:
        db: Async database session (injected via Depends)
        cache: Service cache holding the vector index and pipeline

    Returns:
        IngestionService: Service bound to this request's session
    """
    return IngestionService(
        pipeline=cache.pipeline,
        record_store=SqlChunkRecordStore(db),
        vector_index=cache.vector_index,
        pdf_service=cache.pdf_service,
        settings=cache.settings.ingestion,
    )
