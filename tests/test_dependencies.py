"""
Test suite for dependency injection container.

Tests ServiceCache lifecycle and the ingestion service factory.

System role: Verification of DI container
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from chunkbridge.api.deps import ServiceCache, get_ingestion_service
from chunkbridge.application.services import IngestionService
from chunkbridge.boundary.vdb.memory_index import InMemoryVectorIndex
from chunkbridge.configs import Settings
from chunkbridge.configs.vector_store import VectorStoreSettings
from chunkbridge.core.document_processing.entrypoint import DocumentPipeline


@pytest.fixture
def settings() -> Settings:
    return Settings(vector_store=VectorStoreSettings(store_type="memory"))


@pytest.fixture
def mock_db_session() -> AsyncSession:
    """Provide mock async database session."""
    return AsyncMock(spec=AsyncSession)


class TestServiceCache:
    """Test suite for ServiceCache."""

    def test_initialize_creates_vector_index(self, settings: Settings) -> None:
        cache = ServiceCache(settings)

        cache.initialize()

        assert isinstance(cache.vector_index, InMemoryVectorIndex)

    def test_initialize_failure_leaves_index_unset(self, settings: Settings) -> None:
        cache = ServiceCache(settings)

        with patch(
            "chunkbridge.boundary.vdb.vector_store_factory.get_vector_index",
            side_effect=RuntimeError("no credentials"),
        ):
            cache.initialize()

        assert cache.vector_index is None

    def test_pipeline_built_once_with_ingestion_settings(self, settings: Settings) -> None:
        cache = ServiceCache(settings)

        with patch("chunkbridge.core.document_processing.tasks.EmbeddingTask") as mock_embedding:
            pipeline = cache.pipeline

        assert isinstance(pipeline, DocumentPipeline)
        assert cache.pipeline is pipeline
        assert pipeline.settings is settings.ingestion
        mock_embedding.assert_called_once_with(
            model_id=settings.vector_store.embedding_model,
            region=settings.vector_store.embedding_region,
            dimension=settings.vector_store.embedding_dimension,
        )

    def test_clear_drops_cached_instances(self, settings: Settings) -> None:
        cache = ServiceCache(settings)
        cache.initialize()
        cache._embedder = MagicMock()

        cache.clear()

        assert cache.vector_index is None
        assert cache._embedder is None


class TestGetIngestionService:
    """Test suite for get_ingestion_service factory."""

    def test_returns_service_bound_to_session(self, settings: Settings, mock_db_session: AsyncSession) -> None:
        cache = ServiceCache(settings)
        cache.initialize()
        cache._embedder = MagicMock()

        service = get_ingestion_service(db=mock_db_session, cache=cache)

        assert isinstance(service, IngestionService)
        assert service._vector_index is cache.vector_index
        assert service._record_store._session is mock_db_session
