"""
Shared test fixtures and configuration for entire test suite.

Provides: in-memory SQLite session, fake embedder with failure injection,
in-memory vector index and record store, pipeline settings without backoff.
Dependencies: pytest, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import asyncio
import hashlib
from typing import Any, Callable

import pytest

from chunkbridge.boundary.vdb.memory_index import InMemoryVectorIndex
from chunkbridge.boundary.vdb.vector_schemas import VectorRecord
from chunkbridge.core.document_processing.configs import IngestionPipelineSettings
from chunkbridge.core.document_processing.ports import ChunkRecordStore, Embedder

TEST_DIMENSION = 8


def make_sample_text(tokens: int = 240) -> str:
    """Non-repeating text of 10-character tokens (240 tokens = 2400 chars)."""
    return "".join(f"token{i:04d} " for i in range(tokens))


class FakeEmbedder(Embedder):
    """
    Deterministic embedder.

    failures maps a chunk text predicate to a list of exceptions raised on
    successive calls for matching texts; once the list is exhausted calls
    succeed.
    """

    def __init__(self, dimension: int = TEST_DIMENSION, delay_s: float = 0.0) -> None:
        self._dimension = dimension
        self.delay_s = delay_s
        self.calls: list[str] = []
        self._failures: list[tuple[Callable[[str], bool], list[BaseException]]] = []

    @property
    def dimension(self) -> int:
        return self._dimension

    def fail_when(self, predicate: Callable[[str], bool], *errors: BaseException) -> None:
        self._failures.append((predicate, list(errors)))

    async def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        await asyncio.sleep(self.delay_s)
        for predicate, errors in self._failures:
            if predicate(text) and errors:
                raise errors.pop(0)
        digest = hashlib.sha256(text.encode()).digest()
        return [b / 255.0 for b in digest[: self._dimension]]


class InMemoryRecordStore(ChunkRecordStore):
    """Record store keeping rows in a dict; optionally checks the vector exists first."""

    def __init__(self, vector_index: InMemoryVectorIndex | None = None) -> None:
        self.rows: dict[str, dict[str, Any]] = {}
        self.calls = 0
        self._vector_index = vector_index
        self.vector_present_at_insert: list[bool] = []
        self._failures: list[tuple[Callable[[dict], bool], list[BaseException]]] = []

    def fail_when(self, predicate: Callable[[dict], bool], *errors: BaseException) -> None:
        self._failures.append((predicate, list(errors)))

    async def create(self, fields: dict[str, Any]) -> dict[str, Any]:
        self.calls += 1
        for predicate, errors in self._failures:
            if predicate(fields) and errors:
                raise errors.pop(0)
        if self._vector_index is not None:
            found = await self._vector_index.query_by_key([fields["embeddingId"]])
            self.vector_present_at_insert.append(bool(found))
        self.rows[fields["id"]] = dict(fields)
        return fields


class FailingVectorIndex(InMemoryVectorIndex):
    """In-memory index that raises queued errors for matching records."""

    def __init__(self) -> None:
        super().__init__()
        self._failures: list[tuple[Callable[[VectorRecord], bool], list[BaseException]]] = []
        self.upsert_calls = 0

    def fail_when(self, predicate: Callable[[VectorRecord], bool], *errors: BaseException) -> None:
        self._failures.append((predicate, list(errors)))

    async def upsert(self, records: list[VectorRecord]) -> None:
        self.upsert_calls += 1
        for record in records:
            for predicate, errors in self._failures:
                if predicate(record) and errors:
                    raise errors.pop(0)
        await super().upsert(records)


@pytest.fixture
def sample_text() -> str:
    return make_sample_text()


@pytest.fixture
def pipeline_settings() -> IngestionPipelineSettings:
    """Default chunking with zero backoff so retries don't slow the suite."""
    return IngestionPipelineSettings(
        chunk_size=1000,
        chunk_overlap=200,
        max_attempts=3,
        initial_backoff_s=0.0,
        max_backoff_s=0.0,
        max_concurrency=1,
        document_timeout_s=10.0,
    )


@pytest.fixture
def fake_embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture
def memory_index() -> FailingVectorIndex:
    return FailingVectorIndex()


@pytest.fixture
def record_store(memory_index: FailingVectorIndex) -> InMemoryRecordStore:
    return InMemoryRecordStore(vector_index=memory_index)


@pytest.fixture
async def test_async_db():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        AsyncSession: Test database session with cleanup (lazy imported to avoid settings issues)
    """
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
    from sqlalchemy.pool import StaticPool

    from chunkbridge.boundary.db.base import Base
    from chunkbridge.boundary.db.models.document_chunk_model import DocumentChunkModel  # noqa: F401

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()
