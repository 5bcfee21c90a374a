"""
Integration tests for SqlChunkRecordStore and DocumentChunkCRUD.

Uses in-memory SQLite for fast, isolated tests.
Dependencies: pytest, pytest-asyncio, sqlalchemy, aiosqlite
System role: Relational half of the dual write validation
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from chunkbridge.boundary.db.chunk_record_store import SqlChunkRecordStore, to_model_kwargs
from chunkbridge.boundary.db.CRUD.document_chunk_crud import DocumentChunkCRUD
from chunkbridge.boundary.vdb.memory_index import InMemoryVectorIndex
from chunkbridge.core.document_processing.dual_write import DualWriteCoordinator
from chunkbridge.core.document_processing.models import ChunkState, ContentType, SourceDocument
from chunkbridge.core.document_processing.tasks.chunking_task import ChunkingTask
from chunkbridge.core.exceptions import PermanentExternalError, TransientExternalError
from tests.conftest import FakeEmbedder


def chunk_fields(chunk_id: str, document_id: str = "doc-1", index: int = 0) -> dict:
    return {
        "id": chunk_id,
        "content": f"content {index}",
        "contentType": "text",
        "metadata": {"sourceId": document_id, "chunkIndex": index, "totalChunks": 2, "type": "text"},
        "documentId": document_id,
        "embeddingId": chunk_id,
    }


def test_to_model_kwargs_maps_field_names() -> None:
    kwargs = to_model_kwargs(chunk_fields("c-1"))

    assert kwargs == {
        "id": "c-1",
        "content": "content 0",
        "content_type": "text",
        "chunk_metadata": {"sourceId": "doc-1", "chunkIndex": 0, "totalChunks": 2, "type": "text"},
        "document_id": "doc-1",
        "embedding_id": "c-1",
    }


class TestSqlChunkRecordStore:
    """Row writes through an AsyncSession."""

    async def test_create_persists_row(self, test_async_db) -> None:
        store = SqlChunkRecordStore(test_async_db)

        row = await store.create(chunk_fields("text-doc-1-chunk-0-aaaa0000"))

        assert row.id == "text-doc-1-chunk-0-aaaa0000"
        assert row.embedding_id == row.id
        assert row.chunk_metadata["chunkIndex"] == 0
        assert row.created_at is not None

    async def test_crud_queries(self, test_async_db) -> None:
        store = SqlChunkRecordStore(test_async_db)
        crud = DocumentChunkCRUD()
        await store.create(chunk_fields("a", index=0))
        await store.create(chunk_fields("b", index=1))
        await store.create(chunk_fields("other", document_id="doc-2"))

        rows = await crud.get_by_document_id(test_async_db, "doc-1")
        assert {r.id for r in rows} == {"a", "b"}
        assert await crud.count_by_document_id(test_async_db, "doc-1") == 2
        assert (await crud.get_by_embedding_id(test_async_db, "b")).content == "content 1"
        assert await crud.get_by_embedding_id(test_async_db, "missing") is None
        assert await crud.count_by_document_id(test_async_db, "doc-2") == 1
        assert (await crud.get_by_id(test_async_db, "a")).document_id == "doc-1"
        assert await crud.get_by_id(test_async_db, "missing") is None

    async def test_repeated_insert_returns_stored_row(self, test_async_db) -> None:
        """An insert retried after its commit already landed is not a failure."""
        store = SqlChunkRecordStore(test_async_db)
        first = await store.create(chunk_fields("dup"))

        again = await store.create(chunk_fields("dup"))

        assert again.id == first.id
        assert again.embedding_id == "dup"
        assert await DocumentChunkCRUD().count_by_document_id(test_async_db, "doc-1") == 1

    async def test_duplicate_id_with_other_embedding_is_permanent(self, test_async_db) -> None:
        store = SqlChunkRecordStore(test_async_db)
        await store.create(chunk_fields("dup"))
        conflicting = {**chunk_fields("dup"), "embeddingId": "another-vector"}

        with pytest.raises(PermanentExternalError) as exc_info:
            await store.create(conflicting)

        assert exc_info.value.service == "relational_store"
        assert exc_info.value.operation == "create"
        row = await DocumentChunkCRUD().get_by_id(test_async_db, "dup")
        assert row.embedding_id == "dup"
        assert await DocumentChunkCRUD().count_by_document_id(test_async_db, "doc-1") == 1

    async def test_retry_after_lost_commit_acknowledgement(self) -> None:
        stored = MagicMock(embedding_id="c")
        session = MagicMock()
        session.commit = AsyncMock(side_effect=[OperationalError("COMMIT", {}, Exception("connection reset")), None])
        session.rollback = AsyncMock()
        crud = MagicMock()
        crud.create = AsyncMock(side_effect=[MagicMock(), IntegrityError("INSERT", {}, Exception("unique"))])
        crud.get_by_id = AsyncMock(return_value=stored)
        store = SqlChunkRecordStore(session, crud=crud)

        with pytest.raises(TransientExternalError):
            await store.create(chunk_fields("c"))
        row = await store.create(chunk_fields("c"))

        assert row is stored
        crud.get_by_id.assert_awaited_once_with(session, "c")
        assert session.rollback.await_count == 2

    async def test_operational_error_is_transient_and_rolls_back(self) -> None:
        session = MagicMock()
        session.commit = AsyncMock()
        session.rollback = AsyncMock()
        crud = MagicMock()
        crud.create = AsyncMock(side_effect=OperationalError("INSERT", {}, Exception("connection lost")))

        with pytest.raises(TransientExternalError):
            await SqlChunkRecordStore(session, crud=crud).create(chunk_fields("c"))

        session.rollback.assert_awaited_once()
        session.commit.assert_not_awaited()

    async def test_integrity_error_is_permanent(self) -> None:
        session = MagicMock()
        session.commit = AsyncMock(side_effect=IntegrityError("INSERT", {}, Exception("unique")))
        session.rollback = AsyncMock()
        crud = MagicMock()
        crud.create = AsyncMock(return_value=MagicMock())
        crud.get_by_id = AsyncMock(return_value=None)

        with pytest.raises(PermanentExternalError):
            await SqlChunkRecordStore(session, crud=crud).create(chunk_fields("c"))

        session.rollback.assert_awaited_once()

    async def test_cancelled_insert_rolls_back(self) -> None:
        session = MagicMock()
        session.commit = AsyncMock()
        session.rollback = AsyncMock()
        crud = MagicMock()
        crud.create = AsyncMock(side_effect=asyncio.CancelledError())

        with pytest.raises(asyncio.CancelledError):
            await SqlChunkRecordStore(session, crud=crud).create(chunk_fields("c"))

        session.rollback.assert_awaited_once()
        session.commit.assert_not_awaited()

    async def test_deadline_during_insert_leaves_session_usable(self, test_async_db) -> None:
        crud = DocumentChunkCRUD()
        original_create = crud.create

        async def slow_create(session, **kwargs):
            row = await original_create(session, **kwargs)
            await asyncio.sleep(1)
            return row

        crud.create = slow_create
        slow_store = SqlChunkRecordStore(test_async_db, crud=crud)

        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(slow_store.create(chunk_fields("late")), timeout=0.05)

        assert await DocumentChunkCRUD().get_by_id(test_async_db, "late") is None
        await SqlChunkRecordStore(test_async_db).create(chunk_fields("next"))
        assert await DocumentChunkCRUD().count_by_document_id(test_async_db, "doc-1") == 1


class TestConcurrentDualWrite:
    """Concurrent chunk writes sharing one session."""

    async def test_concurrent_chunks_share_one_session(self, test_async_db, sample_text: str) -> None:
        coordinator = DualWriteCoordinator(
            FakeEmbedder(delay_s=0.001),
            max_attempts=3,
            initial_backoff_s=0.0,
            max_backoff_s=0.0,
            max_concurrency=3,
            document_timeout_s=10.0,
        )
        index = InMemoryVectorIndex()
        spans = ChunkingTask(1000, 200).split(sample_text)

        result = await coordinator.write_document(
            SourceDocument(document_id="doc-c", source_text=sample_text),
            spans,
            ContentType.TEXT,
            index,
            SqlChunkRecordStore(test_async_db),
        )

        assert result.success, result.error
        assert [o.state for o in result.outcomes] == [ChunkState.PERSISTED] * 3
        assert result.orphaned_chunk_ids == []
        rows = await DocumentChunkCRUD().get_by_document_id(test_async_db, "doc-c")
        assert {r.id for r in rows} == set(index.keys()) == {c.id for c in result.chunks}
