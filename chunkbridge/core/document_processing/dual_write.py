"""
Dual-write coordinator for chunk ingestion.

For every chunk, in order: assign id -> embed -> upsert vector -> insert row.
The vector write is acknowledged before the row insert begins, so a row can
never point at a missing vector. The reverse (vector without row) is the
accepted partial-failure window; it is logged with the chunk id and left for
external reconciliation.

Transient failures are retried with exponential jittered backoff through
tenacity; permanent failures fail the chunk immediately. The first failed
chunk stops the document; chunks persisted before it stay persisted.

Dependencies: tenacity, asyncio
System role: Write ordering, retry and failure containment for one document
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from chunkbridge.boundary.vdb.vector_schemas import VectorRecord
from chunkbridge.core.exceptions import (
    IngestionTimeoutError,
    PartialConsistencyError,
    TransientExternalError,
    ValidationError,
)
from chunkbridge.observability.log_utils import (
    log_exception_with_context,
    log_with_context,
)

from .chunk_identity import make_chunk_id
from .models import (
    Chunk,
    ChunkOutcome,
    ChunkSpan,
    ChunkState,
    ContentType,
    DocumentWriteResult,
    SourceDocument,
)
from .ports import ChunkRecordStore, Embedder, VectorIndex

logger = logging.getLogger(__name__)

T = TypeVar("T")


def build_chunk_metadata(
    base_metadata: dict[str, Any],
    document_id: str,
    index: int,
    total_chunks: int,
    content_type: ContentType,
    text: str,
) -> dict[str, Any]:
    """Merge caller metadata with pipeline keys; pipeline keys win on collision."""
    return {
        **base_metadata,
        "sourceId": document_id,
        "chunkIndex": index,
        "totalChunks": total_chunks,
        "type": content_type.value,
        "text": text,
    }


def build_record_fields(chunk: Chunk, document_id: str) -> dict[str, Any]:
    """Relational row fields for a chunk; embeddingId is the vector key."""
    return {
        "id": chunk.id,
        "content": chunk.content,
        "contentType": chunk.content_type.value,
        "metadata": chunk.metadata,
        "documentId": document_id,
        "embeddingId": chunk.id,
    }


class DualWriteCoordinator:
    """Write each chunk of a document to the vector index, then the relational store."""

    def __init__(
        self,
        embedder: Embedder,
        max_attempts: int = 3,
        initial_backoff_s: float = 0.5,
        max_backoff_s: float = 8.0,
        max_concurrency: int = 1,
        document_timeout_s: float | None = 300.0,
    ) -> None:
        """
        Initialize coordinator.

        Args:
            embedder: Embedding collaborator
            max_attempts: Attempts per external call for transient failures
            initial_backoff_s: First backoff interval in seconds
            max_backoff_s: Upper bound for a single backoff in seconds
            max_concurrency: Chunks in flight at once (1 = strictly sequential)
            document_timeout_s: Deadline for one document (None disables)
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")

        self._embedder = embedder
        self.max_attempts = max_attempts
        self.initial_backoff_s = initial_backoff_s
        self.max_backoff_s = max_backoff_s
        self.max_concurrency = max_concurrency
        self.document_timeout_s = document_timeout_s

    def _log_retry(self, retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            f"{__name__}:_call_with_retry - Retry {retry_state.attempt_number}/{self.max_attempts} "
            f"after transient failure",
            extra={"error": str(exc)},
        )

    async def _call_with_retry(self, func: Callable[..., Awaitable[T]], *args: Any) -> T:
        """Await func(*args), retrying TransientExternalError only."""
        retrying = AsyncRetrying(
            retry=retry_if_exception_type(TransientExternalError),
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential_jitter(
                initial=self.initial_backoff_s,
                max=self.max_backoff_s,
                jitter=self.initial_backoff_s,
            ),
            before_sleep=self._log_retry,
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                result = await func(*args)
        return result

    async def _write_chunk(
        self,
        document: SourceDocument,
        span: ChunkSpan,
        total_chunks: int,
        content_type: ContentType,
        vector_index: VectorIndex,
        record_store: ChunkRecordStore,
        outcome: ChunkOutcome,
        accumulator: list[Chunk],
    ) -> bool:
        """
        Run one chunk through embed -> upsert -> insert.

        Returns:
            bool: True when the chunk reached PERSISTED
        """
        chunk_id = make_chunk_id(content_type, document.document_id, span.index)
        outcome.chunk_id = chunk_id
        chunk = Chunk(
            id=chunk_id,
            index=span.index,
            total_chunks=total_chunks,
            content=span.content,
            content_type=content_type,
            metadata=build_chunk_metadata(
                document.base_metadata,
                document.document_id,
                span.index,
                total_chunks,
                content_type,
                span.content,
            ),
        )

        try:
            chunk.embedding = await self._call_with_retry(self._embedder.embed, chunk.content)
            outcome.state = ChunkState.EMBEDDED

            record = VectorRecord(id=chunk.id, values=chunk.embedding, metadata=chunk.metadata)
            await self._call_with_retry(vector_index.upsert, [record])
            outcome.state = ChunkState.VECTOR_STORED

            await self._call_with_retry(
                record_store.create, build_record_fields(chunk, document.document_id)
            )
            outcome.state = ChunkState.PERSISTED
        except Exception as e:
            self._mark_failed(outcome, document.document_id, e)
            return False

        accumulator.append(chunk)
        log_with_context(
            logger,
            logging.DEBUG,
            f"{__name__}:_write_chunk - Chunk persisted",
            document_id=document.document_id,
            chunk_id=chunk_id,
            chunk_index=span.index,
        )
        return True

    def _mark_failed(self, outcome: ChunkOutcome, document_id: str, exc: BaseException) -> None:
        if outcome.state == ChunkState.VECTOR_STORED and outcome.chunk_id:
            outcome.orphaned_vector = True
            orphan = PartialConsistencyError(outcome.chunk_id, document_id, cause=str(exc))
            log_with_context(
                logger,
                logging.WARNING,
                f"{__name__}:_mark_failed - {orphan.message}",
                document_id=document_id,
                chunk_id=outcome.chunk_id,
                chunk_index=outcome.index,
                error=str(exc),
            )
        outcome.state = ChunkState.FAILED
        outcome.error = str(exc) or type(exc).__name__
        log_exception_with_context(
            logger,
            f"{__name__}:_write_chunk - Chunk failed",
            exc,
            document_id=document_id,
            chunk_id=outcome.chunk_id,
            chunk_index=outcome.index,
        )

    async def _run_sequential(self, write_one: Callable[[ChunkSpan], Awaitable[bool]], spans: list[ChunkSpan]) -> None:
        for span in spans:
            if not await write_one(span):
                break

    async def _run_concurrent(self, write_one: Callable[[ChunkSpan], Awaitable[bool]], spans: list[ChunkSpan]) -> None:
        semaphore = asyncio.Semaphore(self.max_concurrency)
        stop = asyncio.Event()

        async def gated(span: ChunkSpan) -> None:
            async with semaphore:
                # No new chunk starts once any chunk has failed
                if stop.is_set():
                    return
                if not await write_one(span):
                    stop.set()

        await asyncio.gather(*(gated(span) for span in spans))

    async def write_document(
        self,
        document: SourceDocument,
        spans: list[ChunkSpan],
        content_type: ContentType | str,
        vector_index: VectorIndex,
        record_store: ChunkRecordStore,
    ) -> DocumentWriteResult:
        """
        Write every chunk of a document to both stores.

        Args:
            document: Source document (id, text, base metadata)
            spans: Chunker output in index order
            content_type: Source kind used in chunk ids and metadata
            vector_index: Vector index handle for this call
            record_store: Relational store handle for this call

        Returns:
            DocumentWriteResult: Per-chunk outcomes; success only if every chunk persisted

        Raises:
            ValidationError: When spans is empty
        """
        if not spans:
            raise ValidationError("Document produced no chunks", field="text")

        content_type = ContentType(content_type)
        total_chunks = len(spans)
        outcomes = [ChunkOutcome(index=span.index) for span in spans]
        by_index = {o.index: o for o in outcomes}
        accumulator: list[Chunk] = []

        async def write_one(span: ChunkSpan) -> bool:
            return await self._write_chunk(
                document,
                span,
                total_chunks,
                content_type,
                vector_index,
                record_store,
                by_index[span.index],
                accumulator,
            )

        if self.max_concurrency == 1:
            run = self._run_sequential(write_one, spans)
        else:
            run = self._run_concurrent(write_one, spans)

        logger.info(
            f"{__name__}:write_document - Writing {total_chunks} chunks",
            extra={"document_id": document.document_id, "content_type": content_type.value},
        )

        error: str | None = None
        try:
            if self.document_timeout_s is None:
                await run
            else:
                await asyncio.wait_for(run, timeout=self.document_timeout_s)
        except asyncio.TimeoutError:
            timeout_error = IngestionTimeoutError(document.document_id, self.document_timeout_s)
            for outcome in outcomes:
                if outcome.state in (ChunkState.EMBEDDED, ChunkState.VECTOR_STORED) or (
                    outcome.state == ChunkState.PENDING and outcome.chunk_id
                ):
                    self._mark_failed(outcome, document.document_id, timeout_error)
            error = timeout_error.message

        if error is None:
            failed = next((o for o in outcomes if o.state == ChunkState.FAILED), None)
            if failed is not None:
                error = f"Chunk {failed.index} failed: {failed.error}"

        accumulator.sort(key=lambda c: c.index)
        result = DocumentWriteResult(
            document_id=document.document_id,
            total_chunks=total_chunks,
            outcomes=outcomes,
            chunks=accumulator,
            error=error,
        )

        logger.info(
            f"{__name__}:write_document - {len(result.persisted)}/{total_chunks} chunks persisted",
            extra={
                "document_id": document.document_id,
                "success": result.success,
                "orphaned": len(result.orphaned_chunk_ids),
            },
        )
        return result
